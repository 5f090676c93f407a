import json
from datetime import datetime, timezone

import pytest

from horizon_client.core.exceptions import MalformedResponseError, UnknownVariantError
from horizon_client.decoder import ResourceFamily, UnknownVariant, decode
from horizon_client.responses import (
    EFFECT_VARIANTS,
    OPERATION_VARIANTS,
    AccountResponse,
    EffectType,
    OperationType,
    SubmitTransactionAsyncResponse,
)
from horizon_client.responses.effects import TrustlineFlagsUpdatedEffect
from horizon_client.responses.operations import PaymentOperation
from horizon_client.responses.submission import AsyncTransactionStatus

from .conftest import (
    ACCOUNT_ID,
    DESTINATION_ID,
    TX_HASH,
    account_payload,
    minimal_payload,
    payment_payload,
    transaction_payload,
)


def polymorphic_payload(variant, code) -> bytes:
    payload = minimal_payload(
        variant,
        id="12884905985",
        paging_token="12884905985",
        type_i=code.value,
        type=code.type_name,
    )
    return json.dumps(payload).encode()


def test_every_operation_type_is_registered():
    assert set(OPERATION_VARIANTS) == set(OperationType)


def test_every_effect_type_is_registered():
    assert set(EFFECT_VARIANTS) == set(EffectType)


def test_registries_are_read_only():
    with pytest.raises(TypeError):
        OPERATION_VARIANTS[OperationType.PAYMENT] = AccountResponse


@pytest.mark.parametrize("code", list(OperationType), ids=lambda c: c.type_name)
def test_decode_operation_dispatch(code):
    variant = OPERATION_VARIANTS[code]
    resource = decode(polymorphic_payload(variant, code), ResourceFamily.OPERATION)
    assert type(resource) is variant
    assert resource.kind is code
    assert resource.paging_token == "12884905985"


@pytest.mark.parametrize("code", list(EffectType), ids=lambda c: c.type_name)
def test_decode_effect_dispatch(code):
    variant = EFFECT_VARIANTS[code]
    resource = decode(polymorphic_payload(variant, code), ResourceFamily.EFFECT)
    assert type(resource) is variant
    assert resource.kind is code


def test_decode_payment():
    payment = decode(json.dumps(payment_payload()), ResourceFamily.OPERATION)
    assert isinstance(payment, PaymentOperation)
    assert payment.from_account == ACCOUNT_ID
    assert payment.to_account == DESTINATION_ID
    assert payment.amount == "10.0000000"
    assert payment.asset_type == "native"
    assert payment.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert payment.links["transaction"].href.endswith(TX_HASH)


def test_decode_dispatch_by_type_name():
    payload = payment_payload()
    del payload["type_i"]
    payment = decode(json.dumps(payload), ResourceFamily.OPERATION)
    assert isinstance(payment, PaymentOperation)
    assert payment.type_i == 1


def test_decode_misspelled_liabilities_flag():
    payload = minimal_payload(
        TrustlineFlagsUpdatedEffect,
        id="1-1",
        paging_token="1-1",
        type_i=26,
        type="trustline_flags_updated",
        authorized_to_maintain_liabilites_flag=True,
    )
    effect = decode(json.dumps(payload), ResourceFamily.EFFECT)
    assert effect.authorized_to_maintain_liabilities_flag is True


def test_decode_unknown_operation():
    payload = payment_payload(type_i=99, type="brand_new_operation")
    resource = decode(json.dumps(payload), ResourceFamily.OPERATION)
    assert isinstance(resource, UnknownVariant)
    assert resource.kind == 99
    assert resource.type_name == "brand_new_operation"
    assert resource.paging_token == "12884905985"
    assert resource.payload["amount"] == "10.0000000"


def test_decode_unknown_effect_by_name():
    payload = {"id": "1-2", "paging_token": "1-2", "type": "brand_new_effect"}
    resource = decode(json.dumps(payload), ResourceFamily.EFFECT)
    assert isinstance(resource, UnknownVariant)
    assert resource.kind == "brand_new_effect"


def test_decode_unknown_variant_strict():
    payload = payment_payload(type_i=99)
    with pytest.raises(UnknownVariantError) as exc_info:
        decode(json.dumps(payload), ResourceFamily.OPERATION, strict=True)
    assert exc_info.value.code == 99


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b"[1, 2]",
        json.dumps({"id": "1", "paging_token": "1"}).encode(),
        json.dumps(payment_payload(type_i=None, type=None)).encode(),
        json.dumps(payment_payload(amount=10)).encode(),
        json.dumps(payment_payload(type_i=True, type=None)).encode(),
        json.dumps(payment_payload(created_at="yesterday")).encode(),
        json.dumps(payment_payload(paging_token="")).encode(),
        b"\xff\xfe",
    ],
)
def test_decode_malformed_operation(raw):
    with pytest.raises(MalformedResponseError):
        decode(raw, ResourceFamily.OPERATION)


def test_decode_missing_field_reports_key():
    payload = payment_payload()
    del payload["to"]
    with pytest.raises(MalformedResponseError) as exc_info:
        decode(json.dumps(payload), ResourceFamily.OPERATION)
    assert "'to'" in str(exc_info.value)


def test_decode_account():
    payload = account_payload(DESTINATION_ID, data={"config.memo_required": "MQ=="})
    account = decode(json.dumps(payload), ResourceFamily.ACCOUNT)
    assert isinstance(account, AccountResponse)
    assert account.kind == "account"
    assert account.requires_memo
    assert not decode(json.dumps(account_payload(ACCOUNT_ID)), ResourceFamily.ACCOUNT).requires_memo


def test_decode_transaction():
    tx = decode(json.dumps(transaction_payload()), ResourceFamily.TRANSACTION)
    assert tx.hash == TX_HASH
    assert tx.operation_count == 1
    assert tx.successful


def test_decode_async_submission():
    raw = json.dumps({"tx_status": "DUPLICATE", "hash": TX_HASH})
    result = decode(raw, ResourceFamily.SUBMIT_TRANSACTION_ASYNC)
    assert isinstance(result, SubmitTransactionAsyncResponse)
    assert result.tx_status is AsyncTransactionStatus.DUPLICATE
    with pytest.raises(MalformedResponseError):
        decode(json.dumps({"tx_status": "WHATEVER", "hash": TX_HASH}), "submit_transaction_async")
