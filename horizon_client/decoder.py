"""
Resource decoder: raw bytes in, one typed resource out.

Polymorphic families (operations, effects) are decoded in two passes: the
discriminator is read first, then the whole object is decoded against the
variant registered for it. The registries are read-only mappings built at
import time.
"""

import json
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Mapping

from horizon_client.core.exceptions import MalformedResponseError, UnknownVariantError
from horizon_client.responses.base import Resource, decode_structure, jfield
from horizon_client.responses.effects import EFFECT_VARIANTS, EffectType
from horizon_client.responses.operations import OPERATION_VARIANTS, OperationType
from horizon_client.responses.resources import (
    AccountResponse,
    LedgerResponse,
    TradeResponse,
    TransactionResponse,
)
from horizon_client.responses.submission import (
    SubmitTransactionAsyncResponse,
    SubmitTransactionResponse,
)


class ResourceFamily(str, Enum):
    OPERATION = "operation"
    EFFECT = "effect"
    ACCOUNT = "account"
    TRANSACTION = "transaction"
    LEDGER = "ledger"
    TRADE = "trade"
    SUBMIT_TRANSACTION = "submit_transaction"
    SUBMIT_TRANSACTION_ASYNC = "submit_transaction_async"


@dataclass(frozen=True)
class Polymorphic:
    types: type[IntEnum]
    variants: Mapping[Any, type]


POLYMORPHIC_FAMILIES: Mapping[ResourceFamily, Polymorphic] = {
    ResourceFamily.OPERATION: Polymorphic(OperationType, OPERATION_VARIANTS),
    ResourceFamily.EFFECT: Polymorphic(EffectType, EFFECT_VARIANTS),
}

STRUCTURAL_FAMILIES: Mapping[ResourceFamily, type] = {
    ResourceFamily.ACCOUNT: AccountResponse,
    ResourceFamily.TRANSACTION: TransactionResponse,
    ResourceFamily.LEDGER: LedgerResponse,
    ResourceFamily.TRADE: TradeResponse,
    ResourceFamily.SUBMIT_TRANSACTION: SubmitTransactionResponse,
    ResourceFamily.SUBMIT_TRANSACTION_ASYNC: SubmitTransactionAsyncResponse,
}


@dataclass(frozen=True, kw_only=True)
class UnknownVariant(Resource):
    """A polymorphic resource whose discriminator this client does not know.

    Only the common fields are decoded, the full object is kept in `payload`.
    """

    family: str = jfield()
    code: int | str = jfield()
    type_name: str | None = jfield(default=None)
    payload: dict[str, Any] = jfield(default_factory=dict)

    @property
    def kind(self) -> int | str:
        return self.code


def parse_json(raw: bytes | str) -> Any:
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"invalid JSON: {e}") from e


def read_discriminator(payload: dict, family: ResourceFamily) -> int | str:
    """First pass: find the variant code of a polymorphic object."""
    code = payload.get("type_i")
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    name = payload.get("type")
    if isinstance(name, str) and name:
        return name
    raise MalformedResponseError(f"{family.value}: missing type_i discriminator")


def resolve_variant(family: ResourceFamily, code: int | str) -> type | None:
    spec = POLYMORPHIC_FAMILIES[family]
    if isinstance(code, str):
        member = spec.types.__members__.get(code.upper())
    else:
        try:
            member = spec.types(code)
        except ValueError:
            member = None
    if member is None:
        return None
    return spec.variants.get(member)


def _unknown_variant(payload: dict, family: ResourceFamily, code: int | str) -> UnknownVariant:
    for key in ("id", "paging_token"):
        if not isinstance(payload.get(key), str):
            raise MalformedResponseError(f"{family.value}: missing field '{key}'")
    name = payload.get("type")
    return UnknownVariant(
        id=payload["id"],
        paging_token=payload["paging_token"],
        family=family.value,
        code=code,
        type_name=name if isinstance(name, str) else None,
        payload=payload,
    )


def decode_object(payload: Any, family: ResourceFamily, strict: bool = False) -> Any:
    """Decode an already parsed JSON object of `family`.

    Raises:
        MalformedResponseError: the object does not match its schema.
        UnknownVariantError: only with `strict`, for an unregistered code.
    """
    family = ResourceFamily(family)
    if family in STRUCTURAL_FAMILIES:
        return decode_structure(STRUCTURAL_FAMILIES[family], payload)
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"{family.value}: expected a JSON object")
    code = read_discriminator(payload, family)
    variant = resolve_variant(family, code)
    if variant is None:
        if strict:
            raise UnknownVariantError(family.value, code)
        return _unknown_variant(payload, family, code)
    if isinstance(code, str):
        # a record dispatched by its name still has to carry the numeric code
        payload = {**payload, "type_i": POLYMORPHIC_FAMILIES[family].types[code.upper()].value}
    return decode_structure(variant, payload)


def decode(raw: bytes | str, family: ResourceFamily, strict: bool = False) -> Any:
    """Decode raw JSON bytes into one resource of `family`."""
    return decode_object(parse_json(raw), family, strict=strict)
