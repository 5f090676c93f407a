"""
Non-polymorphic resources: one JSON shape per collection.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .base import Resource, jfield, optional, parse_datetime

# base64 of "1", the value SEP-29 expects under MEMO_REQUIRED_KEY
MEMO_REQUIRED_KEY = "config.memo_required"
MEMO_REQUIRED_VALUE = "MQ=="


@dataclass(frozen=True, kw_only=True)
class AccountResponse(Resource):
    account_id: str = jfield()
    sequence: str = jfield()
    sequence_ledger: int | None = optional()
    sequence_time: str | None = optional()
    subentry_count: int = jfield(default=0)
    inflation_destination: str | None = optional()
    home_domain: str | None = optional()
    last_modified_ledger: int | None = optional()
    last_modified_time: str | None = optional()
    thresholds: dict[str, int] = jfield(default_factory=dict)
    flags: dict[str, bool] = jfield(default_factory=dict)
    balances: list[dict[str, Any]] = jfield(default_factory=list)
    signers: list[dict[str, Any]] = jfield(default_factory=list)
    data: dict[str, str] = jfield(default_factory=dict)
    num_sponsoring: int = jfield(default=0)
    num_sponsored: int = jfield(default=0)
    sponsor: str | None = optional()

    @property
    def kind(self) -> str:
        return "account"

    @property
    def requires_memo(self) -> bool:
        return self.data.get(MEMO_REQUIRED_KEY) == MEMO_REQUIRED_VALUE


@dataclass(frozen=True, kw_only=True)
class TransactionResponse(Resource):
    hash: str = jfield()
    successful: bool = jfield(default=True)
    ledger: int = jfield()
    created_at: datetime = jfield(parse=parse_datetime)
    source_account: str = jfield()
    source_account_muxed: str | None = optional()
    source_account_sequence: str = jfield()
    fee_account: str | None = optional()
    fee_charged: str | None = optional()
    max_fee: str | None = optional()
    operation_count: int = jfield()
    memo_type: str = jfield(default="none")
    memo: str | None = optional()
    memo_bytes: str | None = optional()
    signatures: list[str] = jfield(default_factory=list)
    envelope_xdr: str | None = optional()
    result_xdr: str | None = optional()
    result_meta_xdr: str | None = optional()
    fee_meta_xdr: str | None = optional()
    fee_bump_transaction: dict[str, Any] | None = optional()
    inner_transaction: dict[str, Any] | None = optional()
    preconditions: dict[str, Any] | None = optional()

    @property
    def kind(self) -> str:
        return "transaction"


@dataclass(frozen=True, kw_only=True)
class LedgerResponse(Resource):
    hash: str = jfield()
    prev_hash: str | None = optional()
    sequence: int = jfield()
    successful_transaction_count: int = jfield(default=0)
    failed_transaction_count: int | None = optional()
    operation_count: int = jfield(default=0)
    tx_set_operation_count: int | None = optional()
    closed_at: datetime = jfield(parse=parse_datetime)
    total_coins: str = jfield()
    fee_pool: str = jfield()
    base_fee_in_stroops: int | None = optional()
    base_reserve_in_stroops: int | None = optional()
    max_tx_set_size: int | None = optional()
    protocol_version: int = jfield()
    header_xdr: str | None = optional()

    @property
    def kind(self) -> str:
        return "ledger"


@dataclass(frozen=True, kw_only=True)
class TradeResponse(Resource):
    ledger_close_time: datetime = jfield(parse=parse_datetime)
    trade_type: str | None = optional()
    offer_id: str | None = optional()
    liquidity_pool_fee_bp: int | None = optional()
    base_offer_id: str | None = optional()
    base_account: str | None = optional()
    base_liquidity_pool_id: str | None = optional()
    base_amount: str = jfield()
    base_asset_type: str = jfield()
    base_asset_code: str | None = optional()
    base_asset_issuer: str | None = optional()
    counter_offer_id: str | None = optional()
    counter_account: str | None = optional()
    counter_liquidity_pool_id: str | None = optional()
    counter_amount: str = jfield()
    counter_asset_type: str = jfield()
    counter_asset_code: str | None = optional()
    counter_asset_issuer: str | None = optional()
    base_is_seller: bool = jfield(default=False)
    price: dict[str, Any] | None = optional()

    @property
    def kind(self) -> str:
        return "trade"
