"""
Operation resources.

Horizon tags every operation with `type_i`; OperationType lists the known
codes and OPERATION_VARIANTS maps each of them to the dataclass describing
its payload. Supporting a new operation is adding a member, a class and a
registry entry.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping

from .base import AssetFields, Resource, jfield, optional, parse_datetime


class OperationType(IntEnum):
    CREATE_ACCOUNT = 0
    PAYMENT = 1
    PATH_PAYMENT_STRICT_RECEIVE = 2
    MANAGE_SELL_OFFER = 3
    CREATE_PASSIVE_SELL_OFFER = 4
    SET_OPTIONS = 5
    CHANGE_TRUST = 6
    ALLOW_TRUST = 7
    ACCOUNT_MERGE = 8
    INFLATION = 9
    MANAGE_DATA = 10
    BUMP_SEQUENCE = 11
    MANAGE_BUY_OFFER = 12
    PATH_PAYMENT_STRICT_SEND = 13
    CREATE_CLAIMABLE_BALANCE = 14
    CLAIM_CLAIMABLE_BALANCE = 15
    BEGIN_SPONSORING_FUTURE_RESERVES = 16
    END_SPONSORING_FUTURE_RESERVES = 17
    REVOKE_SPONSORSHIP = 18
    CLAWBACK = 19
    CLAWBACK_CLAIMABLE_BALANCE = 20
    SET_TRUST_LINE_FLAGS = 21
    LIQUIDITY_POOL_DEPOSIT = 22
    LIQUIDITY_POOL_WITHDRAW = 23
    INVOKE_HOST_FUNCTION = 24
    EXTEND_FOOTPRINT_TTL = 25
    RESTORE_FOOTPRINT = 26

    @property
    def type_name(self) -> str:
        """The string Horizon sends in the `type` field."""
        return self.name.lower()


@dataclass(frozen=True, kw_only=True)
class OperationResponse(Resource):
    type_i: int = jfield()
    type_name: str = jfield("type")
    source_account: str = jfield()
    source_account_muxed: str | None = optional()
    source_account_muxed_id: str | None = optional()
    created_at: datetime = jfield(parse=parse_datetime)
    transaction_hash: str = jfield()
    transaction_successful: bool = jfield(default=True)
    sponsor: str | None = optional()
    transaction: dict[str, Any] | None = optional()

    @property
    def kind(self) -> OperationType:
        return OperationType(self.type_i)


@dataclass(frozen=True, kw_only=True)
class OfferFields:
    amount: str = jfield()
    price: str = jfield()
    price_r: dict[str, Any] | None = optional()
    buying_asset_type: str = jfield()
    buying_asset_code: str | None = optional()
    buying_asset_issuer: str | None = optional()
    selling_asset_type: str = jfield()
    selling_asset_code: str | None = optional()
    selling_asset_issuer: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class PathPaymentFields(AssetFields):
    amount: str = jfield()
    source_amount: str = jfield()
    from_account: str = jfield("from")
    from_muxed: str | None = optional()
    from_muxed_id: str | None = optional()
    to_account: str = jfield("to")
    to_muxed: str | None = optional()
    to_muxed_id: str | None = optional()
    source_asset_type: str = jfield()
    source_asset_code: str | None = optional()
    source_asset_issuer: str | None = optional()
    path: list[dict[str, Any]] = jfield(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class CreateAccountOperation(OperationResponse):
    starting_balance: str = jfield()
    funder: str = jfield()
    funder_muxed: str | None = optional()
    funder_muxed_id: str | None = optional()
    account: str = jfield()


@dataclass(frozen=True, kw_only=True)
class PaymentOperation(AssetFields, OperationResponse):
    amount: str = jfield()
    from_account: str = jfield("from")
    from_muxed: str | None = optional()
    from_muxed_id: str | None = optional()
    to_account: str = jfield("to")
    to_muxed: str | None = optional()
    to_muxed_id: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class PathPaymentStrictReceiveOperation(PathPaymentFields, OperationResponse):
    source_max: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class PathPaymentStrictSendOperation(PathPaymentFields, OperationResponse):
    destination_min: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class ManageSellOfferOperation(OfferFields, OperationResponse):
    offer_id: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class ManageBuyOfferOperation(OfferFields, OperationResponse):
    offer_id: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class CreatePassiveSellOfferOperation(OfferFields, OperationResponse):
    pass


@dataclass(frozen=True, kw_only=True)
class SetOptionsOperation(OperationResponse):
    low_threshold: int | None = optional()
    med_threshold: int | None = optional()
    high_threshold: int | None = optional()
    inflation_destination: str | None = optional("inflation_dest")
    home_domain: str | None = optional()
    signer_key: str | None = optional()
    signer_weight: int | None = optional()
    master_key_weight: int | None = optional()
    set_flags: list[int] | None = optional()
    set_flags_s: list[str] | None = optional()
    clear_flags: list[int] | None = optional()
    clear_flags_s: list[str] | None = optional()


@dataclass(frozen=True, kw_only=True)
class ChangeTrustOperation(OperationResponse):
    asset_type: str = jfield()
    asset_code: str | None = optional()
    asset_issuer: str | None = optional()
    liquidity_pool_id: str | None = optional()
    limit: str | None = optional()
    trustee: str | None = optional()
    trustor: str = jfield()
    trustor_muxed: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class AllowTrustOperation(AssetFields, OperationResponse):
    trustee: str = jfield()
    trustor: str = jfield()
    authorize: bool = jfield(default=False)
    authorize_to_maintain_liabilities: bool | None = optional()


@dataclass(frozen=True, kw_only=True)
class AccountMergeOperation(OperationResponse):
    account: str = jfield()
    account_muxed: str | None = optional()
    into: str = jfield()
    into_muxed: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class InflationOperation(OperationResponse):
    pass


@dataclass(frozen=True, kw_only=True)
class ManageDataOperation(OperationResponse):
    name: str = jfield()
    value: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class BumpSequenceOperation(OperationResponse):
    bump_to: str = jfield()


@dataclass(frozen=True, kw_only=True)
class CreateClaimableBalanceOperation(OperationResponse):
    asset: str = jfield()
    amount: str = jfield()
    claimants: list[dict[str, Any]] = jfield(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class ClaimClaimableBalanceOperation(OperationResponse):
    balance_id: str = jfield()
    claimant: str = jfield()
    claimant_muxed: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class BeginSponsoringFutureReservesOperation(OperationResponse):
    sponsored_id: str = jfield()


@dataclass(frozen=True, kw_only=True)
class EndSponsoringFutureReservesOperation(OperationResponse):
    begin_sponsor: str = jfield()
    begin_sponsor_muxed: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class RevokeSponsorshipOperation(OperationResponse):
    account_id: str | None = optional()
    claimable_balance_id: str | None = optional()
    data_account_id: str | None = optional()
    data_name: str | None = optional()
    offer_id: str | None = optional()
    trustline_account_id: str | None = optional()
    trustline_asset: str | None = optional()
    trustline_liquidity_pool_id: str | None = optional()
    signer_account_id: str | None = optional()
    signer_key: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class ClawbackOperation(AssetFields, OperationResponse):
    from_account: str = jfield("from")
    from_muxed: str | None = optional()
    amount: str = jfield()


@dataclass(frozen=True, kw_only=True)
class ClawbackClaimableBalanceOperation(OperationResponse):
    balance_id: str = jfield()


@dataclass(frozen=True, kw_only=True)
class SetTrustLineFlagsOperation(AssetFields, OperationResponse):
    trustor: str = jfield()
    set_flags: list[int] | None = optional()
    set_flags_s: list[str] | None = optional()
    clear_flags: list[int] | None = optional()
    clear_flags_s: list[str] | None = optional()


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolDepositOperation(OperationResponse):
    liquidity_pool_id: str = jfield()
    reserves_max: list[dict[str, Any]] = jfield(default_factory=list)
    min_price: str | None = optional()
    max_price: str | None = optional()
    reserves_deposited: list[dict[str, Any]] = jfield(default_factory=list)
    shares_received: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolWithdrawOperation(OperationResponse):
    liquidity_pool_id: str = jfield()
    reserves_min: list[dict[str, Any]] = jfield(default_factory=list)
    shares: str = jfield()
    reserves_received: list[dict[str, Any]] = jfield(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class InvokeHostFunctionOperation(OperationResponse):
    function: str = jfield()
    parameters: list[dict[str, Any]] = jfield(default_factory=list)
    address: str | None = optional()
    salt: str | None = optional()
    asset_balance_changes: list[dict[str, Any]] = jfield(default_factory=list)


@dataclass(frozen=True, kw_only=True)
class ExtendFootprintTTLOperation(OperationResponse):
    extend_to: int = jfield()


@dataclass(frozen=True, kw_only=True)
class RestoreFootprintOperation(OperationResponse):
    pass


OPERATION_VARIANTS: Mapping[OperationType, type[OperationResponse]] = MappingProxyType(
    {
        OperationType.CREATE_ACCOUNT: CreateAccountOperation,
        OperationType.PAYMENT: PaymentOperation,
        OperationType.PATH_PAYMENT_STRICT_RECEIVE: PathPaymentStrictReceiveOperation,
        OperationType.MANAGE_SELL_OFFER: ManageSellOfferOperation,
        OperationType.CREATE_PASSIVE_SELL_OFFER: CreatePassiveSellOfferOperation,
        OperationType.SET_OPTIONS: SetOptionsOperation,
        OperationType.CHANGE_TRUST: ChangeTrustOperation,
        OperationType.ALLOW_TRUST: AllowTrustOperation,
        OperationType.ACCOUNT_MERGE: AccountMergeOperation,
        OperationType.INFLATION: InflationOperation,
        OperationType.MANAGE_DATA: ManageDataOperation,
        OperationType.BUMP_SEQUENCE: BumpSequenceOperation,
        OperationType.MANAGE_BUY_OFFER: ManageBuyOfferOperation,
        OperationType.PATH_PAYMENT_STRICT_SEND: PathPaymentStrictSendOperation,
        OperationType.CREATE_CLAIMABLE_BALANCE: CreateClaimableBalanceOperation,
        OperationType.CLAIM_CLAIMABLE_BALANCE: ClaimClaimableBalanceOperation,
        OperationType.BEGIN_SPONSORING_FUTURE_RESERVES: BeginSponsoringFutureReservesOperation,
        OperationType.END_SPONSORING_FUTURE_RESERVES: EndSponsoringFutureReservesOperation,
        OperationType.REVOKE_SPONSORSHIP: RevokeSponsorshipOperation,
        OperationType.CLAWBACK: ClawbackOperation,
        OperationType.CLAWBACK_CLAIMABLE_BALANCE: ClawbackClaimableBalanceOperation,
        OperationType.SET_TRUST_LINE_FLAGS: SetTrustLineFlagsOperation,
        OperationType.LIQUIDITY_POOL_DEPOSIT: LiquidityPoolDepositOperation,
        OperationType.LIQUIDITY_POOL_WITHDRAW: LiquidityPoolWithdrawOperation,
        OperationType.INVOKE_HOST_FUNCTION: InvokeHostFunctionOperation,
        OperationType.EXTEND_FOOTPRINT_TTL: ExtendFootprintTTLOperation,
        OperationType.RESTORE_FOOTPRINT: RestoreFootprintOperation,
    }
)
