"""
Effect resources, dispatched on `type_i` like operations.

Codes are grouped by tens the way Horizon allocates them: accounts (0-9),
signers (10-19), trustlines (20-29), offers and trades (30-39), data and
sequence (40-49), claimable balances (50-59), sponsorship (60-79),
clawback (80), liquidity pools (90-95) and contracts (96-97).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping

from .base import AssetFields, Resource, SponsorshipChange, jfield, optional, parse_datetime


class EffectType(IntEnum):
    ACCOUNT_CREATED = 0
    ACCOUNT_REMOVED = 1
    ACCOUNT_CREDITED = 2
    ACCOUNT_DEBITED = 3
    ACCOUNT_THRESHOLDS_UPDATED = 4
    ACCOUNT_HOME_DOMAIN_UPDATED = 5
    ACCOUNT_FLAGS_UPDATED = 6
    ACCOUNT_INFLATION_DESTINATION_UPDATED = 7
    SIGNER_CREATED = 10
    SIGNER_REMOVED = 11
    SIGNER_UPDATED = 12
    TRUSTLINE_CREATED = 20
    TRUSTLINE_REMOVED = 21
    TRUSTLINE_UPDATED = 22
    TRUSTLINE_AUTHORIZED = 23
    TRUSTLINE_DEAUTHORIZED = 24
    TRUSTLINE_AUTHORIZED_TO_MAINTAIN_LIABILITIES = 25
    TRUSTLINE_FLAGS_UPDATED = 26
    OFFER_CREATED = 30
    OFFER_REMOVED = 31
    OFFER_UPDATED = 32
    TRADE = 33
    DATA_CREATED = 40
    DATA_REMOVED = 41
    DATA_UPDATED = 42
    SEQUENCE_BUMPED = 43
    CLAIMABLE_BALANCE_CREATED = 50
    CLAIMABLE_BALANCE_CLAIMANT_CREATED = 51
    CLAIMABLE_BALANCE_CLAIMED = 52
    ACCOUNT_SPONSORSHIP_CREATED = 60
    ACCOUNT_SPONSORSHIP_UPDATED = 61
    ACCOUNT_SPONSORSHIP_REMOVED = 62
    TRUSTLINE_SPONSORSHIP_CREATED = 63
    TRUSTLINE_SPONSORSHIP_UPDATED = 64
    TRUSTLINE_SPONSORSHIP_REMOVED = 65
    DATA_SPONSORSHIP_CREATED = 66
    DATA_SPONSORSHIP_UPDATED = 67
    DATA_SPONSORSHIP_REMOVED = 68
    CLAIMABLE_BALANCE_SPONSORSHIP_CREATED = 69
    CLAIMABLE_BALANCE_SPONSORSHIP_UPDATED = 70
    CLAIMABLE_BALANCE_SPONSORSHIP_REMOVED = 71
    SIGNER_SPONSORSHIP_CREATED = 72
    SIGNER_SPONSORSHIP_UPDATED = 73
    SIGNER_SPONSORSHIP_REMOVED = 74
    CLAIMABLE_BALANCE_CLAWED_BACK = 80
    LIQUIDITY_POOL_DEPOSITED = 90
    LIQUIDITY_POOL_WITHDREW = 91
    LIQUIDITY_POOL_TRADE = 92
    LIQUIDITY_POOL_CREATED = 93
    LIQUIDITY_POOL_REMOVED = 94
    LIQUIDITY_POOL_REVOKED = 95
    CONTRACT_CREDITED = 96
    CONTRACT_DEBITED = 97

    @property
    def type_name(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, kw_only=True)
class EffectResponse(Resource):
    type_i: int = jfield()
    type_name: str = jfield("type")
    account: str = jfield()
    account_muxed: str | None = optional()
    account_muxed_id: str | None = optional()
    created_at: datetime = jfield(parse=parse_datetime)

    @property
    def kind(self) -> EffectType:
        return EffectType(self.type_i)


# account


@dataclass(frozen=True, kw_only=True)
class AccountCreatedEffect(EffectResponse):
    starting_balance: str = jfield()


@dataclass(frozen=True, kw_only=True)
class AccountRemovedEffect(EffectResponse):
    pass


@dataclass(frozen=True, kw_only=True)
class AccountCreditedEffect(AssetFields, EffectResponse):
    amount: str = jfield()


@dataclass(frozen=True, kw_only=True)
class AccountDebitedEffect(AssetFields, EffectResponse):
    amount: str = jfield()


@dataclass(frozen=True, kw_only=True)
class AccountThresholdsUpdatedEffect(EffectResponse):
    low_threshold: int = jfield()
    med_threshold: int = jfield()
    high_threshold: int = jfield()


@dataclass(frozen=True, kw_only=True)
class AccountHomeDomainUpdatedEffect(EffectResponse):
    home_domain: str = jfield(default="")


@dataclass(frozen=True, kw_only=True)
class AccountFlagsUpdatedEffect(EffectResponse):
    auth_required_flag: bool | None = optional()
    auth_revokable_flag: bool | None = optional()
    auth_immutable_flag: bool | None = optional()
    auth_clawback_enabled_flag: bool | None = optional()


@dataclass(frozen=True, kw_only=True)
class AccountInflationDestinationUpdatedEffect(EffectResponse):
    inflation_destination: str | None = optional()


# signers


@dataclass(frozen=True, kw_only=True)
class SignerEffect(EffectResponse):
    weight: int = jfield()
    public_key: str = jfield()
    key: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class SignerCreatedEffect(SignerEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class SignerRemovedEffect(SignerEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class SignerUpdatedEffect(SignerEffect):
    pass


# trustlines


@dataclass(frozen=True, kw_only=True)
class TrustlineEffect(AssetFields, EffectResponse):
    liquidity_pool_id: str | None = optional()
    limit: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class TrustlineCreatedEffect(TrustlineEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class TrustlineRemovedEffect(TrustlineEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class TrustlineUpdatedEffect(TrustlineEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class TrustlineAuthorizationEffect(EffectResponse):
    trustor: str = jfield()
    asset_type: str = jfield()
    asset_code: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class TrustlineAuthorizedEffect(TrustlineAuthorizationEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class TrustlineDeauthorizedEffect(TrustlineAuthorizationEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class TrustlineAuthorizedToMaintainLiabilitiesEffect(TrustlineAuthorizationEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class TrustlineFlagsUpdatedEffect(AssetFields, EffectResponse):
    trustor: str = jfield()
    authorized_flag: bool | None = optional()
    # sic, Horizon's spelling
    authorized_to_maintain_liabilities_flag: bool | None = optional(
        "authorized_to_maintain_liabilites_flag"
    )
    clawback_enabled_flag: bool | None = optional()


# offers and trades


@dataclass(frozen=True, kw_only=True)
class OfferCreatedEffect(EffectResponse):
    pass


@dataclass(frozen=True, kw_only=True)
class OfferRemovedEffect(EffectResponse):
    pass


@dataclass(frozen=True, kw_only=True)
class OfferUpdatedEffect(EffectResponse):
    pass


@dataclass(frozen=True, kw_only=True)
class TradeEffect(EffectResponse):
    seller: str = jfield()
    seller_muxed: str | None = optional()
    offer_id: str = jfield()
    sold_amount: str = jfield()
    sold_asset_type: str = jfield()
    sold_asset_code: str | None = optional()
    sold_asset_issuer: str | None = optional()
    bought_amount: str = jfield()
    bought_asset_type: str = jfield()
    bought_asset_code: str | None = optional()
    bought_asset_issuer: str | None = optional()


# data and sequence


@dataclass(frozen=True, kw_only=True)
class DataCreatedEffect(EffectResponse):
    name: str = jfield()
    value: str = jfield(default="")


@dataclass(frozen=True, kw_only=True)
class DataRemovedEffect(EffectResponse):
    name: str = jfield()


@dataclass(frozen=True, kw_only=True)
class DataUpdatedEffect(EffectResponse):
    name: str = jfield()
    value: str = jfield(default="")


@dataclass(frozen=True, kw_only=True)
class SequenceBumpedEffect(EffectResponse):
    new_seq: str = jfield()


# claimable balances


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceEffect(EffectResponse):
    asset: str = jfield()
    balance_id: str = jfield()
    amount: str = jfield()


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceCreatedEffect(ClaimableBalanceEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceClaimantCreatedEffect(ClaimableBalanceEffect):
    predicate: dict[str, Any] = jfield(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceClaimedEffect(ClaimableBalanceEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceClawedBackEffect(EffectResponse):
    balance_id: str = jfield()


# sponsorship


@dataclass(frozen=True, kw_only=True)
class AccountSponsorshipCreatedEffect(EffectResponse):
    sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class AccountSponsorshipUpdatedEffect(SponsorshipChange, EffectResponse):
    pass


@dataclass(frozen=True, kw_only=True)
class AccountSponsorshipRemovedEffect(EffectResponse):
    former_sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class TrustlineSponsorshipEffect(EffectResponse):
    asset: str | None = optional()
    liquidity_pool_id: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class TrustlineSponsorshipCreatedEffect(TrustlineSponsorshipEffect):
    sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class TrustlineSponsorshipUpdatedEffect(SponsorshipChange, TrustlineSponsorshipEffect):
    pass


@dataclass(frozen=True, kw_only=True)
class TrustlineSponsorshipRemovedEffect(TrustlineSponsorshipEffect):
    former_sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class DataSponsorshipCreatedEffect(EffectResponse):
    data_name: str = jfield()
    sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class DataSponsorshipUpdatedEffect(SponsorshipChange, EffectResponse):
    data_name: str = jfield()


@dataclass(frozen=True, kw_only=True)
class DataSponsorshipRemovedEffect(EffectResponse):
    data_name: str = jfield()
    former_sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceSponsorshipCreatedEffect(EffectResponse):
    balance_id: str = jfield()
    sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceSponsorshipUpdatedEffect(SponsorshipChange, EffectResponse):
    balance_id: str = jfield()


@dataclass(frozen=True, kw_only=True)
class ClaimableBalanceSponsorshipRemovedEffect(EffectResponse):
    balance_id: str = jfield()
    former_sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class SignerSponsorshipCreatedEffect(EffectResponse):
    signer: str = jfield()
    sponsor: str = jfield()


@dataclass(frozen=True, kw_only=True)
class SignerSponsorshipUpdatedEffect(SponsorshipChange, EffectResponse):
    signer: str = jfield()


@dataclass(frozen=True, kw_only=True)
class SignerSponsorshipRemovedEffect(EffectResponse):
    signer: str = jfield()
    former_sponsor: str = jfield()


# liquidity pools


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolDepositedEffect(EffectResponse):
    liquidity_pool: dict[str, Any] = jfield()
    reserves_deposited: list[dict[str, Any]] = jfield(default_factory=list)
    shares_received: str = jfield()


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolWithdrewEffect(EffectResponse):
    liquidity_pool: dict[str, Any] = jfield()
    reserves_received: list[dict[str, Any]] = jfield(default_factory=list)
    shares_redeemed: str = jfield()


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolTradeEffect(EffectResponse):
    liquidity_pool: dict[str, Any] = jfield()
    sold: dict[str, Any] = jfield()
    bought: dict[str, Any] = jfield()


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolCreatedEffect(EffectResponse):
    liquidity_pool: dict[str, Any] = jfield()


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolRemovedEffect(EffectResponse):
    liquidity_pool_id: str = jfield()


@dataclass(frozen=True, kw_only=True)
class LiquidityPoolRevokedEffect(EffectResponse):
    liquidity_pool: dict[str, Any] = jfield()
    reserves_revoked: list[dict[str, Any]] = jfield(default_factory=list)
    shares_revoked: str = jfield()


# contracts


@dataclass(frozen=True, kw_only=True)
class ContractCreditedEffect(AssetFields, EffectResponse):
    contract: str = jfield()
    amount: str = jfield()


@dataclass(frozen=True, kw_only=True)
class ContractDebitedEffect(AssetFields, EffectResponse):
    contract: str = jfield()
    amount: str = jfield()


EFFECT_VARIANTS: Mapping[EffectType, type[EffectResponse]] = MappingProxyType(
    {
        EffectType.ACCOUNT_CREATED: AccountCreatedEffect,
        EffectType.ACCOUNT_REMOVED: AccountRemovedEffect,
        EffectType.ACCOUNT_CREDITED: AccountCreditedEffect,
        EffectType.ACCOUNT_DEBITED: AccountDebitedEffect,
        EffectType.ACCOUNT_THRESHOLDS_UPDATED: AccountThresholdsUpdatedEffect,
        EffectType.ACCOUNT_HOME_DOMAIN_UPDATED: AccountHomeDomainUpdatedEffect,
        EffectType.ACCOUNT_FLAGS_UPDATED: AccountFlagsUpdatedEffect,
        EffectType.ACCOUNT_INFLATION_DESTINATION_UPDATED: AccountInflationDestinationUpdatedEffect,
        EffectType.SIGNER_CREATED: SignerCreatedEffect,
        EffectType.SIGNER_REMOVED: SignerRemovedEffect,
        EffectType.SIGNER_UPDATED: SignerUpdatedEffect,
        EffectType.TRUSTLINE_CREATED: TrustlineCreatedEffect,
        EffectType.TRUSTLINE_REMOVED: TrustlineRemovedEffect,
        EffectType.TRUSTLINE_UPDATED: TrustlineUpdatedEffect,
        EffectType.TRUSTLINE_AUTHORIZED: TrustlineAuthorizedEffect,
        EffectType.TRUSTLINE_DEAUTHORIZED: TrustlineDeauthorizedEffect,
        EffectType.TRUSTLINE_AUTHORIZED_TO_MAINTAIN_LIABILITIES: (
            TrustlineAuthorizedToMaintainLiabilitiesEffect
        ),
        EffectType.TRUSTLINE_FLAGS_UPDATED: TrustlineFlagsUpdatedEffect,
        EffectType.OFFER_CREATED: OfferCreatedEffect,
        EffectType.OFFER_REMOVED: OfferRemovedEffect,
        EffectType.OFFER_UPDATED: OfferUpdatedEffect,
        EffectType.TRADE: TradeEffect,
        EffectType.DATA_CREATED: DataCreatedEffect,
        EffectType.DATA_REMOVED: DataRemovedEffect,
        EffectType.DATA_UPDATED: DataUpdatedEffect,
        EffectType.SEQUENCE_BUMPED: SequenceBumpedEffect,
        EffectType.CLAIMABLE_BALANCE_CREATED: ClaimableBalanceCreatedEffect,
        EffectType.CLAIMABLE_BALANCE_CLAIMANT_CREATED: ClaimableBalanceClaimantCreatedEffect,
        EffectType.CLAIMABLE_BALANCE_CLAIMED: ClaimableBalanceClaimedEffect,
        EffectType.ACCOUNT_SPONSORSHIP_CREATED: AccountSponsorshipCreatedEffect,
        EffectType.ACCOUNT_SPONSORSHIP_UPDATED: AccountSponsorshipUpdatedEffect,
        EffectType.ACCOUNT_SPONSORSHIP_REMOVED: AccountSponsorshipRemovedEffect,
        EffectType.TRUSTLINE_SPONSORSHIP_CREATED: TrustlineSponsorshipCreatedEffect,
        EffectType.TRUSTLINE_SPONSORSHIP_UPDATED: TrustlineSponsorshipUpdatedEffect,
        EffectType.TRUSTLINE_SPONSORSHIP_REMOVED: TrustlineSponsorshipRemovedEffect,
        EffectType.DATA_SPONSORSHIP_CREATED: DataSponsorshipCreatedEffect,
        EffectType.DATA_SPONSORSHIP_UPDATED: DataSponsorshipUpdatedEffect,
        EffectType.DATA_SPONSORSHIP_REMOVED: DataSponsorshipRemovedEffect,
        EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_CREATED: ClaimableBalanceSponsorshipCreatedEffect,
        EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_UPDATED: ClaimableBalanceSponsorshipUpdatedEffect,
        EffectType.CLAIMABLE_BALANCE_SPONSORSHIP_REMOVED: ClaimableBalanceSponsorshipRemovedEffect,
        EffectType.SIGNER_SPONSORSHIP_CREATED: SignerSponsorshipCreatedEffect,
        EffectType.SIGNER_SPONSORSHIP_UPDATED: SignerSponsorshipUpdatedEffect,
        EffectType.SIGNER_SPONSORSHIP_REMOVED: SignerSponsorshipRemovedEffect,
        EffectType.CLAIMABLE_BALANCE_CLAWED_BACK: ClaimableBalanceClawedBackEffect,
        EffectType.LIQUIDITY_POOL_DEPOSITED: LiquidityPoolDepositedEffect,
        EffectType.LIQUIDITY_POOL_WITHDREW: LiquidityPoolWithdrewEffect,
        EffectType.LIQUIDITY_POOL_TRADE: LiquidityPoolTradeEffect,
        EffectType.LIQUIDITY_POOL_CREATED: LiquidityPoolCreatedEffect,
        EffectType.LIQUIDITY_POOL_REMOVED: LiquidityPoolRemovedEffect,
        EffectType.LIQUIDITY_POOL_REVOKED: LiquidityPoolRevokedEffect,
        EffectType.CONTRACT_CREDITED: ContractCreditedEffect,
        EffectType.CONTRACT_DEBITED: ContractDebitedEffect,
    }
)
