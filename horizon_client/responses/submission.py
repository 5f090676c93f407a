"""
Bodies returned by the transaction submission endpoints.
"""

from dataclasses import dataclass
from enum import Enum

from .base import jfield, optional
from .resources import TransactionResponse


@dataclass(frozen=True, kw_only=True)
class SubmitTransactionResponse(TransactionResponse):
    """Answer of `POST /transactions`: the transaction as included in a ledger.

    Per-operation results are carried by `result_xdr`. For a fee-bump
    submission the wrapped transaction is exposed by `inner_transaction`.
    """

    @property
    def inner_transaction_hash(self) -> str | None:
        if not self.inner_transaction:
            return None
        return self.inner_transaction.get("hash")


class AsyncTransactionStatus(str, Enum):
    PENDING = "PENDING"
    DUPLICATE = "DUPLICATE"
    TRY_AGAIN_LATER = "TRY_AGAIN_LATER"
    ERROR = "ERROR"


@dataclass(frozen=True, kw_only=True)
class SubmitTransactionAsyncResponse:
    """Answer of `POST /transactions_async`, also sent with 400/409/503."""

    tx_status: AsyncTransactionStatus = jfield(parse=AsyncTransactionStatus)
    hash: str = jfield()
    error_result_xdr: str | None = optional()

    @property
    def kind(self) -> str:
        return "submit_transaction_async"
