from .base import Resource, decode_structure
from .effects import EFFECT_VARIANTS, EffectResponse, EffectType
from .operations import OPERATION_VARIANTS, OperationResponse, OperationType
from .resources import AccountResponse, LedgerResponse, TradeResponse, TransactionResponse
from .submission import (
    AsyncTransactionStatus,
    SubmitTransactionAsyncResponse,
    SubmitTransactionResponse,
)

__all__ = [
    "Resource",
    "decode_structure",
    "EFFECT_VARIANTS",
    "EffectResponse",
    "EffectType",
    "OPERATION_VARIANTS",
    "OperationResponse",
    "OperationType",
    "AccountResponse",
    "LedgerResponse",
    "TradeResponse",
    "TransactionResponse",
    "AsyncTransactionStatus",
    "SubmitTransactionAsyncResponse",
    "SubmitTransactionResponse",
]
