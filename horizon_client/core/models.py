"""
Data models shared across the client.

Links and paging metadata found in every Horizon resource, the problem
document Horizon returns on errors, and the shape of the signed transaction
values the submission pipeline consumes.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Sequence, runtime_checkable


class Order(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Link:
    """A navigable resource reference."""

    href: str
    templated: bool = False

    @classmethod
    def from_json(cls, payload: dict | None) -> "Link | None":
        if not payload or "href" not in payload:
            return None
        return cls(href=payload["href"], templated=bool(payload.get("templated", False)))


@dataclass(frozen=True)
class PageLinks:
    """The `_links` block of a collection response."""

    self_link: Link
    next_link: Link | None = None
    prev_link: Link | None = None

    @classmethod
    def from_json(cls, payload: dict) -> "PageLinks":
        self_link = Link.from_json(payload.get("self"))
        if self_link is None:
            raise ValueError("missing self link")
        return cls(
            self_link=self_link,
            next_link=Link.from_json(payload.get("next")),
            prev_link=Link.from_json(payload.get("prev")),
        )


@dataclass(frozen=True)
class ErrorResponse:
    """Problem document returned by Horizon along with a non-2xx status."""

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: bytes) -> "ErrorResponse | None":
        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError):
            return None
        if not isinstance(payload, dict):
            return None
        status = payload.get("status")
        return cls(
            type=payload.get("type"),
            title=payload.get("title"),
            status=status if isinstance(status, int) else None,
            detail=payload.get("detail"),
            extras=payload.get("extras") or {},
        )

    @property
    def result_codes(self) -> dict[str, Any]:
        return self.extras.get("result_codes") or {}


# Transaction boundary. Envelope encoding and signing are done elsewhere,
# the client only needs the encoded envelope and what the memo precheck reads.


class OperationKind(str, Enum):
    PAYMENT = "payment"
    PATH_PAYMENT_STRICT_RECEIVE = "path_payment_strict_receive"
    PATH_PAYMENT_STRICT_SEND = "path_payment_strict_send"
    ACCOUNT_MERGE = "account_merge"
    OTHER = "other"


PAYMENT_LIKE_KINDS = frozenset(
    {
        OperationKind.PAYMENT,
        OperationKind.PATH_PAYMENT_STRICT_RECEIVE,
        OperationKind.PATH_PAYMENT_STRICT_SEND,
        OperationKind.ACCOUNT_MERGE,
    }
)


@runtime_checkable
class TransactionOperation(Protocol):
    kind: OperationKind
    destination: str | None


@runtime_checkable
class SignedTransaction(Protocol):
    memo: Any
    operations: Sequence[TransactionOperation]

    def encoded_envelope(self) -> str: ...


@runtime_checkable
class SignedFeeBumpTransaction(Protocol):
    def encoded_envelope(self) -> str: ...


@dataclass(frozen=True)
class OperationRef:
    kind: OperationKind
    destination: str | None = None


@dataclass(frozen=True)
class PreparedTransaction:
    """A transaction already encoded and signed by an external codec.

    `memo` is None (or empty) when the transaction carries no memo.
    """

    envelope: str
    operations: tuple[OperationRef, ...] = ()
    memo: Any = None

    def encoded_envelope(self) -> str:
        return self.envelope


@dataclass(frozen=True)
class PreparedFeeBumpTransaction:
    envelope: str

    def encoded_envelope(self) -> str:
        return self.envelope
