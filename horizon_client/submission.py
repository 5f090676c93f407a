"""
Transaction submission pipeline.

One call, one attempt: an optional SEP-29 memo precheck on the destinations
of payment-like operations, then a single POST of the encoded envelope. The
outcome is always one of Accepted, MemoRequired or Rejected; nothing is
retried here.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

from horizon_client.core.exceptions import (
    EXPECTED_STATUSES,
    DecodeError,
    ErrorKind,
    HorizonError,
    HttpStatusError,
    TransportError,
    capture_unexpected,
)
from horizon_client.core.models import (
    PAYMENT_LIKE_KINDS,
    SignedFeeBumpTransaction,
    SignedTransaction,
)
from horizon_client.core.transport import SUCCESS_STATUSES, Transport, request
from horizon_client.core.url import join_url
from horizon_client.decoder import ResourceFamily, decode

logger = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}

# async submissions answered with these statuses still carry a result body
ASYNC_RESULT_STATUSES = {400, 409, 503}


class SubmissionMode(str, Enum):
    SYNC = "sync"
    ASYNC = "async"


class EnvelopeEncodingError(HorizonError):
    kind = ErrorKind.ENCODING


@dataclass(frozen=True)
class Accepted:
    result: Any

    @property
    def hash(self) -> str:
        return self.result.hash


@dataclass(frozen=True)
class MemoRequired:
    destination_account_id: str


@dataclass(frozen=True)
class Rejected:
    error_kind: ErrorKind
    error: HorizonError
    details: str | None = None

    @property
    def result_codes(self) -> dict[str, Any]:
        if isinstance(self.error, HttpStatusError) and self.error.problem:
            return self.error.problem.result_codes
        return {}

    @property
    def transaction_code(self) -> str | None:
        return self.result_codes.get("transaction")

    @property
    def operation_codes(self) -> list[str]:
        return list(self.result_codes.get("operations") or [])


SubmissionOutcome = Accepted | MemoRequired | Rejected


def rejected(error: HorizonError) -> Rejected:
    details = error.detail if isinstance(error, HttpStatusError) else str(error)
    return Rejected(error_kind=error.kind, error=error, details=details)


def encode_envelope(tx: SignedTransaction | SignedFeeBumpTransaction) -> bytes:
    """Build the `tx=<envelope>` form body.

    Raises:
        EnvelopeEncodingError: the envelope cannot be produced or percent-encoded.
    """
    try:
        envelope = tx.encoded_envelope()
        return f"tx={quote(envelope, safe='')}".encode("ascii")
    except (ValueError, TypeError) as e:
        raise EnvelopeEncodingError(f"cannot encode transaction envelope: {e}") from e


def memo_check_destinations(tx: SignedTransaction) -> list[str]:
    """Distinct account ids paid by `tx`, in operation order.

    Muxed (M...) destinations are left out.
    """
    destinations: list[str] = []
    for op in tx.operations:
        if op.kind not in PAYMENT_LIKE_KINDS:
            continue
        destination = op.destination
        if not destination or not destination.startswith("G"):
            continue
        if destination not in destinations:
            destinations.append(destination)
    return destinations


class SubmissionPipeline:
    def __init__(self, transport: Transport, base_url: str) -> None:
        self.transport = transport
        self.base_url = base_url

    async def check_memo_required(self, tx: SignedTransaction) -> MemoRequired | Rejected | None:
        """Run the SEP-29 precheck.

        Returns None when the transaction may be posted, MemoRequired for the
        first destination flagged as requiring a memo, Rejected when an
        account lookup failed for another reason than "not found".
        """
        if tx.memo:
            return None
        for account_id in memo_check_destinations(tx):
            url = join_url(self.base_url, "accounts", account_id)
            try:
                raw = await request(self.transport, "GET", url)
                account = decode(raw, ResourceFamily.ACCOUNT)
            except HttpStatusError as e:
                if e.kind is ErrorKind.NOT_FOUND:
                    logger.debug(f"Memo precheck: {account_id} not found, skipping")
                    continue
                return rejected(e)
            except (TransportError, DecodeError) as e:
                return rejected(e)
            if account.requires_memo:
                logger.debug(f"Memo precheck: {account_id} requires a memo")
                return MemoRequired(account_id)
        return None

    async def submit(
        self,
        tx: SignedTransaction | SignedFeeBumpTransaction,
        mode: SubmissionMode = SubmissionMode.SYNC,
        skip_memo_check: bool = False,
    ) -> SubmissionOutcome:
        """Post `tx` once and classify the answer.

        Fee-bump transactions carry no memo or operations of their own and
        never go through the memo precheck.
        """
        try:
            body = encode_envelope(tx)
        except EnvelopeEncodingError as e:
            return rejected(e)
        if not skip_memo_check and isinstance(tx, SignedTransaction):
            stop = await self.check_memo_required(tx)
            if stop is not None:
                return stop
        return await self._post(body, SubmissionMode(mode))

    async def submit_transaction(
        self, tx: SignedTransaction, skip_memo_check: bool = False
    ) -> SubmissionOutcome:
        return await self.submit(tx, SubmissionMode.SYNC, skip_memo_check)

    async def submit_async_transaction(
        self, tx: SignedTransaction, skip_memo_check: bool = False
    ) -> SubmissionOutcome:
        return await self.submit(tx, SubmissionMode.ASYNC, skip_memo_check)

    async def submit_fee_bump_transaction(self, tx: SignedFeeBumpTransaction) -> SubmissionOutcome:
        return await self.submit(tx, SubmissionMode.SYNC, skip_memo_check=True)

    async def submit_fee_bump_async_transaction(
        self, tx: SignedFeeBumpTransaction
    ) -> SubmissionOutcome:
        return await self.submit(tx, SubmissionMode.ASYNC, skip_memo_check=True)

    async def _post(self, body: bytes, mode: SubmissionMode) -> SubmissionOutcome:
        if mode is SubmissionMode.ASYNC:
            url = join_url(self.base_url, "transactions_async")
            family = ResourceFamily.SUBMIT_TRANSACTION_ASYNC
        else:
            url = join_url(self.base_url, "transactions")
            family = ResourceFamily.SUBMIT_TRANSACTION
        try:
            status, raw = await self.transport.fetch("POST", url, headers=FORM_HEADERS, body=body)
        except TransportError as e:
            logger.warning(f"Submission to {url} failed: {e}")
            return rejected(e)

        if status in SUCCESS_STATUSES:
            try:
                return Accepted(decode(raw, family))
            except DecodeError as e:
                capture_unexpected(e, url=url, status=status)
                raise

        if mode is SubmissionMode.ASYNC and status in ASYNC_RESULT_STATUSES:
            try:
                result = decode(raw, family)
            except DecodeError as e:
                logger.debug(f"Async submission answered {status} without a result body: {e}")
            else:
                logger.debug(f"Async submission {result.hash} answered {status}: {result.tx_status}")
                return Accepted(result)

        error = HttpStatusError(status, raw, url)
        if status not in EXPECTED_STATUSES:
            capture_unexpected(error, url=url, status=status, kind=error.kind.value)
        logger.info(f"Submission rejected: {error}")
        return rejected(error)
