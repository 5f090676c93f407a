"""
Exception handling for the core module.

Every failure the client raises derives from HorizonError. HTTP statuses are
classified once, in STATUS_KINDS, and unexpected conditions are reported to
Sentry when a client is configured.
"""

from enum import Enum

import sentry_sdk

from .models import ErrorResponse


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    NOT_ACCEPTABLE = "not_acceptable"
    DUPLICATE = "duplicate"
    BEFORE_HISTORY = "before_history"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    INTERNAL = "internal"
    NOT_IMPLEMENTED = "not_implemented"
    STALE_HISTORY = "stale_history"
    TIMEOUT = "timeout"
    REQUEST_FAILED = "request_failed"
    TRANSPORT = "transport"
    MALFORMED = "malformed"
    UNKNOWN_VARIANT = "unknown_variant"
    ENCODING = "encoding"


STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    406: ErrorKind.NOT_ACCEPTABLE,
    409: ErrorKind.DUPLICATE,
    410: ErrorKind.BEFORE_HISTORY,
    413: ErrorKind.PAYLOAD_TOO_LARGE,
    429: ErrorKind.RATE_LIMITED,
    500: ErrorKind.INTERNAL,
    501: ErrorKind.NOT_IMPLEMENTED,
    503: ErrorKind.STALE_HISTORY,
    504: ErrorKind.TIMEOUT,
}

# statuses Horizon returns in normal operation, not worth a Sentry event
EXPECTED_STATUSES = {400, 401, 403, 404, 406, 409, 410, 413, 429, 503}


class HorizonError(Exception):
    """Root of every error raised by the client."""

    kind: ErrorKind = ErrorKind.REQUEST_FAILED


class TransportError(HorizonError):
    """Network level failure: DNS, TLS, refused connection, timeout."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, url: str, cause: BaseException | None = None) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"request to {url} failed: {cause!r}")


class DecodeError(HorizonError):
    kind = ErrorKind.MALFORMED


class MalformedResponseError(DecodeError):
    def __init__(self, details: str) -> None:
        self.details = details
        super().__init__(details)


class UnknownVariantError(DecodeError):
    kind = ErrorKind.UNKNOWN_VARIANT

    def __init__(self, family: str, code: int | str) -> None:
        self.family = family
        self.code = code
        super().__init__(f"unknown {family} type: {code}")


class HttpStatusError(HorizonError):
    """Non-2xx answer from Horizon, classified into an ErrorKind."""

    def __init__(self, status: int, body: bytes, url: str | None = None) -> None:
        self.status = status
        self.body = body
        self.url = url
        self.kind = STATUS_KINDS.get(status, ErrorKind.REQUEST_FAILED)
        self.problem = ErrorResponse.from_body(body)
        title = self.problem.title if self.problem and self.problem.title else self.kind.value
        super().__init__(f"{status} {title}")

    @property
    def detail(self) -> str | None:
        return self.problem.detail if self.problem else None


class NoSuchPageError(HorizonError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, direction: str) -> None:
        self.direction = direction
        super().__init__(f"{direction} page not found")


def capture_unexpected(error: Exception, **tags) -> str | None:
    """Report an unexpected condition to Sentry, returns the event id if sent."""
    if not sentry_sdk.get_client().is_active():
        return None
    with sentry_sdk.new_scope() as scope:
        scope.set_tags({k: v for k, v in tags.items() if v is not None})
        return sentry_sdk.capture_exception(error)


def handle_exception(status: int, body: bytes, url: str | None = None):
    """Raise the HttpStatusError matching a non-2xx answer."""
    error = HttpStatusError(status, body, url)
    if status not in EXPECTED_STATUSES:
        capture_unexpected(
            error,
            status=status,
            kind=error.kind.value,
            url=url,
            detail=error.detail,
        )
    raise error
