"""
Query building for Horizon collection endpoints.

A RequestBuilder accumulates a path and the standard collection parameters
(cursor, order, limit, join, include_failed), then either fetches one page
or opens a stream on the resulting URL.
"""

from horizon_client import config
from horizon_client.core.models import Order
from horizon_client.core.transport import Transport
from horizon_client.core.url import join_url
from horizon_client.decoder import ResourceFamily
from horizon_client.pagination import Page
from horizon_client.streaming.stream import StreamItem

# collection -> resources it may be scoped to
SCOPES = {
    "operations": {"accounts", "ledgers", "transactions"},
    "payments": {"accounts", "ledgers", "transactions"},
    "effects": {"accounts", "ledgers", "operations", "transactions"},
    "transactions": {"accounts", "ledgers"},
    "trades": {"accounts"},
    "ledgers": set(),
}

JOINABLE = {"operations", "payments", "effects"}


class RequestBuilder:
    def __init__(
        self,
        transport: Transport,
        base_url: str,
        collection: str,
        family: ResourceFamily,
        strict: bool = False,
    ) -> None:
        if collection not in SCOPES:
            raise ValueError(f"unknown collection '{collection}'")
        self.transport = transport
        self.base_url = base_url
        self.collection = collection
        self.family = family
        self.strict = strict
        self.scope: tuple[str, str] | None = None
        self.params: dict[str, str | int] = {}

    def _scoped(self, resource: str, value: str | int) -> "RequestBuilder":
        if resource not in SCOPES[self.collection]:
            raise ValueError(f"{self.collection} cannot be listed for {resource}")
        self.scope = (resource, str(value))
        return self

    def for_account(self, account_id: str) -> "RequestBuilder":
        return self._scoped("accounts", account_id)

    def for_ledger(self, sequence: int) -> "RequestBuilder":
        return self._scoped("ledgers", sequence)

    def for_transaction(self, transaction_hash: str) -> "RequestBuilder":
        return self._scoped("transactions", transaction_hash)

    def for_operation(self, operation_id: str) -> "RequestBuilder":
        return self._scoped("operations", operation_id)

    def cursor(self, cursor: str) -> "RequestBuilder":
        self.params["cursor"] = cursor
        return self

    def order(self, order: Order | str) -> "RequestBuilder":
        self.params["order"] = Order(order).value
        return self

    def limit(self, limit: int) -> "RequestBuilder":
        if not 1 <= limit <= config.PAGE_LIMIT_MAX:
            raise ValueError(f"limit must be between 1 and {config.PAGE_LIMIT_MAX}")
        self.params["limit"] = limit
        return self

    def include_failed(self, include: bool = True) -> "RequestBuilder":
        self.params["include_failed"] = "true" if include else "false"
        return self

    def join(self, join: str = "transactions") -> "RequestBuilder":
        if self.collection not in JOINABLE:
            raise ValueError(f"{self.collection} do not support join")
        self.params["join"] = join
        return self

    def url(self) -> str:
        segments = [*self.scope, self.collection] if self.scope else [self.collection]
        return join_url(self.base_url, *segments, **self.params)

    async def call(self) -> Page:
        return await Page.fetch(self.transport, self.url(), self.family, strict=self.strict)

    def stream(self, retry_ms: int | None = None) -> StreamItem:
        """Stream the collection. Ledgers and trades streams start at `cursor` or now."""
        return StreamItem(
            self.transport,
            self.url(),
            self.family,
            cursor=self.params.get("cursor"),
            retry_ms=retry_ms,
            strict=self.strict,
        )
