"""
Pagination engine.

A Page holds one slice of a cursor-addressable collection along with the
`self`/`next`/`prev` links Horizon returned. Turning a page re-issues a GET
on the stored href, untouched: the href already carries cursor, order and
limit.
"""

import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Generic, TypeVar

from horizon_client.core.exceptions import MalformedResponseError, NoSuchPageError
from horizon_client.core.models import Link, PageLinks
from horizon_client.core.transport import Transport, request
from horizon_client.decoder import ResourceFamily, decode_object, parse_json

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decode_page_body(raw: bytes, family: ResourceFamily, strict: bool = False):
    """Decode a `{_links, _embedded: {records}}` envelope.

    A single malformed record fails the whole page.
    """
    payload = parse_json(raw)
    if not isinstance(payload, dict):
        raise MalformedResponseError("page: expected a JSON object")
    try:
        links = PageLinks.from_json(payload.get("_links") or {})
    except ValueError as e:
        raise MalformedResponseError(f"page: {e}") from e
    embedded = payload.get("_embedded")
    if not isinstance(embedded, dict) or not isinstance(embedded.get("records"), list):
        raise MalformedResponseError("page: missing _embedded.records")
    records = [decode_object(record, family, strict=strict) for record in embedded["records"]]
    return records, links


@dataclass(frozen=True)
class Page(Generic[T]):
    records: list[T]
    links: PageLinks
    transport: Transport = field(repr=False, compare=False)
    family: ResourceFamily = ResourceFamily.OPERATION
    strict: bool = False

    @classmethod
    async def fetch(
        cls,
        transport: Transport,
        url: str,
        family: ResourceFamily,
        strict: bool = False,
    ) -> "Page[T]":
        """GET `url` and decode the page it returns."""
        raw = await request(transport, "GET", url)
        records, links = decode_page_body(raw, family, strict=strict)
        logger.debug(f"Fetched {len(records)} {family.value} records from {url}")
        return cls(records=records, links=links, transport=transport, family=family, strict=strict)

    @property
    def self_link(self) -> Link:
        return self.links.self_link

    def has_next(self) -> bool:
        return self.links.next_link is not None

    def has_prev(self) -> bool:
        return self.links.prev_link is not None

    async def next(self) -> "Page[T]":
        """Fetch the following page.

        Raises:
            NoSuchPageError: when Horizon did not provide a next link.
        """
        return await self._follow(self.links.next_link, "next")

    async def prev(self) -> "Page[T]":
        """Fetch the preceding page.

        Raises:
            NoSuchPageError: when Horizon did not provide a prev link.
        """
        return await self._follow(self.links.prev_link, "previous")

    async def _follow(self, link: Link | None, direction: str) -> "Page[T]":
        if link is None:
            raise NoSuchPageError(direction)
        if link.templated:
            raise ValueError(f"cannot follow templated link {link.href}")
        return await Page.fetch(self.transport, link.href, self.family, strict=self.strict)

    async def walk(self) -> AsyncIterator["Page[T]"]:
        """Yield this page, then every following one until an empty page."""
        page = self
        while True:
            yield page
            if not page.records or not page.has_next():
                return
            page = await page.next()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
