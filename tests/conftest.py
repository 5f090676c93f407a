import asyncio
from collections import defaultdict, deque
from contextlib import asynccontextmanager
from dataclasses import MISSING, fields

import pytest
import pytest_asyncio
from aioresponses import aioresponses

from horizon_client import config
from horizon_client.core.transport import AiohttpTransport, StreamConnection
from horizon_client.responses.base import parse_datetime

HORIZON_URL = "https://horizon.example.com"
ACCOUNT_ID = "GAAZI4TCR3TY5OJHCTJC2A4QSY6CJWJH5IAJTGKIN2ER7LBNVKOCCWN7"
DESTINATION_ID = "GBRPYHIL2CI3FNQ4BXLFMNDLFJUNPU2HY3ZMFSHONUCEOASW7QC7OX2H"
OTHER_DESTINATION_ID = "GCEZWKCA5VLDNRLN3RPRJMRZOX3Z6G5CHCGSNFHEYVXM3XOJMDS674JZ"
MUXED_DESTINATION_ID = "MA7QYNF7SOWQ3GLR2BGMZEHXAVIRZA4KVWLTJJFC7MGXUA74P7UJUAAAAAAAAAAAACJUQ"
TX_HASH = "3389e9f0f1a65f19736cacf544c2e825313e8447f569233bb8db39aa607c8889"
CREATED_AT = "2024-05-01T10:00:00Z"


@pytest.fixture(autouse=True)
def setup():
    config.override(HORIZON_URL=HORIZON_URL, STREAM_RETRY_MS=0, PAGE_LIMIT_MAX=200)


@pytest.fixture
def rmock():
    with aioresponses() as m:
        yield m


@pytest_asyncio.fixture
async def transport():
    async with AiohttpTransport() as t:
        yield t


@pytest.fixture
def fake_transport():
    return FakeTransport()


def placeholder(f, key: str):
    """A well-formed value for a required resource field."""
    if f.metadata.get("parse") is parse_datetime:
        return CREATED_AT
    annotation = f.type
    if annotation is int:
        return 1
    if annotation is bool:
        return True
    if annotation is float:
        return 1.0
    if getattr(annotation, "__origin__", None) is dict:
        return {}
    if getattr(annotation, "__origin__", None) is list:
        return []
    return f"{key}-value"


def minimal_payload(cls, **overrides) -> dict:
    """Smallest JSON object `cls` accepts: every required field, nothing else."""
    payload = {}
    for f in fields(cls):
        if f.default is not MISSING or f.default_factory is not MISSING:
            continue
        key = f.metadata.get("json_key") or f.name
        payload[key] = placeholder(f, key)
    payload.update(overrides)
    return payload


def payment_payload(id: str = "12884905985", **overrides) -> dict:
    payload = {
        "_links": {
            "self": {"href": f"{HORIZON_URL}/operations/{id}"},
            "transaction": {"href": f"{HORIZON_URL}/transactions/{TX_HASH}"},
        },
        "id": id,
        "paging_token": id,
        "transaction_successful": True,
        "source_account": ACCOUNT_ID,
        "type": "payment",
        "type_i": 1,
        "created_at": CREATED_AT,
        "transaction_hash": TX_HASH,
        "asset_type": "native",
        "from": ACCOUNT_ID,
        "to": DESTINATION_ID,
        "amount": "10.0000000",
    }
    payload.update(overrides)
    return payload


def account_payload(account_id: str, data: dict | None = None) -> dict:
    return {
        "_links": {"self": {"href": f"{HORIZON_URL}/accounts/{account_id}"}},
        "id": account_id,
        "account_id": account_id,
        "sequence": "120192344791990272",
        "paging_token": account_id,
        "subentry_count": 0,
        "thresholds": {"low_threshold": 0, "med_threshold": 0, "high_threshold": 0},
        "flags": {"auth_required": False, "auth_revocable": False},
        "balances": [{"balance": "100.0000000", "asset_type": "native"}],
        "signers": [{"weight": 1, "key": account_id, "type": "ed25519_public_key"}],
        "data": data or {},
        "num_sponsoring": 0,
        "num_sponsored": 0,
    }


def transaction_payload(hash: str = TX_HASH, **overrides) -> dict:
    payload = {
        "_links": {"self": {"href": f"{HORIZON_URL}/transactions/{hash}"}},
        "id": hash,
        "paging_token": "12884905984",
        "successful": True,
        "hash": hash,
        "ledger": 3,
        "created_at": CREATED_AT,
        "source_account": ACCOUNT_ID,
        "source_account_sequence": "1",
        "fee_charged": "100",
        "max_fee": "100",
        "operation_count": 1,
        "envelope_xdr": "AAAAAgAAAAA=",
        "result_xdr": "AAAAAAAAAGQAAAAAAAAAAQAAAAAAAAABAAAAAAAAAAA=",
        "memo_type": "none",
        "signatures": [],
    }
    payload.update(overrides)
    return payload


def page_payload(records: list, self_href: str, next_href=None, prev_href=None) -> dict:
    links = {"self": {"href": self_href}}
    if next_href:
        links["next"] = {"href": next_href}
    if prev_href:
        links["prev"] = {"href": prev_href}
    return {"_links": links, "_embedded": {"records": records}}


def problem(status: int, title: str, type: str, detail: str = "", extras=None) -> dict:
    payload = {
        "type": f"https://stellar.org/horizon-errors/{type}",
        "title": title,
        "status": status,
        "detail": detail,
    }
    if extras is not None:
        payload["extras"] = extras
    return payload


def sse(*frames: str) -> bytes:
    """Encode SSE frames, each given as its field lines."""
    return "".join(f"{frame}\n\n" for frame in frames).encode()


class FakeTransport:
    """In-memory Transport: scripted answers, recorded calls.

    Unscripted requests answer 404. An unscripted stream connection stays
    silent until the stream is closed.
    """

    def __init__(self):
        self.routes = defaultdict(deque)
        self.calls = []
        self.streams = deque()
        self.stream_calls = []

    def add(self, method: str, url: str, status: int = 200, body: bytes = b"{}"):
        self.routes[(method, url)].append((status, body))

    def fail(self, method: str, url: str, error: Exception):
        self.routes[(method, url)].append(error)

    def add_stream(self, status: int = 200, chunks=(), body: bytes = b""):
        self.streams.append((status, list(chunks), body))

    def fail_stream(self, error: Exception):
        self.streams.append(error)

    async def fetch(self, method, url, headers=None, body=None):
        self.calls.append((method, url, headers, body))
        queue = self.routes.get((method, url))
        if not queue:
            return 404, b'{"status": 404, "title": "Resource Missing"}'
        answer = queue.popleft()
        if isinstance(answer, Exception):
            raise answer
        return answer

    @asynccontextmanager
    async def open_stream(self, url, headers=None):
        self.stream_calls.append((url, dict(headers or {})))
        if not self.streams:
            await asyncio.Event().wait()
        script = self.streams.popleft()
        if isinstance(script, Exception):
            raise script
        status, chunks, body = script

        async def iterate():
            for chunk in chunks:
                yield chunk

        yield StreamConnection(status=status, chunks=iterate(), body=body)
