"""
Entry point of the client: one Horizon instance, one transport.

    async with HorizonServer("https://horizon-testnet.stellar.org") as server:
        page = await server.payments().for_account(account_id).limit(10).call()
        outcome = await server.submit_transaction(tx)
"""

from typing import Any

from horizon_client import config
from horizon_client.core.query_builder import RequestBuilder
from horizon_client.core.transport import AiohttpTransport, Transport, request
from horizon_client.core.url import join_url
from horizon_client.decoder import ResourceFamily, decode
from horizon_client.responses import AccountResponse, LedgerResponse, TransactionResponse
from horizon_client.submission import SubmissionMode, SubmissionOutcome, SubmissionPipeline


class HorizonServer:
    def __init__(
        self,
        url: str | None = None,
        transport: Transport | None = None,
        strict: bool = False,
    ) -> None:
        self.url = (url or config.HORIZON_URL).rstrip("/")
        self._own_transport = transport is None
        self.transport = transport or AiohttpTransport()
        self.strict = strict
        self.submission = SubmissionPipeline(self.transport, self.url)

    def _builder(self, collection: str, family: ResourceFamily) -> RequestBuilder:
        return RequestBuilder(self.transport, self.url, collection, family, strict=self.strict)

    def operations(self) -> RequestBuilder:
        return self._builder("operations", ResourceFamily.OPERATION)

    def payments(self) -> RequestBuilder:
        return self._builder("payments", ResourceFamily.OPERATION)

    def effects(self) -> RequestBuilder:
        return self._builder("effects", ResourceFamily.EFFECT)

    def transactions(self) -> RequestBuilder:
        return self._builder("transactions", ResourceFamily.TRANSACTION)

    def ledgers(self) -> RequestBuilder:
        return self._builder("ledgers", ResourceFamily.LEDGER)

    def trades(self) -> RequestBuilder:
        return self._builder("trades", ResourceFamily.TRADE)

    async def _detail(self, family: ResourceFamily, *segments) -> Any:
        raw = await request(self.transport, "GET", join_url(self.url, *segments))
        return decode(raw, family, strict=self.strict)

    async def account(self, account_id: str) -> AccountResponse:
        return await self._detail(ResourceFamily.ACCOUNT, "accounts", account_id)

    async def transaction(self, transaction_hash: str) -> TransactionResponse:
        return await self._detail(ResourceFamily.TRANSACTION, "transactions", transaction_hash)

    async def operation(self, operation_id: str):
        return await self._detail(ResourceFamily.OPERATION, "operations", operation_id)

    async def ledger(self, sequence: int) -> LedgerResponse:
        return await self._detail(ResourceFamily.LEDGER, "ledgers", sequence)

    async def check_memo_required(self, tx):
        return await self.submission.check_memo_required(tx)

    async def submit_transaction(self, tx, skip_memo_check: bool = False) -> SubmissionOutcome:
        return await self.submission.submit(tx, SubmissionMode.SYNC, skip_memo_check)

    async def submit_async_transaction(
        self, tx, skip_memo_check: bool = False
    ) -> SubmissionOutcome:
        return await self.submission.submit(tx, SubmissionMode.ASYNC, skip_memo_check)

    async def submit_fee_bump_transaction(self, tx) -> SubmissionOutcome:
        return await self.submission.submit_fee_bump_transaction(tx)

    async def submit_fee_bump_async_transaction(self, tx) -> SubmissionOutcome:
        return await self.submission.submit_fee_bump_async_transaction(tx)

    async def close(self) -> None:
        if self._own_transport and isinstance(self.transport, AiohttpTransport):
            await self.transport.close()

    async def __aenter__(self) -> "HorizonServer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
