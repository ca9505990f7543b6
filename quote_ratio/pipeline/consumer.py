from __future__ import annotations

from dataclasses import dataclass
from inspect import isawaitable
from typing import Any, Optional

import httpx

from quote_ratio.core.exceptions import UpstreamError
from quote_ratio.core.log import get_logger
from quote_ratio.extractor import Extractor
from quote_ratio.pipeline.aggregator import Aggregator
from quote_ratio.pipeline.context import ProgressObserver, RunContext
from quote_ratio.pipeline.work_queue import WorkQueue
from quote_ratio.rpc.chain_provider import AccountInfoSource
from quote_ratio.rpc.types import ParsedTransaction
from quote_ratio.venues import JUPITER_V6_PROGRAM_ID

logger = get_logger(__name__)

# transport failures stay fatal even when raised from inside the extractor
FATAL_ERRORS = (UpstreamError, httpx.HTTPError)


@dataclass(frozen=True)
class DecodeOutcome:
    signature: str
    result: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Consumer:
    def __init__(
        self,
        extract: Extractor,
        accounts: AccountInfoSource,
        aggregator: Aggregator,
        context: RunContext,
        router_program_id: str = JUPITER_V6_PROGRAM_ID,
        observer: Optional[ProgressObserver] = None,
    ) -> None:
        self.extract = extract
        self.accounts = accounts
        self.aggregator = aggregator
        self.context = context
        self.router_program_id = router_program_id
        self.observer = observer

    async def run(self, queue: WorkQueue[ParsedTransaction]) -> None:
        async for tx in queue:
            self.context.processed += 1
            await self.process(tx)
            if self.observer is not None:
                self.observer.on_progress(self.context)

    async def process(self, tx: ParsedTransaction) -> None:
        if tx.failed:
            self.context.skipped_failed += 1
            return
        if not tx.invokes(self.router_program_id):
            self.context.skipped_not_routed += 1
            return

        outcome = await self.decode(tx)
        if not outcome.ok:
            self.context.decode_failures += 1
            logger.debug("decode_failed", signature=outcome.signature, reason=outcome.error)
            return

        if self.aggregator.accept(outcome.result):
            self.context.accepted += 1
        else:
            self.context.rejected += 1

    async def decode(self, tx: ParsedTransaction) -> DecodeOutcome:
        signature = tx.signature
        try:
            result = self.extract(signature, self.accounts, tx, tx.block_time)
            if isawaitable(result):
                result = await result
        except FATAL_ERRORS:
            raise
        except Exception as exc:
            return DecodeOutcome(signature=signature, error=f"{type(exc).__name__}: {exc}")
        if result is None:
            return DecodeOutcome(signature=signature, error="no swap decoded")
        return DecodeOutcome(signature=signature, result=result)


__all__ = ["Consumer", "DecodeOutcome", "FATAL_ERRORS"]
