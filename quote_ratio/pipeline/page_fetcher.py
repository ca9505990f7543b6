from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from quote_ratio.core.log import get_logger
from quote_ratio.pipeline.context import RunContext
from quote_ratio.pipeline.work_queue import WorkQueue
from quote_ratio.rpc.chain_provider import ChainRpcProvider
from quote_ratio.rpc.types import ParsedTransaction

logger = get_logger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class PageFetcher:
    """Walks an address's signature history newest-first, one page per iteration."""

    def __init__(
        self,
        provider: ChainRpcProvider,
        address: str,
        page_count: int,
        page_size: int,
        context: RunContext,
        inter_page_delay: float = 0.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.provider = provider
        self.address = address
        self.page_count = max(0, page_count)
        self.page_size = page_size
        self.context = context
        self.inter_page_delay = max(0.0, inter_page_delay)
        self._sleep = sleep
        self.cursor: Optional[str] = None

    async def run(self, queue: WorkQueue[ParsedTransaction]) -> None:
        try:
            for page in range(self.page_count):
                records = await self.provider.list_signatures(self.address, limit=self.page_size, before=self.cursor)
                if not records:
                    logger.info("end_of_history", address=self.address, pages=page)
                    break
                self.cursor = records[-1].signature

                txs = await self.provider.get_transactions([record.signature for record in records])
                bodies = [tx for tx in txs if tx is not None]
                queue.put_batch(bodies)

                self.context.pages_fetched += 1
                self.context.fetched += len(bodies)
                self.context.missing += len(txs) - len(bodies)
                logger.debug(
                    "page_fetched",
                    page=page + 1,
                    signatures=len(records),
                    transactions=len(bodies),
                    cursor=self.cursor,
                )

                if self.inter_page_delay and page + 1 < self.page_count:
                    await self._sleep(self.inter_page_delay)
        finally:
            queue.close()


__all__ = ["PageFetcher"]
