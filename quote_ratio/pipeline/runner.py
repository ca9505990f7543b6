from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from quote_ratio.core.log import get_logger
from quote_ratio.extractor import Extractor
from quote_ratio.pipeline.account_cache import AccountInfoCache, SleepFn
from quote_ratio.pipeline.aggregator import Aggregator
from quote_ratio.pipeline.consumer import Consumer
from quote_ratio.pipeline.context import ProgressObserver, RunContext
from quote_ratio.pipeline.page_fetcher import PageFetcher
from quote_ratio.pipeline.work_queue import WorkQueue
from quote_ratio.rpc.chain_provider import ChainRpcProvider
from quote_ratio.rpc.types import ParsedTransaction
from quote_ratio.venues import JUPITER_V6_PROGRAM_ID, Venue

logger = get_logger(__name__)


@dataclass(frozen=True)
class AnalysisSettings:
    venue: Venue
    address: str
    page_count: int = 100
    page_size: int = 1000
    fetch_tx_delay: float = 0.0
    fetch_acc_delay: float = 0.0
    router_program_id: str = JUPITER_V6_PROGRAM_ID

    @property
    def expected_total(self) -> int:
        return self.page_count * self.page_size


async def run_analysis(
    settings: AnalysisSettings,
    provider: ChainRpcProvider,
    extract: Extractor,
    observer: Optional[ProgressObserver] = None,
    sleep: SleepFn = asyncio.sleep,
) -> RunContext:
    """Fetch ``page_count`` pages of history and aggregate every decodable swap.

    The fetcher and the consumer run as two tasks on the current loop. If
    either one raises, the other is cancelled and the error propagates.
    """
    context = RunContext(expected_total=settings.expected_total)
    queue: WorkQueue[ParsedTransaction] = WorkQueue()
    cache = AccountInfoCache(provider, delay=settings.fetch_acc_delay, sleep=sleep)
    fetcher = PageFetcher(
        provider,
        address=settings.address,
        page_count=settings.page_count,
        page_size=settings.page_size,
        context=context,
        inter_page_delay=settings.fetch_tx_delay,
        sleep=sleep,
    )
    consumer = Consumer(
        extract,
        accounts=cache,
        aggregator=Aggregator(settings.venue.display_name, context.stats),
        context=context,
        router_program_id=settings.router_program_id,
        observer=observer,
    )

    logger.info(
        "analysis_started",
        venue=settings.venue.key,
        address=settings.address,
        pages=settings.page_count,
        page_size=settings.page_size,
    )
    producer_task = asyncio.create_task(fetcher.run(queue))
    consumer_task = asyncio.create_task(consumer.run(queue))
    done, pending = await asyncio.wait({producer_task, consumer_task}, return_when=asyncio.FIRST_EXCEPTION)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    for task in (producer_task, consumer_task):
        if task in done and task.exception() is not None:
            raise task.exception()

    logger.info(
        "analysis_finished",
        fetched=context.fetched,
        processed=context.processed,
        accepted=context.accepted,
        decode_failures=context.decode_failures,
        account_lookups=cache.network_calls,
    )
    return context


__all__ = ["AnalysisSettings", "run_analysis"]
