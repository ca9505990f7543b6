from quote_ratio.pipeline.account_cache import AccountInfoCache
from quote_ratio.pipeline.aggregator import Aggregator, SwapLeg, SwapResult
from quote_ratio.pipeline.consumer import Consumer, DecodeOutcome
from quote_ratio.pipeline.context import AggregateStats, ProgressObserver, RunContext
from quote_ratio.pipeline.page_fetcher import PageFetcher
from quote_ratio.pipeline.runner import AnalysisSettings, run_analysis
from quote_ratio.pipeline.work_queue import QueueClosed, WorkQueue

__all__ = [
    "AccountInfoCache",
    "AggregateStats",
    "Aggregator",
    "AnalysisSettings",
    "Consumer",
    "DecodeOutcome",
    "PageFetcher",
    "ProgressObserver",
    "QueueClosed",
    "RunContext",
    "SwapLeg",
    "SwapResult",
    "WorkQueue",
    "run_analysis",
]
