from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol


@dataclass
class AggregateStats:
    sum_out_usd: float = 0.0
    sum_exact_out_usd: float = 0.0

    @property
    def ratio(self) -> Optional[float]:
        """Realized over quoted USD; ``None`` while nothing quoted has been counted."""
        if self.sum_exact_out_usd == 0:
            return None
        return self.sum_out_usd / self.sum_exact_out_usd


@dataclass
class RunContext:
    """Counters shared by the fetcher, the consumer and the reporter."""

    expected_total: int = 0
    pages_fetched: int = 0
    fetched: int = 0
    missing: int = 0
    processed: int = 0
    skipped_failed: int = 0
    skipped_not_routed: int = 0
    decode_failures: int = 0
    accepted: int = 0
    rejected: int = 0
    stats: AggregateStats = field(default_factory=AggregateStats)


class ProgressObserver(Protocol):
    def on_progress(self, context: RunContext) -> None:
        ...


__all__ = ["AggregateStats", "ProgressObserver", "RunContext"]
