from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from quote_ratio.pipeline.context import AggregateStats

MAX_OUT_OVER_QUOTE = 10.0


class SwapLeg(BaseModel):
    amm: str

    model_config = ConfigDict(extra="allow")


class SwapResult(BaseModel):
    swap_legs: List[SwapLeg] = Field(validation_alias=AliasChoices("swap_legs", "swapLegs", "swapData"))
    out_amount: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("out_amount", "outAmount")
    )
    exact_out_amount: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("exact_out_amount", "exactOutAmount")
    )
    out_amount_usd: float = Field(
        ge=0,
        validation_alias=AliasChoices("out_amount_usd", "outAmountUSD", "outAmountInUSD"),
    )
    exact_out_amount_usd: float = Field(
        ge=0,
        validation_alias=AliasChoices("exact_out_amount_usd", "exactOutAmountUSD", "exactOutAmountInUSD"),
    )

    model_config = ConfigDict(extra="allow", allow_inf_nan=False)


def coerce_swap_result(result: Any) -> Optional[SwapResult]:
    if isinstance(result, SwapResult):
        return result
    try:
        return SwapResult.model_validate(result, from_attributes=True)
    except ValidationError:
        return None


class Aggregator:
    """Counts swaps routed through a single venue into the running USD sums.

    A result is accepted only when it has exactly one leg on the target venue,
    both raw amounts are present and non-zero, and the realized amount is at
    most ``max_ratio`` times the quoted one. Larger ratios are decoding noise.
    """

    def __init__(self, venue_name: str, stats: AggregateStats, max_ratio: float = MAX_OUT_OVER_QUOTE) -> None:
        self.venue_name = venue_name
        self.stats = stats
        self.max_ratio = max_ratio

    def accept(self, result: Any) -> bool:
        swap = coerce_swap_result(result)
        if swap is None:
            return False
        if len(swap.swap_legs) != 1 or swap.swap_legs[0].amm != self.venue_name:
            return False
        if not swap.out_amount or not swap.exact_out_amount:
            return False
        if swap.out_amount / swap.exact_out_amount > self.max_ratio:
            return False

        self.stats.sum_out_usd += swap.out_amount_usd
        self.stats.sum_exact_out_usd += swap.exact_out_amount_usd
        return True


__all__ = ["Aggregator", "MAX_OUT_OVER_QUOTE", "SwapLeg", "SwapResult", "coerce_swap_result"]
