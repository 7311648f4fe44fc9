"""Turn accumulated sums into reportable per-decade statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .accumulator import DecadeAccumulator
from .decades import DecadeBucketer


TRADING_DAYS_PER_YEAR = 252


@dataclass(frozen=True)
class DecadeStatistics:
    """Final statistics for one non-empty decade.

    The return-based fields are None when the decade has no valid return.
    """

    start_year: int
    end_year: int
    row_count: int
    mean_price: float
    return_count: int = 0
    volatility: Optional[float] = None
    mean_daily_return: Optional[float] = None
    annualized_return: Optional[float] = None

    @property
    def label(self) -> str:
        return f"{self.start_year}-{self.end_year}"

    @property
    def has_returns(self) -> bool:
        return self.return_count > 0


def return_moments(sum_return: float, sum_return_sq: float, count: int) -> tuple[float, float]:
    """Mean and population volatility from running sums.

    The variance is clamped at zero before the square root so rounding can
    never surface a negative variance.
    """
    mean_r = sum_return / count
    variance = sum_return_sq / count - mean_r * mean_r
    if variance < 0.0:
        variance = 0.0
    return mean_r, math.sqrt(variance)


def annualize(mean_daily_return: float, trading_days: int = TRADING_DAYS_PER_YEAR) -> float:
    """Compound a mean daily return over a trading year."""
    return (1.0 + mean_daily_return) ** trading_days - 1.0


def finalize(
    acc: DecadeAccumulator,
    bucketer: DecadeBucketer | None = None,
    trading_days: int = TRADING_DAYS_PER_YEAR,
) -> list[DecadeStatistics]:
    """Compute statistics for every bucket with at least one priced row.

    Args:
        acc: Fully merged accumulator
        bucketer: Bucket layout used to fill the accumulator
        trading_days: Compounding periods per year

    Returns:
        DecadeStatistics in increasing decade order; empty buckets omitted
    """
    bucketer = bucketer or DecadeBucketer()
    if acc.n_decades != bucketer.n_decades:
        raise ValueError(
            f"Accumulator has {acc.n_decades} buckets, bucketer expects {bucketer.n_decades}"
        )

    results = []
    for d in range(acc.n_decades):
        rows = int(acc.row_count[d])
        if rows == 0:
            continue

        start_year, end_year = bucketer.decade_range(d)
        mean_price = float(acc.sum_mid_price[d]) / rows
        rets = int(acc.return_count[d])

        if rets == 0:
            results.append(DecadeStatistics(start_year, end_year, rows, mean_price))
            continue

        mean_r, vol = return_moments(float(acc.sum_return[d]), float(acc.sum_return_sq[d]), rets)
        results.append(
            DecadeStatistics(
                start_year=start_year,
                end_year=end_year,
                row_count=rows,
                mean_price=mean_price,
                return_count=rets,
                volatility=vol,
                mean_daily_return=mean_r,
                annualized_return=annualize(mean_r, trading_days),
            )
        )

    return results
