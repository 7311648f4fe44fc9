"""Decade bucketing, running sums and final statistics."""

from .decades import (
    MIN_YEAR,
    MAX_YEAR,
    DECADE_WIDTH,
    MAX_DECADES,
    NO_BUCKET,
    DecadeBucketer,
    year_from_date,
)
from .accumulator import (
    MIN_PRICE,
    MAX_PRICE,
    MAX_ABS_RETURN,
    PriceFilter,
    DecadeAccumulator,
)
from .finalizer import (
    TRADING_DAYS_PER_YEAR,
    DecadeStatistics,
    annualize,
    finalize,
    return_moments,
)

__all__ = [
    "MIN_YEAR",
    "MAX_YEAR",
    "DECADE_WIDTH",
    "MAX_DECADES",
    "NO_BUCKET",
    "DecadeBucketer",
    "year_from_date",
    "MIN_PRICE",
    "MAX_PRICE",
    "MAX_ABS_RETURN",
    "PriceFilter",
    "DecadeAccumulator",
    "TRADING_DAYS_PER_YEAR",
    "DecadeStatistics",
    "annualize",
    "finalize",
    "return_moments",
]
