"""Decade bucket mapping.

A bucket groups every row whose calendar year falls in one fixed ten-year
span counted from the minimum year:

| Bucket | Years      |
|--------|------------|
| 0      | 1900-1909  |
| 1      | 1910-1919  |
| ...    | ...        |
| 19     | 2090-2099  |
| 20     | 2100-2109  |

Only years in [MIN_YEAR, MAX_YEAR] are classified, so the last bucket holds
the single year 2100 with the default range.
"""

from __future__ import annotations

import numpy as np
import pandas as pd


MIN_YEAR = 1900
MAX_YEAR = 2100
DECADE_WIDTH = 10
MAX_DECADES = ((MAX_YEAR - MIN_YEAR) // DECADE_WIDTH) + 1

NO_BUCKET = -1

# Leading integer of a date string, like C's sscanf("%d")
_LEADING_INT = r"^\s*([+-]?\d+)"


class DecadeBucketer:
    """Map calendar years to decade bucket indices."""

    def __init__(
        self,
        min_year: int = MIN_YEAR,
        max_year: int = MAX_YEAR,
        width: int = DECADE_WIDTH,
    ):
        if width <= 0:
            raise ValueError(f"Decade width must be positive, got {width}")
        if min_year > max_year:
            raise ValueError(f"min_year {min_year} is after max_year {max_year}")

        self.min_year = min_year
        self.max_year = max_year
        self.width = width
        self.n_decades = ((max_year - min_year) // width) + 1

    def classify(self, year: int) -> int | None:
        """Return the bucket index for a year, or None if out of range."""
        if year < self.min_year or year > self.max_year:
            return None
        return (year - self.min_year) // self.width

    def classify_years(self, years: np.ndarray) -> np.ndarray:
        """Vectorized classify.

        Args:
            years: Array of years; NaN marks an unparsable year

        Returns:
            int64 array of bucket indices, NO_BUCKET where out of range
        """
        years = np.asarray(years, dtype="float64")
        valid = (years >= self.min_year) & (years <= self.max_year)

        buckets = np.full(years.shape, NO_BUCKET, dtype="int64")
        buckets[valid] = (years[valid].astype("int64") - self.min_year) // self.width
        return buckets

    def classify_dates(self, dates: pd.Series) -> np.ndarray:
        """Classify date strings by their leading year."""
        return self.classify_years(year_from_date(dates))

    def decade_range(self, index: int) -> tuple[int, int]:
        """Return (start_year, end_year) of a bucket."""
        start = self.min_year + index * self.width
        return start, start + self.width - 1


def year_from_date(dates: pd.Series) -> np.ndarray:
    """Extract the leading integer of each date string.

    Args:
        dates: Series of date strings such as "1995-01-03"

    Returns:
        float64 array of years, NaN where no leading integer exists
    """
    if len(dates) == 0:
        return np.empty(0, dtype="float64")

    leading = dates.astype("object").str.extract(_LEADING_INT, expand=False)
    return pd.to_numeric(leading, errors="coerce").to_numpy(dtype="float64")
