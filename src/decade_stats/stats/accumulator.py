"""Running sums per decade bucket.

A ``DecadeAccumulator`` keeps, for every bucket, just enough to derive the
mean price and the return moments without retaining raw samples:

- sum_mid_price / row_count for the price level
- sum_return / sum_return_sq / return_count for daily returns

Price and return observations pass independent filters, so a row can
contribute a return without contributing a price and vice versa.

The same type plays two roles. A worker owns one as its partial accumulator
and never shares it while mutating it; the aggregator owns a single global one
that only receives ``merge`` calls from one reducer.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from .decades import DecadeBucketer, MAX_DECADES, NO_BUCKET


MIN_PRICE = 0.01
MAX_PRICE = 10000.0
MAX_ABS_RETURN = 1.0


@dataclass(frozen=True)
class PriceFilter:
    """Validity bounds applied before accumulation."""

    min_price: float = MIN_PRICE
    max_price: float = MAX_PRICE
    max_abs_return: float = MAX_ABS_RETURN


class DecadeAccumulator:
    """Per-bucket running sums for price level and daily returns.

    ``record_price`` and ``record_return`` define the filters one row or one
    pair at a time. The aggregator only calls ``add_frame``, which applies the
    same filters to a whole file at once and must agree with the per-row
    methods.
    """

    FIELDS = ("sum_mid_price", "row_count", "sum_return", "sum_return_sq", "return_count")

    def __init__(self, n_decades: int = MAX_DECADES, price_filter: PriceFilter | None = None):
        self.n_decades = n_decades
        self.price_filter = price_filter or PriceFilter()

        self.sum_mid_price = np.zeros(n_decades, dtype="float64")
        self.row_count = np.zeros(n_decades, dtype="int64")
        self.sum_return = np.zeros(n_decades, dtype="float64")
        self.sum_return_sq = np.zeros(n_decades, dtype="float64")
        self.return_count = np.zeros(n_decades, dtype="int64")

    # ------------------------------------------------------------------
    # Per-row updates
    # ------------------------------------------------------------------

    def _price_in_bounds(self, price: float) -> bool:
        return self.price_filter.min_price <= price <= self.price_filter.max_price

    def record_price(self, bucket: int, open_: float, high: float, low: float, close: float) -> bool:
        """Add one row's mid price to a bucket.

        Open and close must both lie in [min_price, max_price].

        Returns:
            True if the row was counted
        """
        if not (self._price_in_bounds(open_) and self._price_in_bounds(close)):
            return False
        self.sum_mid_price[bucket] += (open_ + high + low + close) / 4.0
        self.row_count[bucket] += 1
        return True

    def record_return(self, bucket: int, close: float, next_close: float) -> bool:
        """Add the simple return between two consecutive closes.

        ``bucket`` is the bucket of the earlier row of the pair.

        Returns:
            True if the return was counted
        """
        min_price = self.price_filter.min_price
        if not (close >= min_price and next_close >= min_price and close != 0):
            return False

        r = (next_close - close) / close
        if abs(r) > self.price_filter.max_abs_return:
            return False

        self.sum_return[bucket] += r
        self.sum_return_sq[bucket] += r * r
        self.return_count[bucket] += 1
        return True

    # ------------------------------------------------------------------
    # Per-file update
    # ------------------------------------------------------------------

    def add_frame(self, frame: pd.DataFrame, bucketer: DecadeBucketer) -> None:
        """Accumulate one file's rows, in file order.

        Runs the price pass over every row, then the return pass over every
        consecutive pair of rows. A pair is attributed to the bucket of its
        first row and is kept even when the second row has no bucket.

        Args:
            frame: Validated rows of a single file (see CsvReader)
            bucketer: Year to bucket mapping
        """
        if frame.empty:
            return

        buckets = bucketer.classify_dates(frame["date"])
        open_ = frame["open"].to_numpy(dtype="float64")
        high = frame["high"].to_numpy(dtype="float64")
        low = frame["low"].to_numpy(dtype="float64")
        close = frame["close"].to_numpy(dtype="float64")

        pf = self.price_filter
        has_bucket = buckets != NO_BUCKET

        # Price pass
        price_ok = (
            has_bucket
            & (open_ >= pf.min_price) & (open_ <= pf.max_price)
            & (close >= pf.min_price) & (close <= pf.max_price)
        )
        mid = (open_[price_ok] + high[price_ok] + low[price_ok] + close[price_ok]) / 4.0
        self._add_sums(buckets[price_ok], self.sum_mid_price, self.row_count, mid)

        # Return pass over consecutive pairs (j, j+1)
        if len(close) < 2:
            return

        prev = close[:-1]
        nxt = close[1:]
        pair_ok = has_bucket[:-1] & (prev >= pf.min_price) & (nxt >= pf.min_price) & (prev != 0)

        r = np.zeros_like(prev)
        # inf closes give inf or NaN returns, which fail the bound
        with np.errstate(invalid="ignore", divide="ignore"):
            r[pair_ok] = (nxt[pair_ok] - prev[pair_ok]) / prev[pair_ok]
            pair_ok &= np.abs(r) <= pf.max_abs_return

        pair_buckets = buckets[:-1][pair_ok]
        r = r[pair_ok]
        self._add_sums(pair_buckets, self.sum_return, self.return_count, r)
        self.sum_return_sq += np.bincount(pair_buckets, weights=r * r, minlength=self.n_decades)

    def _add_sums(self, buckets: np.ndarray, sums: np.ndarray, counts: np.ndarray, values: np.ndarray) -> None:
        # bincount sums each bucket's values in input order
        sums += np.bincount(buckets, weights=values, minlength=self.n_decades)
        counts += np.bincount(buckets, minlength=self.n_decades)

    # ------------------------------------------------------------------
    # Reduction
    # ------------------------------------------------------------------

    def merge(self, other: "DecadeAccumulator") -> None:
        """Add another accumulator's sums into this one, in place.

        Commutative and associative up to floating-point rounding.
        """
        if other.n_decades != self.n_decades:
            raise ValueError(
                f"Cannot merge accumulators with {other.n_decades} and {self.n_decades} buckets"
            )
        for name in self.FIELDS:
            getattr(self, name)[:] += getattr(other, name)
