from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .stats.accumulator import MAX_ABS_RETURN, MAX_PRICE, MIN_PRICE, PriceFilter
from .stats.decades import DECADE_WIDTH, MAX_YEAR, MIN_YEAR, DecadeBucketer
from .stats.finalizer import TRADING_DAYS_PER_YEAR


@dataclass(frozen=True)
class SummaryConfig:
    # Decade layout
    min_year: int = MIN_YEAR
    max_year: int = MAX_YEAR
    decade_width: int = DECADE_WIDTH

    # Row filters
    min_price: float = MIN_PRICE
    max_price: float = MAX_PRICE
    max_abs_return: float = MAX_ABS_RETURN

    trading_days_per_year: int = TRADING_DAYS_PER_YEAR

    # Worker pool size; None means one worker per CPU
    workers: int | None = None

    file_suffix: str = ".csv"
    chunk_size: int = 100000

    def validate(self) -> None:
        """Raise ValueError on inconsistent settings."""
        if self.min_year > self.max_year:
            raise ValueError(f"min_year ({self.min_year}) must not exceed max_year ({self.max_year})")
        if self.decade_width <= 0:
            raise ValueError(f"decade_width must be positive, got {self.decade_width}")
        if not 0 < self.min_price <= self.max_price:
            raise ValueError(f"Invalid price bounds [{self.min_price}, {self.max_price}]")
        if self.max_abs_return <= 0:
            raise ValueError(f"max_abs_return must be positive, got {self.max_abs_return}")
        if self.trading_days_per_year <= 0:
            raise ValueError(f"trading_days_per_year must be positive, got {self.trading_days_per_year}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")
        if not self.file_suffix:
            raise ValueError("file_suffix must not be empty")

    @property
    def resolved_workers(self) -> int:
        return self.workers or os.cpu_count() or 1

    def bucketer(self) -> DecadeBucketer:
        return DecadeBucketer(self.min_year, self.max_year, self.decade_width)

    def price_filter(self) -> PriceFilter:
        return PriceFilter(self.min_price, self.max_price, self.max_abs_return)


def load_config(config_path: str | Path | None = None, **overrides: Any) -> SummaryConfig:
    """Build a SummaryConfig from an optional YAML file plus overrides.

    The YAML file may hold a ``summary`` section; every key must be a
    SummaryConfig field. Overrides whose value is None are ignored.
    """
    cfg = SummaryConfig()

    if config_path is not None:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        section = raw.get("summary", {}) or {}
        if not isinstance(section, dict):
            raise ValueError("Config 'summary' section must be a mapping")

        known = {f.name for f in fields(SummaryConfig)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ValueError(f"Unknown config key(s) in 'summary': {', '.join(unknown)}")
        cfg = replace(cfg, **section)

    cfg = replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
    cfg.validate()
    return cfg
