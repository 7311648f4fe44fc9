"""Summary pipeline: scan a directory, aggregate in parallel, finalize."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import SummaryConfig
from ..ingest.file_scanner import FileScanner
from ..stats.finalizer import DecadeStatistics, finalize
from .aggregator import AggregationResult, Aggregator


LOGGER = logging.getLogger(__name__)


@dataclass
class SummaryResult:
    """Finalized statistics plus the run counters they came from."""

    decades: list[DecadeStatistics]
    aggregation: AggregationResult
    file_count: int

    @property
    def total_calc_seconds(self) -> float:
        return self.aggregation.total_calc_seconds


class SummaryPipeline:
    """Complete directory-to-statistics pipeline."""

    def __init__(self, data_dir: str | Path, config: Optional[SummaryConfig] = None):
        """Initialize pipeline.

        Args:
            data_dir: Directory with one CSV file per instrument
            config: Run settings
        """
        self.data_dir = Path(data_dir)
        self.config = config or SummaryConfig()

        self.scanner = FileScanner(self.data_dir, suffix=self.config.file_suffix)
        self.aggregator = Aggregator(self.config)

    def run(self) -> SummaryResult:
        """Process every qualifying file in the directory.

        Raises:
            DirectoryError: If the directory cannot be opened
        """
        files = self.scanner.scan()
        LOGGER.info("Found %d files in %s", len(files), self.data_dir)

        aggregation = self.aggregator.run(f.path for f in files)
        decades = finalize(
            aggregation.accumulator,
            self.aggregator.bucketer,
            trading_days=self.config.trading_days_per_year,
        )

        return SummaryResult(decades=decades, aggregation=aggregation, file_count=len(files))


def run_summary(data_dir: str | Path, config: Optional[SummaryConfig] = None) -> SummaryResult:
    """Run the summary pipeline for one directory."""
    return SummaryPipeline(data_dir, config).run()
