"""Parallel map-reduce over price files.

Workers pull one file at a time from a shared queue, so a large file never
holds up the rest of the batch. Each worker owns a private
``DecadeAccumulator`` for its whole lifetime and hands it back when the queue
runs dry. The calling thread is the single reducer: it merges each finished
partial accumulator, together with that worker's timing and row counters, into
one global accumulator.

Merge order follows worker completion order, so floating-point sums may differ
in the last bits between runs. Row and return counts are exact.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from ..config import SummaryConfig
from ..ingest.csv_reader import CsvReader, FileOpenError
from ..stats.accumulator import DecadeAccumulator


LOGGER = logging.getLogger(__name__)


@dataclass
class WorkerResult:
    """Everything one worker hands to the reducer."""

    accumulator: DecadeAccumulator
    calc_seconds: float = 0.0
    rows: int = 0
    files_processed: int = 0
    files_skipped: int = 0


@dataclass
class AggregationResult:
    """Merged output of a run."""

    accumulator: DecadeAccumulator
    total_calc_seconds: float = 0.0
    total_rows: int = 0
    files_processed: int = 0
    files_skipped: int = 0
    workers: int = 0
    merges: int = field(default=0, repr=False)


class Aggregator:
    """Run the per-file passes on a thread pool and reduce the results."""

    def __init__(self, config: Optional[SummaryConfig] = None):
        """Initialize aggregator.

        Args:
            config: Filters, bucket layout and pool size
        """
        self.config = config or SummaryConfig()
        self.bucketer = self.config.bucketer()
        self.price_filter = self.config.price_filter()
        self.reader = CsvReader(chunk_size=self.config.chunk_size)
        self._merge_lock = threading.Lock()

    def new_accumulator(self) -> DecadeAccumulator:
        return DecadeAccumulator(self.bucketer.n_decades, self.price_filter)

    def process_file(self, path: str | Path, acc: DecadeAccumulator) -> Optional[tuple[int, float]]:
        """Run the price and return passes for one file into ``acc``.

        Args:
            path: Price file
            acc: Accumulator owned by the calling worker

        Returns:
            (parsed rows, seconds spent accumulating), or None if the file
            was skipped because it could not be opened or has at most one row
        """
        try:
            frame = self.reader.read_file(path)
        except FileOpenError as e:
            LOGGER.warning("Skipping %s: %s", path, e.__cause__ or e)
            return None

        if len(frame) <= 1:
            LOGGER.debug("Skipping %s: %d parsed row(s)", path, len(frame))
            return None

        t1 = time.perf_counter()
        acc.add_frame(frame, self.bucketer)
        t2 = time.perf_counter()

        return len(frame), t2 - t1

    def _worker(self, work: "queue.Queue[Path]") -> WorkerResult:
        result = WorkerResult(accumulator=self.new_accumulator())

        while True:
            try:
                path = work.get_nowait()
            except queue.Empty:
                break

            outcome = self.process_file(path, result.accumulator)
            if outcome is None:
                result.files_skipped += 1
                continue

            rows, seconds = outcome
            result.rows += rows
            result.calc_seconds += seconds
            result.files_processed += 1

        return result

    def merge(self, total: AggregationResult, partial: WorkerResult) -> None:
        """Fold one worker's result into the global result."""
        with self._merge_lock:
            total.accumulator.merge(partial.accumulator)
            total.total_calc_seconds += partial.calc_seconds
            total.total_rows += partial.rows
            total.files_processed += partial.files_processed
            total.files_skipped += partial.files_skipped
            total.merges += 1

    def run(self, paths: Iterable[str | Path]) -> AggregationResult:
        """Aggregate every file into one global accumulator.

        Args:
            paths: Price files to process

        Returns:
            AggregationResult with the merged accumulator and run counters
        """
        paths = [Path(p) for p in paths]
        total = AggregationResult(accumulator=self.new_accumulator())
        if not paths:
            return total

        n_workers = min(self.config.resolved_workers, len(paths))
        total.workers = n_workers

        work: "queue.Queue[Path]" = queue.Queue()
        for path in paths:
            work.put(path)

        LOGGER.info("Processing %d files with %d workers", len(paths), n_workers)

        with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="decade-worker") as executor:
            futures = [executor.submit(self._worker, work) for _ in range(n_workers)]
            for future in as_completed(futures):
                self.merge(total, future.result())

        LOGGER.info(
            "Processed %d files (%d skipped), %d rows in %.3fs of worker time",
            total.files_processed,
            total.files_skipped,
            total.total_rows,
            total.total_calc_seconds,
        )
        return total
