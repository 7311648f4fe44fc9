"""Chunked CSV reader for daily OHLCV price files.

Each file starts with a header line that is always discarded. Every following
line must hold exactly seven comma-separated fields:

    date,open,high,low,close,adj_close,volume

Lines that do not parse are dropped without a diagnostic; a malformed line
never aborts the file. ``adj_close`` must be numeric for the line to count but
is not kept.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterator

import pandas as pd


# Column names for raw data (date, O, H, L, C, adjusted C, V)
RAW_COLUMNS = ["date", "open", "high", "low", "close", "adj_close", "volume"]
NUMERIC_COLUMNS = RAW_COLUMNS[1:]
ROW_COLUMNS = ["date", "open", "high", "low", "close", "volume"]

# Catches an eighth field. The parser sizes rows from the first line it sees,
# so a long first line would otherwise be truncated to seven fields.
OVERFLOW_COLUMN = "overflow"

MAX_DATE_LEN = 19

# Lines wider than the parser's expected width are skipped; shorter lines are
# padded with NaN. validate_rows rejects both padded and overflowing rows.
READ_OPTIONS = {
    "header": None,
    "names": RAW_COLUMNS + [OVERFLOW_COLUMN],
    "dtype": str,
    "index_col": False,
    "on_bad_lines": "skip",
    "quoting": csv.QUOTE_NONE,
    "skip_blank_lines": True,
    "encoding_errors": "replace",
}


class FileOpenError(OSError):
    """Raised when a price file cannot be opened."""


def empty_row_frame() -> pd.DataFrame:
    """Return an empty frame with the validated row schema."""
    df = pd.DataFrame({col: pd.Series(dtype="float64") for col in ROW_COLUMNS})
    df["date"] = df["date"].astype("object")
    return df


def validate_rows(raw: pd.DataFrame) -> pd.DataFrame:
    """Keep only rows with exactly seven fields that all parsed.

    Args:
        raw: Frame with RAW_COLUMNS (plus an optional overflow column) read
            as strings

    Returns:
        DataFrame with ROW_COLUMNS, in input order
    """
    if raw.empty:
        return empty_row_frame()

    df = raw.copy()
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col].str.strip(), errors="coerce")

    date_len = df["date"].str.len()
    valid = df[NUMERIC_COLUMNS].notna().all(axis=1) & date_len.between(1, MAX_DATE_LEN)
    if OVERFLOW_COLUMN in df.columns:
        valid &= df[OVERFLOW_COLUMN].isna()

    df = df.loc[valid, ROW_COLUMNS].reset_index(drop=True)
    return df.astype({col: "float64" for col in ROW_COLUMNS[1:]})


def parse_lines(lines: list[str]) -> pd.DataFrame:
    """Parse raw data lines (header already removed) into validated rows."""
    text = "\n".join(line.rstrip("\r\n") for line in lines)
    if not text.strip():
        return empty_row_frame()

    try:
        raw = pd.read_csv(io.StringIO(text), **READ_OPTIONS)
    except pd.errors.EmptyDataError:
        return empty_row_frame()
    return validate_rows(raw)


class CsvReader:
    """Memory-bounded reader for per-instrument price files."""

    def __init__(self, chunk_size: int = 100000):
        """Initialize reader.

        Args:
            chunk_size: Number of data lines parsed per chunk
        """
        self.chunk_size = chunk_size

    def iter_chunks(self, path: str | Path) -> Iterator[pd.DataFrame]:
        """Iterate over a file's validated rows in chunks.

        Args:
            path: File path

        Yields:
            DataFrame chunks, in file order

        Raises:
            FileOpenError: If the file cannot be opened
        """
        try:
            reader = pd.read_csv(path, skiprows=1, chunksize=self.chunk_size, **READ_OPTIONS)
        except pd.errors.EmptyDataError:
            return
        except OSError as e:
            raise FileOpenError(f"Cannot open file: {path}") from e

        with reader:
            try:
                for chunk in reader:
                    yield validate_rows(chunk)
            except pd.errors.EmptyDataError:
                return

    def read_file(self, path: str | Path) -> pd.DataFrame:
        """Read an entire file into a DataFrame of validated rows.

        A header-only or empty file gives an empty frame.

        Raises:
            FileOpenError: If the file cannot be opened
        """
        frames = [chunk for chunk in self.iter_chunks(path) if not chunk.empty]
        if not frames:
            return empty_row_frame()
        if len(frames) == 1:
            return frames[0]
        return pd.concat(frames, ignore_index=True)

    def get_file_stats(self, path: str | Path) -> dict:
        """Count a file's valid rows and find its first and last date.

        Raises:
            FileOpenError: If the file cannot be opened
        """
        row_count = 0
        first_date = None
        last_date = None

        for chunk in self.iter_chunks(path):
            if chunk.empty:
                continue
            row_count += len(chunk)
            first_date = first_date or chunk["date"].iloc[0]
            last_date = chunk["date"].iloc[-1]

        return {"row_count": row_count, "first_date": first_date, "last_date": last_date}
