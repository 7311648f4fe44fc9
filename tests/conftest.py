from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import numpy as np
import pandas as pd
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

HEADER = "Date,Open,High,Low,Close,Adj Close,Volume"


def format_rows(rows: Sequence[tuple]) -> list[str]:
    """Render (date, open, high, low, close[, volume]) tuples as CSV lines."""
    lines = []
    for row in rows:
        date, o, h, l, c = row[:5]
        volume = row[5] if len(row) > 5 else 1000
        lines.append(f"{date},{o},{h},{l},{c},{c},{volume}")
    return lines


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def write_prices(tmp_path: Path) -> Callable[..., Path]:
    """Write a price file under tmp_path; rows are tuples or raw lines."""

    def _write(name: str, rows: Sequence, header: str | None = HEADER, directory: Path | None = None) -> Path:
        directory = directory or tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        lines = [] if header is None else [header]
        for row in rows:
            lines.extend([row] if isinstance(row, str) else format_rows([row]))
        path = directory / name
        path.write_text("\n".join(lines) + ("\n" if lines else ""))
        return path

    return _write


@pytest.fixture
def random_price_dir(tmp_path: Path) -> Path:
    """Directory of synthetic random-walk files spanning several decades."""
    rng = np.random.default_rng(7)
    out = tmp_path / "random"
    out.mkdir()

    starts = ["1968-03-01", "1979-06-15", "1985-01-02", "1994-11-01", "2003-05-05", "2011-09-09"]
    for i, start in enumerate(starts):
        n = int(rng.integers(300, 3000))
        dates = pd.bdate_range(start, periods=n).strftime("%Y-%m-%d")
        close = 50.0 * np.exp(np.cumsum(rng.normal(0.0003, 0.02, n)))
        open_ = close * (1 + rng.normal(0, 0.005, n))
        high = np.maximum(open_, close) * 1.01
        low = np.minimum(open_, close) * 0.99
        lines = [HEADER] + [
            f"{d},{o:.6f},{h:.6f},{l:.6f},{c:.6f},{c:.6f},{int(v)}"
            for d, o, h, l, c, v in zip(dates, open_, high, low, close, rng.integers(100, 10000, n))
        ]
        (out / f"SYM{i}.csv").write_text("\n".join(lines) + "\n")

    return out
