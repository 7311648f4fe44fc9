"""Plain-text market summary report.

Layout (one block per non-empty decade, then a timing line):

    Market Summary by Decade:
    Decade 1990-1999:
    Rows used:
    3
    Mean market price:
    105.0000
    Market volatility:
    0.0012 (0.1190%)
    Mean daily return:
    0.048810 (4.8810%)
    Approx annual return:
    ...

    Execution time (parallel sum of threads): 0.000123 seconds
"""

from __future__ import annotations

from typing import Callable, Iterable

from .stats.finalizer import DecadeStatistics


NOT_AVAILABLE = "N/A"


def _pct(value: float, decimals: int) -> str:
    return f"{value:.{decimals}f} ({value * 100:.4f}%)"


def format_decade(stats: DecadeStatistics) -> list[str]:
    """Render one decade block (without the trailing blank line)."""
    lines = [
        f"Decade {stats.label}:",
        "Rows used:",
        f"{stats.row_count}",
        "Mean market price:",
        f"{stats.mean_price:.4f}",
        "Market volatility:",
        _pct(stats.volatility or 0.0, 4),
    ]

    if stats.has_returns:
        lines += [
            "Mean daily return:",
            _pct(stats.mean_daily_return, 6),
            "Approx annual return:",
            _pct(stats.annualized_return, 6),
        ]
    else:
        lines += [
            "Mean daily return:",
            NOT_AVAILABLE,
            "Approx annual return:",
            NOT_AVAILABLE,
        ]
    return lines


def format_report(decades: Iterable[DecadeStatistics], total_calc_seconds: float) -> str:
    """Render the full report as a single string ending in a newline."""
    lines = ["", "Market Summary by Decade:"]
    for stats in decades:
        lines += format_decade(stats)
        lines.append("")
    lines.append(f"Execution time (parallel sum of threads): {total_calc_seconds:.6f} seconds")
    return "\n".join(lines) + "\n"


def print_report(
    decades: Iterable[DecadeStatistics],
    total_calc_seconds: float,
    echo: Callable[[str], None] = print,
) -> None:
    """Write the report through ``echo`` (print by default)."""
    echo(format_report(decades, total_calc_seconds).rstrip("\n"))
