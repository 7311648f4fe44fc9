"""Tests for file discovery and CSV row parsing."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from decade_stats.ingest import (
    CsvReader,
    DirectoryError,
    FileOpenError,
    FileScanner,
    parse_lines,
)
from decade_stats.ingest.csv_reader import ROW_COLUMNS


class TestFileScanner:
    """Tests for directory scanning."""

    def test_only_visible_csv_files(self, tmp_path: Path):
        for name in ["b.csv", "a.csv", ".hidden.csv", "c.CSV", "d.txt", "e.csv.bak"]:
            (tmp_path / name).write_text("Date\n")
        (tmp_path / "sub.csv").mkdir()
        (tmp_path / "sub.csv" / "nested.csv").write_text("Date\n")

        files = FileScanner(tmp_path).scan()

        assert [f.filename for f in files] == ["a.csv", "b.csv"]
        assert files[0].instrument == "a"
        assert files[0].path == tmp_path / "a.csv"

    def test_fixture_directory(self, fixtures_dir: Path):
        files = FileScanner(fixtures_dir / "stocks").scan()
        assert [f.filename for f in files] == ["ABC.csv", "EMPTY.csv"]

    def test_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(DirectoryError):
            FileScanner(tmp_path / "missing").scan()

    def test_file_instead_of_directory_raises(self, tmp_path: Path):
        path = tmp_path / "prices.csv"
        path.write_text("Date\n")
        with pytest.raises(DirectoryError):
            FileScanner(path).scan()

    def test_empty_directory(self, tmp_path: Path):
        assert FileScanner(tmp_path).scan() == []
        stats = FileScanner(tmp_path).get_file_stats()
        assert stats["file_count"] == 0
        assert stats["instruments"] == []

    def test_custom_suffix(self, tmp_path: Path):
        (tmp_path / "a.csv").write_text("Date\n")
        (tmp_path / "b.txt").write_text("Date\n")
        files = FileScanner(tmp_path, suffix=".txt").scan()
        assert [f.filename for f in files] == ["b.txt"]


class TestParseLines:
    """Tests for the line parser."""

    def test_valid_lines(self):
        df = parse_lines([
            "1995-01-03,100,102,98,101,100.5,1000\n",
            "1995-01-04,101,103,99,102,101.5,2000\n",
        ])
        assert list(df.columns) == ROW_COLUMNS
        assert len(df) == 2
        assert df["date"].tolist() == ["1995-01-03", "1995-01-04"]
        assert df["close"].tolist() == [101.0, 102.0]
        assert df["volume"].tolist() == [1000.0, 2000.0]
        assert df["open"].dtype == np.float64

    def test_rejects_malformed_lines(self):
        df = parse_lines([
            "1995-01-03,100,102,98,101,100.5,1000",
            "garbage",
            "",
            "1995-01-04,1,2,3",  # too few fields
            "1995-01-05,1,2,3,4,5,6,7",  # too many fields
            "1995-01-06,abc,2,3,4,5,6",  # non-numeric price
            "1995-01-07,1,2,3,4,xyz,6",  # non-numeric adjusted close
            ",1,2,3,4,5,6",  # empty date
            "1995-01-08 00:00:00.000,1,2,3,4,5,6",  # date longer than 19 chars
            "1995-01-09 00:00:00,1,2,3,4,5,6",  # exactly 19 chars
        ])
        assert df["date"].tolist() == ["1995-01-03", "1995-01-09 00:00:00"]

    def test_whitespace_and_crlf(self):
        df = parse_lines(["1995-01-03, 100 ,102,98,101,100.5,1000\r\n"])
        assert len(df) == 1
        assert df["open"].iloc[0] == 100.0
        assert df["volume"].iloc[0] == 1000.0

    def test_wide_first_line_is_rejected(self):
        df = parse_lines([
            "1995-01-03,1,2,3,4,5,6,7",
            "1995-01-04,1,2,3,4,5,6",
            "1995-01-05,1,2,3,4,5,6,7,8",
        ])
        assert df["date"].tolist() == ["1995-01-04"]

    def test_only_plain_decimal_numbers_are_accepted(self):
        df = parse_lines([
            "1995-01-03,1,2,3,4,nan,6",
            "1995-01-04,0x10,2,3,4,5,6",
            "1995-01-05,1,2,3,4,5,100abc",
            "1995-01-06,1e2,2,3,4,5,6",
        ])
        assert df["date"].tolist() == ["1995-01-06"]
        assert df["open"].iloc[0] == 100.0

    def test_no_lines(self):
        df = parse_lines([])
        assert df.empty
        assert list(df.columns) == ROW_COLUMNS


class TestCsvReader:
    """Tests for file reading."""

    def test_header_is_always_skipped(self, write_prices):
        path = write_prices(
            "a.csv",
            [(f"1995-01-0{i}", 1, 1, 1, 1) for i in range(3, 6)],
            header="1995-01-02,1,1,1,1,1,1",
        )
        df = CsvReader().read_file(path)
        assert df["date"].tolist() == ["1995-01-03", "1995-01-04", "1995-01-05"]

    def test_bad_line_does_not_abort_file(self, write_prices):
        path = write_prices("a.csv", [
            ("1995-01-03", 1, 2, 0.5, 1.5),
            "this,line,is,broken",
            ("1995-01-04", 1.5, 2, 1, 1.8),
        ])
        df = CsvReader().read_file(path)
        assert df["close"].tolist() == [1.5, 1.8]

    def test_header_only_file_is_empty(self, fixtures_dir: Path):
        df = CsvReader().read_file(fixtures_dir / "stocks" / "EMPTY.csv")
        assert df.empty
        assert list(df.columns) == ROW_COLUMNS

    def test_zero_byte_file_is_empty(self, tmp_path: Path):
        path = tmp_path / "zero.csv"
        path.write_bytes(b"")
        assert CsvReader().read_file(path).empty

    def test_missing_file_raises_file_open_error(self, tmp_path: Path):
        with pytest.raises(FileOpenError) as excinfo:
            CsvReader().read_file(tmp_path / "missing.csv")
        assert isinstance(excinfo.value, OSError)

    def test_chunked_read_preserves_order(self, write_prices):
        rows = [(f"2001-02-{d:02d}", d, d + 1, d - 0.5, d + 0.5) for d in range(1, 26)]
        path = write_prices("a.csv", rows)

        whole = CsvReader(chunk_size=100000).read_file(path)
        chunked = CsvReader(chunk_size=4).read_file(path)

        assert len(whole) == 25
        assert chunked["date"].tolist() == whole["date"].tolist()
        assert chunked["close"].tolist() == whole["close"].tolist()

    def test_malformed_lines_across_chunk_boundaries(self, tmp_path: Path):
        path = tmp_path / "a.csv"
        path.write_text(
            "Date,Open,High,Low,Close,Adj Close,Volume,Extra\n"
            "2001-02-01,1,1,1,1,1,1,1\n"
            "2001-02-02,2,2,2,2,2,2\n"
            "\n"
            "2001-02-03,3,3\n"
            "2001-02-04,4,4,4,4,4,4\n"
            "2001-02-05,5,5,5,5,5,5,5,5\n"
            "2001-02-06,6,6,6,6,6,6\n"
        )
        df = CsvReader(chunk_size=2).read_file(path)
        assert df["date"].tolist() == ["2001-02-02", "2001-02-04", "2001-02-06"]
        assert df["close"].tolist() == [2.0, 4.0, 6.0]

    def test_iter_chunks_sizes(self, write_prices):
        rows = [(f"2001-02-{d:02d}", 1, 1, 1, 1) for d in range(1, 11)]
        path = write_prices("a.csv", rows)
        sizes = [len(chunk) for chunk in CsvReader(chunk_size=4).iter_chunks(path)]
        assert sizes == [4, 4, 2]

    def test_get_file_stats(self, fixtures_dir: Path):
        stats = CsvReader().get_file_stats(fixtures_dir / "stocks" / "ABC.csv")
        assert stats["row_count"] == 3
        assert stats["first_date"] == "1995-01-03"
        assert stats["last_date"] == "1997-01-03"
