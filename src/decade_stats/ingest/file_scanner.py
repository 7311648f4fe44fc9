"""File scanner for discovering per-instrument price files.

Scans a single directory (non-recursive) for daily OHLCV CSV files.
"""

from dataclasses import dataclass
from pathlib import Path


class DirectoryError(OSError):
    """Raised when the input directory cannot be opened."""


@dataclass
class DataFile:
    """Metadata for a data file."""

    path: Path
    filename: str
    file_size: int

    @property
    def instrument(self) -> str:
        return self.path.stem


class FileScanner:
    """Scanner for price files in one directory."""

    def __init__(self, root_dir: str | Path, suffix: str = ".csv"):
        """Initialize scanner.

        Args:
            root_dir: Directory containing one CSV file per instrument
            suffix: Case-sensitive filename suffix to accept
        """
        self.root_dir = Path(root_dir)
        self.suffix = suffix

    def scan(self) -> list[DataFile]:
        """Scan the directory for data files.

        Returns:
            List of DataFile objects sorted by filename

        Raises:
            DirectoryError: If the directory does not exist or cannot be listed
        """
        try:
            entries = list(self.root_dir.iterdir())
        except OSError as e:
            raise DirectoryError(f"Cannot open directory: {self.root_dir}") from e

        files = []
        for entry in entries:
            data_file = self._parse_file(entry)
            if data_file is not None:
                files.append(data_file)

        files.sort(key=lambda f: f.filename)
        return files

    def _parse_file(self, path: Path) -> DataFile | None:
        """Parse a directory entry into DataFile.

        Hidden files, non-regular files and other suffixes are skipped.
        """
        name = path.name
        if name.startswith("."):
            return None
        # A bare ".csv" is hidden anyway; require at least one stem character.
        if len(name) <= len(self.suffix) or not name.endswith(self.suffix):
            return None
        if not path.is_file():
            return None

        return DataFile(
            path=path,
            filename=name,
            file_size=path.stat().st_size,
        )

    def get_file_stats(self) -> dict:
        """Get statistics for the scanned files.

        Returns:
            Dictionary with file statistics
        """
        files = self.scan()

        if not files:
            return {
                "directory": str(self.root_dir),
                "file_count": 0,
                "total_size_mb": 0,
                "instruments": [],
            }

        total_size = sum(f.file_size for f in files)

        return {
            "directory": str(self.root_dir),
            "file_count": len(files),
            "total_size_mb": round(total_size / (1024 * 1024), 2),
            "instruments": [f.instrument for f in files],
        }
