# ragsync/ingestion/discovery.py
"""
File discovery for incremental sync.

Finds candidate files under one or more paths, filtered by an extension
allow-list, optionally recursing up to a depth bound. Also defines
SourceFile, the in-memory view of one discovered file for a single run.

Discovery never fails a run: missing or unreadable paths are logged and
reported as scan errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence, Set, Tuple, Union

from ragsync.ingestion.hashing import compute_bytes_hash
from ragsync.logging.logger import get_logger
from ragsync.logging.tags import INGEST

logger = get_logger(__name__)

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".txt", ".md")
DEFAULT_MAX_DEPTH = 10

PathInput = Union[str, Path, Sequence[Union[str, Path]]]


@dataclass(frozen=True)
class SourceFile:
    """
    A discovered file with its content read once for this run.

    `path` is the source identifier used everywhere downstream: chunk
    metadata, chunk ids and store filtering.
    """

    path: str
    content: str
    fingerprint: str

    @classmethod
    def load(cls, path: Union[str, Path]) -> "SourceFile":
        """
        Read a file once and fingerprint its bytes.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8
        """
        data = Path(path).read_bytes()
        return cls(
            path=str(path),
            content=data.decode("utf-8"),
            fingerprint=compute_bytes_hash(data),
        )


@dataclass
class ScanResult:
    """Files found by a scan and the paths that could not be scanned."""

    files: List[str] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def total_scanned(self) -> int:
        return len(self.files)


class FileScanner:
    """
    Discovers files to sync.

    Usage:
        scanner = FileScanner(extensions=[".md"], recursive=True)
        result = scanner.scan(["./docs", "README.md"])
        for path in result.files:
            ...
    """

    def __init__(
        self,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        recursive: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._extensions: Set[str] = {ext.lower() for ext in extensions}
        self._recursive = recursive
        self._max_depth = max_depth

    def scan(self, paths: PathInput) -> ScanResult:
        """
        Scan one or more paths.

        Returns:
            ScanResult with de-duplicated, sorted file paths
        """
        if isinstance(paths, (str, Path)):
            paths = [paths]

        found: Set[str] = set()
        errors: List[Tuple[str, str]] = []

        for path in paths:
            self._scan_path(Path(path), 0, found, errors)

        result = ScanResult(files=sorted(found), errors=errors)
        logger.info(f"{INGEST} Discovered {result.total_scanned} files, {len(errors)} scan errors")
        return result

    def _matches(self, path: Path) -> bool:
        return path.suffix.lower() in self._extensions

    def _scan_path(
        self,
        path: Path,
        depth: int,
        found: Set[str],
        errors: List[Tuple[str, str]],
    ) -> None:
        try:
            if path.is_file():
                if self._matches(path):
                    found.add(str(path))
                return

            if not path.is_dir():
                raise FileNotFoundError(f"No such file or directory: {path}")

            if depth >= self._max_depth:
                logger.warning(f"{INGEST} Max depth reached for {path}")
                return

            for entry in sorted(path.iterdir()):
                if entry.is_file():
                    if self._matches(entry):
                        found.add(str(entry))
                elif entry.is_dir() and self._recursive:
                    self._scan_path(entry, depth + 1, found, errors)

        except OSError as e:
            logger.error(f"{INGEST} Error scanning {path}: {e}")
            errors.append((str(path), str(e)))


def discover_files(
    paths: PathInput,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    recursive: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[str]:
    """
    Convenience function returning only the discovered file paths.
    """
    scanner = FileScanner(extensions=extensions, recursive=recursive, max_depth=max_depth)
    return scanner.scan(paths).files


__all__ = [
    "DEFAULT_EXTENSIONS",
    "DEFAULT_MAX_DEPTH",
    "SourceFile",
    "ScanResult",
    "FileScanner",
    "discover_files",
]
