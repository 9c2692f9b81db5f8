"""
Safe file operations for smell-sentinel.

Provides size-limited source reading and source discovery. Nothing here
ever writes to an analyzed file.
"""

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from .exceptions import FileAccessError, InvalidPathError, NoSourcesError
from .scanning.languages import SKIP_DIRS

if TYPE_CHECKING:
    from .config import AnalysisConfig

logger = logging.getLogger(__name__)


def read_source(filepath: Path, max_bytes: int, encoding: str = "utf-8") -> str:
    """
    Read a source file with a size limit.

    Args:
        filepath: File to read
        max_bytes: Largest file size accepted
        encoding: Text encoding

    Returns:
        File contents as string

    Raises:
        FileAccessError: If the file cannot be read, is too large, or is
            not valid text in ``encoding``
    """
    try:
        size = filepath.stat().st_size
    except OSError as e:
        raise FileAccessError(filepath, f"Cannot stat file: {e}")

    if size > max_bytes:
        size_mb = size / (1024 * 1024)
        limit_mb = max_bytes / (1024 * 1024)
        raise FileAccessError(
            filepath, f"File size ({size_mb:.2f}MB) exceeds limit ({limit_mb:.2f}MB)"
        )

    try:
        with open(filepath, encoding=encoding) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileAccessError(filepath, f"Encoding error: {e}")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")


def safe_write_file(filepath: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write a report file, creating parent directories as needed.

    Raises:
        FileAccessError: If file cannot be written
    """
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding=encoding) as f:
            f.write(content)
    except OSError as e:
        raise FileAccessError(filepath, f"Write failed: {e}")


def should_skip_file(filepath: Path, exclude_patterns: Iterable[str]) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    Args:
        filepath: File to check
        exclude_patterns: Glob patterns matched from the right of the path

    Returns:
        True if file should be skipped
    """
    for pattern in exclude_patterns:
        if filepath.match(pattern):
            return True
    return False


def _is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in {".", ".."}


def _walk_directory(root: Path, config: "AnalysisConfig") -> Iterator[Path]:
    """Yield candidate source files under ``root`` in sorted order."""
    extensions = {ext.lower() for ext in config.extensions}
    for dirpath, dirnames, filenames in os.walk(root, followlinks=config.follow_symlinks):
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in SKIP_DIRS and (config.allow_hidden_files or not _is_hidden(d))
        )
        for name in sorted(filenames):
            if not config.allow_hidden_files and _is_hidden(name):
                continue
            path = Path(dirpath) / name
            if path.suffix.lower() not in extensions:
                continue
            if path.is_symlink() and not config.follow_symlinks:
                continue
            if should_skip_file(path, config.exclude_patterns):
                logger.debug("Excluded %s", path)
                continue
            yield path


def discover_sources(paths: Iterable[Path], config: "AnalysisConfig") -> list[Path]:
    """
    Expand files and directory roots into a sorted, de-duplicated file list.

    Explicitly named files are taken as given (apart from the extension
    check); directories are expanded recursively, skipping build output,
    VCS metadata, hidden entries and exclude patterns.

    Raises:
        InvalidPathError: If a path does not exist
        NoSourcesError: If no source files were found
    """
    paths = [Path(os.path.normpath(p)) for p in paths]
    found: set[Path] = set()
    extensions = {ext.lower() for ext in config.extensions}

    for path in paths:
        if not path.exists():
            raise InvalidPathError(path, "Path does not exist")
        if path.is_dir():
            found.update(_walk_directory(path, config))
        elif path.suffix.lower() in extensions:
            found.add(path)
        else:
            logger.warning("Skipping %s: not a recognised source file", path)

    if not found:
        raise NoSourcesError(paths)

    return sorted(found, key=lambda p: p.as_posix())
