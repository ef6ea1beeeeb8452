"""
Atomic File Commit

Writes a document to ``<path>.tmp`` and renames it over ``<path>`` only once
the content is flushed and synced. Readers see either the previous file or
the new one, never a partial write.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"

Writer = Callable[[TextIO], None]


class ExportError(Exception):
    """Raised when a document cannot be committed."""

    def __init__(self, message: str, path: str, stage: str = "write"):
        super().__init__(message)
        self.path = path
        self.stage = stage


def temp_path_for(path: str | Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + TMP_SUFFIX)


def _discard(tmp_path: Path) -> None:
    try:
        tmp_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial file {tmp_path}: {e}")


def _fsync_dir(directory: Path) -> None:
    """Persist the rename itself. Skipped where directories cannot be opened."""
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError as e:
        logger.debug(f"Cannot open {directory} for fsync: {e}")
        return
    try:
        os.fsync(fd)
    except OSError as e:
        logger.debug(f"Directory fsync failed for {directory}: {e}")
    finally:
        os.close(fd)


def atomic_commit(path: str | Path, writer: Writer) -> Path:
    """
    Write a document through a temp file and atomically replace ``path``.

    Args:
        path: Destination file
        writer: Callback receiving the open temp file handle

    Returns:
        The destination path

    Raises:
        ExportError: If any step before the rename fails. The destination
            is left untouched and the temp file is removed.
    """
    path = Path(path)
    tmp_path = temp_path_for(path)
    stage = "open"

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
            stage = "write"
            writer(f)
            stage = "flush"
            f.flush()
            os.fsync(f.fileno())
    except Exception as e:
        _discard(tmp_path)
        raise ExportError(
            f"Failed to {stage} {tmp_path}: {e}", str(path), stage
        ) from e

    try:
        os.replace(tmp_path, path)
    except OSError as e:
        _discard(tmp_path)
        raise ExportError(
            f"Failed to rename {tmp_path} -> {path}: {e}", str(path), "rename"
        ) from e

    _fsync_dir(path.parent)

    logger.debug(f"Committed {path}")
    return path
