"""
File persistence and file-stat helpers.
Writers are async so several sitemap files can be written concurrently.
"""

import asyncio
import os
from datetime import datetime
from pathlib import Path
from typing import Union

from dateutil.tz import tzlocal

from sitemap_builder.logging_config import get_logger

logger = get_logger("storage.files")

PathLike = Union[str, os.PathLike]


class FileWriter:
    """
    Persist text to a named file.
    Subclasses implement ``write``; failures must be raised, not swallowed.
    """

    async def write(self, path: PathLike, data: str) -> None:
        raise NotImplementedError


class LocalFileWriter(FileWriter):
    """Writes UTF-8 files on the local filesystem."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def _write_blocking(self, path: Path, data: str) -> int:
        with open(path, "w", encoding=self.encoding) as f:
            return f.write(data)

    async def write(self, path: PathLike, data: str) -> None:
        path = Path(path)
        written = await asyncio.to_thread(self._write_blocking, path, data)
        logger.debug(
            f"Wrote {written} characters",
            extra={"path": str(path)}
        )


def folder_exists(path: PathLike) -> bool:
    """Check that ``path`` exists and is a directory."""
    return Path(path).is_dir()


def file_modified_time(path: PathLike) -> datetime:
    """
    Get the modification time of a file.

    Returns:
        Timezone-aware datetime in the local timezone
    """
    mtime = os.stat(path).st_mtime
    return datetime.fromtimestamp(mtime, tz=tzlocal())
