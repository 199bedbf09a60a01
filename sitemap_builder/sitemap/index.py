"""
Sitemap index builder.
Splits a large URL set into several sitemap files and writes an index
document that references all of them.
"""

import asyncio
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from sitemap_builder.config import SITEMAP_URL_LIMIT
from sitemap_builder.errors import InvalidSitemapSizeError, TargetFolderMissingError
from sitemap_builder.logging_config import get_logger
from sitemap_builder.sitemap.document import XML_PROLOG, SITEMAP_NS, IMAGE_NS, RawEntry, Sitemap
from sitemap_builder.sitemap.item import EntryConfig
from sitemap_builder.storage.files import FileWriter, LocalFileWriter, folder_exists

logger = get_logger("sitemap.index")

SITEMAPINDEX_OPEN = f'<sitemapindex xmlns="{SITEMAP_NS}" xmlns:image="{IMAGE_NS}">'
SITEMAPINDEX_CLOSE = "</sitemapindex>"

CompletionCallback = Callable[[Optional[BaseException], bool], Any]


@dataclass
class IndexBuildResult:
    """Paths written by a successful build."""
    sitemap_files: List[str] = field(default_factory=list)
    index_file: str = ""

    @property
    def files_written(self) -> int:
        return len(self.sitemap_files) + 1


def chunk_list(items: List[Any], size: int) -> List[List[Any]]:
    """Split ``items`` into consecutive chunks of at most ``size``."""
    return [items[i:i + size] for i in range(0, len(items), size)]


class SitemapIndex:
    """
    Sitemap index over several sitemap files.

    Construction validates the target folder and computes the chunks,
    filenames and index XML. Nothing is written until ``build()``.
    """

    def __init__(
        self,
        urls: Optional[Union[RawEntry, Iterable[RawEntry]]],
        target_folder: str,
        hostname: Optional[str] = None,
        cache_time: float = 0,
        sitemap_name: Optional[str] = None,
        sitemap_size: Optional[int] = None,
        writer: Optional[FileWriter] = None,
        callback: Optional[CompletionCallback] = None,
    ):
        self.hostname = hostname
        self.cache_time = cache_time
        self.sitemap_name = sitemap_name or "sitemap"

        if sitemap_size is None:
            sitemap_size = SITEMAP_URL_LIMIT
        if not 1 <= sitemap_size <= SITEMAP_URL_LIMIT:
            raise InvalidSitemapSizeError(
                f"sitemap size must be between 1 and {SITEMAP_URL_LIMIT}, got {sitemap_size}"
            )
        self.sitemap_size = sitemap_size

        if not folder_exists(target_folder):
            raise TargetFolderMissingError(f"Target folder must exist: {target_folder}")
        self.target_folder = str(target_folder)

        if urls is None:
            urls = []
        elif isinstance(urls, (str, dict, EntryConfig)):
            urls = [urls]
        self.urls = list(urls)

        self.writer = writer or LocalFileWriter()
        self.callback = callback

        self.chunks = chunk_list(self.urls, self.sitemap_size)
        self.sitemaps = [
            f"{self.sitemap_name}-{index}.xml" for index in range(len(self.chunks))
        ]
        self.index_filename = f"{self.sitemap_name}-index.xml"

        logger.info(
            f"Prepared sitemap index with {len(self.chunks)} sitemaps",
            extra={"entries": len(self.urls), "chunks": len(self.chunks)}
        )

    def _path(self, filename: str) -> str:
        return os.path.join(self.target_folder, filename)

    def _location(self, filename: str) -> str:
        if self.hostname:
            return f"{self.hostname}/{filename}"
        return filename

    def to_xml(self) -> str:
        """Render the <sitemapindex> document."""
        xml = [XML_PROLOG, SITEMAPINDEX_OPEN]
        for filename in self.sitemaps:
            xml.append("<sitemap>")
            xml.append(f"<loc>{self._location(filename)}</loc>")
            xml.append("</sitemap>")
        xml.append(SITEMAPINDEX_CLOSE)
        return "\n".join(xml)

    def create_sitemaps(self) -> List[Sitemap]:
        """One Sitemap document per chunk, in chunk order."""
        return [
            Sitemap(chunk, hostname=self.hostname, cache_time=self.cache_time)
            for chunk in self.chunks
        ]

    async def _write(self, filename: str, data: str) -> str:
        path = self._path(filename)
        await self.writer.write(path, data)
        logger.debug("Sitemap file written", extra={"path": path})
        return path

    async def build(self) -> IndexBuildResult:
        """
        Render every chunk and write all sitemap files plus the index file
        concurrently. Raises the first write or validation failure.
        """
        try:
            # Rendering validates entries, so it runs before any write starts
            documents = [sitemap.render() for sitemap in self.create_sitemaps()]

            writes = [
                self._write(filename, document)
                for filename, document in zip(self.sitemaps, documents)
            ]
            writes.append(self._write(self.index_filename, self.to_xml()))

            paths = await asyncio.gather(*writes)
        except Exception as e:
            logger.error(
                f"Sitemap index build failed: {e}",
                extra={"target_folder": self.target_folder}
            )
            if self.callback is not None:
                self.callback(e, False)
            raise

        result = IndexBuildResult(sitemap_files=list(paths[:-1]), index_file=paths[-1])
        logger.info(
            f"Wrote {result.files_written} sitemap files",
            extra={"target_folder": self.target_folder, "chunks": len(self.chunks)}
        )
        if self.callback is not None:
            self.callback(None, True)
        return result

    def build_sync(self) -> IndexBuildResult:
        """Run ``build()`` to completion on a new event loop."""
        return asyncio.run(self.build())


def create_sitemap_index(conf: Dict[str, Any]) -> SitemapIndex:
    """
    Shortcut for ``SitemapIndex(...)``.

    Args:
        conf: Mapping with ``urls``, ``target_folder`` and optionally
            ``hostname``, ``cache_time``, ``sitemap_name``, ``sitemap_size``,
            ``writer`` and ``callback``
    """
    return SitemapIndex(
        conf.get("urls"),
        conf["target_folder"],
        hostname=conf.get("hostname"),
        cache_time=conf.get("cache_time", 0),
        sitemap_name=conf.get("sitemap_name"),
        sitemap_size=conf.get("sitemap_size"),
        writer=conf.get("writer"),
        callback=conf.get("callback"),
    )
