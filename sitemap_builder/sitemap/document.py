"""
Sitemap document: an ordered set of URL entries rendered as a <urlset>.
"""

import asyncio
import re
import time
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from sitemap_builder.config import SITEMAP_URL_LIMIT
from sitemap_builder.errors import SitemapTooLargeError
from sitemap_builder.logging_config import get_logger
from sitemap_builder.sitemap.cache import RenderCache
from sitemap_builder.sitemap.item import EntryConfig, SitemapItem

logger = get_logger("sitemap.document")

XML_PROLOG = '<?xml version="1.0" encoding="UTF-8"?>'
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"
URLSET_OPEN = f'<urlset xmlns="{SITEMAP_NS}" xmlns:image="{IMAGE_NS}">'
URLSET_CLOSE = "</urlset>"

RawEntry = Union[str, Dict[str, Any], EntryConfig]

_PROTOCOL_RE = re.compile(r"^https?://", re.IGNORECASE)


class Sitemap:
    """
    Sitemap document with an optional render cache.

    Args:
        urls: A single entry or a list of entries (strings, mappings or EntryConfig)
        hostname: Prepended to entries that lack http:// or https://
        cache_time: Cache period in seconds; 0 disables caching
    """

    def __init__(
        self,
        urls: Optional[Union[RawEntry, Iterable[RawEntry]]] = None,
        hostname: Optional[str] = None,
        cache_time: float = 0,
        clock: Callable[[], float] = time.time,
    ):
        # Limit defined by the protocol, one file may not list more URLs
        self.limit = SITEMAP_URL_LIMIT

        self.hostname = hostname

        if urls is None:
            urls = []
        elif isinstance(urls, (str, dict, EntryConfig)):
            urls = [urls]
        self.urls: List[EntryConfig] = [EntryConfig.coerce(u) for u in urls]

        self.cache = RenderCache(cache_time, clock=clock)

    def __len__(self) -> int:
        return len(self.urls)

    def clear_cache(self):
        self.cache.invalidate()

    def is_cache_valid(self) -> bool:
        return self.cache.is_valid()

    def check(self, url: RawEntry) -> SitemapItem:
        """Build the item for ``url`` as render would; raises if it is invalid."""
        return SitemapItem(self._with_hostname(EntryConfig.coerce(url)))

    def add(self, url: RawEntry) -> int:
        """Append one entry; returns the new number of entries."""
        self.urls.append(EntryConfig.coerce(url))
        return len(self.urls)

    def remove(self, url: RawEntry) -> int:
        """
        Remove every entry whose URL equals ``url``.

        Returns:
            Number of entries removed
        """
        key = EntryConfig.coerce(url).url
        kept = [entry for entry in self.urls if entry.url != key]
        removed = len(self.urls) - len(kept)
        self.urls = kept
        return removed

    def _with_hostname(self, entry: EntryConfig) -> EntryConfig:
        if self.hostname and entry.url and not _PROTOCOL_RE.match(entry.url):
            return replace(entry, url=self.hostname + entry.url)
        return entry

    def render(self) -> str:
        """
        Render the full sitemap XML.
        Returns the cached document while the cache is valid.
        """
        cached = self.cache.get()
        if cached is not None:
            logger.debug("Serving sitemap from cache", extra={"entries": len(self.urls)})
            return cached

        if len(self.urls) > self.limit:
            raise SitemapTooLargeError(
                f"Sitemap has {len(self.urls)} URLs, limit is {self.limit}; use a sitemap index"
            )

        xml = [XML_PROLOG, URLSET_OPEN]
        for entry in self.urls:
            xml.append(SitemapItem(self._with_hostname(entry)).to_xml())
        xml.append(URLSET_CLOSE)

        logger.debug("Rendered sitemap", extra={"entries": len(self.urls)})
        return self.cache.set("\n".join(xml))

    to_xml = render

    def __str__(self) -> str:
        return self.render()

    async def render_async(self) -> str:
        """Render after yielding once to the event loop."""
        await asyncio.sleep(0)
        return self.render()


def create_sitemap(conf: Dict[str, Any]) -> Sitemap:
    """
    Shortcut for ``Sitemap(...)``.

    Args:
        conf: Mapping with ``urls``, ``hostname`` and ``cache_time``
    """
    return Sitemap(conf.get("urls"), conf.get("hostname"), conf.get("cache_time", 0))
