"""
Sitemap XML reader.
Loads existing urlset and sitemap index files back into entries,
e.g. to split an oversized sitemap into an index.
"""

from pathlib import Path
from typing import List, Optional, Union

from lxml import etree

from sitemap_builder.errors import SitemapParseError
from sitemap_builder.logging_config import get_logger
from sitemap_builder.sitemap.item import EntryConfig

logger = get_logger("sitemap.reader")

# XML namespaces - support both HTTP and HTTPS variants
SITEMAP_NS_HTTP = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
SITEMAP_NS_HTTPS = {"sm": "https://www.sitemaps.org/schemas/sitemap/0.9"}
IMAGE_NS = {"image": "http://www.google.com/schemas/sitemap-image/1.1"}


def _text(elem) -> Optional[str]:
    if elem is not None and elem.text and elem.text.strip():
        return elem.text.strip()
    return None


class SitemapReader:
    """
    Parser for XML sitemaps.
    Handles both sitemap index and regular urlsets.
    """

    def is_sitemap_index(self, xml_content: str) -> bool:
        """Check if content is a sitemap index."""
        return "<sitemapindex" in xml_content

    def _parse_root(self, xml_content: str):
        try:
            return etree.fromstring(xml_content.encode("utf-8"))
        except etree.XMLSyntaxError as e:
            logger.error(f"XML parsing error in sitemap: {e}")
            raise SitemapParseError(f"Sitemap XML could not be parsed: {e}") from e

    def _detect_sitemap_namespace(self, root) -> dict:
        """Detect whether the sitemap uses the HTTP or HTTPS namespace."""
        default_ns = root.nsmap.get(None, "")

        if "https://www.sitemaps.org/schemas/sitemap/0.9" in default_ns:
            return SITEMAP_NS_HTTPS
        return SITEMAP_NS_HTTP

    def parse_index(self, xml_content: str) -> List[str]:
        """
        Parse a sitemap index file.

        Returns:
            Locations of the referenced sitemaps, in document order
        """
        root = self._parse_root(xml_content)
        sitemap_ns = self._detect_sitemap_namespace(root)

        locations = []
        for sitemap in root.xpath("//sm:sitemap", namespaces=sitemap_ns):
            loc = _text(sitemap.find("sm:loc", namespaces=sitemap_ns))
            if loc:
                locations.append(loc)

        logger.info(f"Parsed sitemap index with {len(locations)} nested sitemaps")
        return locations

    def parse_urlset(self, xml_content: str) -> List[EntryConfig]:
        """
        Parse a regular sitemap (urlset).

        Returns:
            Entry configs in document order; <url> elements without <loc> are skipped
        """
        root = self._parse_root(xml_content)
        sitemap_ns = self._detect_sitemap_namespace(root)

        entries = []
        for url_elem in root.xpath("//sm:url", namespaces=sitemap_ns):
            loc = _text(url_elem.find("sm:loc", namespaces=sitemap_ns))
            if not loc:
                continue

            priority = _text(url_elem.find("sm:priority", namespaces=sitemap_ns))
            images = [
                text for text in (
                    _text(image_loc)
                    for image_loc in url_elem.findall("image:image/image:loc", namespaces=IMAGE_NS)
                )
                if text
            ]

            entries.append(EntryConfig(
                url=loc,
                lastmod_iso=_text(url_elem.find("sm:lastmod", namespaces=sitemap_ns)),
                changefreq=_text(url_elem.find("sm:changefreq", namespaces=sitemap_ns)),
                priority=priority,
                img=images or None,
            ))

        logger.info(f"Parsed urlset with {len(entries)} URLs")
        return entries

    def parse_file(self, path: Union[str, Path]) -> List[EntryConfig]:
        """Read a local urlset file."""
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
        return self.parse_urlset(content)
