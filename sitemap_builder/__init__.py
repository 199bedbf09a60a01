"""
Sitemap builder - sitemaps.org XML sitemaps and sitemap indexes.
"""

from sitemap_builder.errors import (
    SitemapError,
    MissingLocationError,
    MissingProtocolError,
    InvalidChangeFrequencyError,
    InvalidPriorityError,
    TargetFolderMissingError,
    SitemapTooLargeError,
    InvalidSitemapSizeError,
    SitemapParseError,
    InvalidLastmodError,
)
from sitemap_builder.sitemap import (
    EntryConfig,
    SitemapItem,
    Sitemap,
    SitemapIndex,
    SitemapReader,
    create_sitemap,
    create_sitemap_index,
)

__version__ = "1.0.0"
