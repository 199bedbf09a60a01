# Sitemap module
from sitemap_builder.sitemap.item import EntryConfig, SitemapItem
from sitemap_builder.sitemap.cache import RenderCache
from sitemap_builder.sitemap.document import Sitemap, create_sitemap
from sitemap_builder.sitemap.index import SitemapIndex, IndexBuildResult, create_sitemap_index
from sitemap_builder.sitemap.reader import SitemapReader

__all__ = [
    "EntryConfig",
    "SitemapItem",
    "RenderCache",
    "Sitemap",
    "create_sitemap",
    "SitemapIndex",
    "IndexBuildResult",
    "create_sitemap_index",
    "SitemapReader",
]
