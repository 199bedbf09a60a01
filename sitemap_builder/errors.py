"""
Error types raised while building sitemaps.
"""


class SitemapError(Exception):
    """Base class for all sitemap builder errors."""

    default_message = "Sitemap error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class MissingLocationError(SitemapError):
    """Entry was given without a URL."""
    default_message = "URL is required"


class MissingProtocolError(SitemapError):
    """Entry URL has no scheme such as http:// or https://."""
    default_message = "Protocol is required"


class InvalidChangeFrequencyError(SitemapError):
    default_message = (
        "changefreq is invalid, expected one of: "
        "always, hourly, daily, weekly, monthly, yearly, never"
    )


class InvalidPriorityError(SitemapError):
    default_message = "priority is invalid, expected a number between 0.0 and 1.0"


class TargetFolderMissingError(SitemapError):
    """Index target folder does not exist."""
    default_message = "Target folder must exist"


class SitemapTooLargeError(SitemapError):
    """Document holds more URLs than one sitemap file may list."""
    default_message = "Sitemap exceeds the 50000 URL limit, use a sitemap index"


class InvalidSitemapSizeError(SitemapError):
    default_message = "sitemap size must be between 1 and 50000"


class SitemapParseError(SitemapError):
    """Existing sitemap content could not be parsed as XML."""
    default_message = "Sitemap XML could not be parsed"


class InvalidLastmodError(SitemapError):
    """lastmod date string or lastmod file could not be read."""
    default_message = "lastmod is invalid"
