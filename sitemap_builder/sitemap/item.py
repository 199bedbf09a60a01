"""
Single sitemap entry: validation and <url> rendering.
"""

import html
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

from dateutil.parser import parse as parse_date
from dateutil.tz import tzlocal

from sitemap_builder.errors import (
    MissingLocationError,
    MissingProtocolError,
    InvalidChangeFrequencyError,
    InvalidPriorityError,
    InvalidLastmodError,
)
from sitemap_builder.storage.files import file_modified_time

CHANGE_FREQUENCIES = ("always", "hourly", "daily", "weekly", "monthly", "yearly", "never")
DEFAULT_CHANGE_FREQUENCY = "weekly"
DEFAULT_PRIORITY = 0.5

# Key spellings accepted from mappings in addition to the field names
KEY_ALIASES = {
    "lastmodISO": "lastmod_iso",
    "lastmodfile": "lastmod_file",
    "lastmodrealtime": "lastmod_realtime",
}


@dataclass
class EntryConfig:
    """
    Raw per-URL configuration as supplied by the caller.
    Not validated; validation happens when a SitemapItem is built from it.
    """
    url: Optional[str] = None
    lastmod: Optional[str] = None  # Date string, local time
    lastmod_iso: Optional[str] = None  # Emitted verbatim
    lastmod_file: Optional[str] = None  # Path whose mtime is used
    lastmod_realtime: bool = False  # Emit date and time instead of date only
    changefreq: Optional[str] = None
    priority: Optional[Union[float, str]] = None
    img: Optional[Union[str, List[str]]] = None
    safe: bool = False  # Skip all validation and escaping

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EntryConfig":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = KEY_ALIASES.get(key, key)
            if name not in known:
                raise TypeError(f"Unknown sitemap entry option: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, raw: Union[str, Dict[str, Any], "EntryConfig"]) -> "EntryConfig":
        """Resolve a bare location string or a mapping into an EntryConfig."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            return cls(url=raw)
        if isinstance(raw, dict):
            return cls.from_dict(raw)
        raise TypeError(f"Unsupported sitemap entry type: {type(raw).__name__}")

    @property
    def images(self) -> List[str]:
        if not self.img:
            return []
        if isinstance(self.img, str):
            return [self.img]
        return list(self.img)


def format_timestamp(dt: datetime, realtime: bool = False) -> str:
    """Format a datetime as a W3C date, or full date-time when ``realtime``."""
    if realtime:
        return dt.isoformat(timespec="seconds")
    return dt.strftime("%Y-%m-%d")


def parse_local_date(value: str) -> datetime:
    """Parse a date string; values without an offset are taken as local time."""
    try:
        dt = parse_date(value)
    except (ValueError, OverflowError) as e:
        raise InvalidLastmodError(f"lastmod is not a valid date: {value}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tzlocal())
    return dt


def format_priority(priority: Union[float, str]) -> str:
    if isinstance(priority, str):
        return priority
    value = float(priority)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class SitemapItem:
    """
    One <url> element of a sitemap.

    Raises on construction when the config is invalid, unless ``safe``
    is set on the config or passed explicitly.
    """

    def __init__(self, conf: Union[str, Dict[str, Any], EntryConfig, None] = None, safe: Optional[bool] = None):
        conf = EntryConfig.coerce(conf) if conf is not None else EntryConfig()
        is_safe = conf.safe if safe is None else safe

        if not conf.url:
            raise MissingLocationError()

        # URL of the page
        self.loc = conf.url
        if not is_safe:
            if not urlparse(conf.url).scheme:
                raise MissingProtocolError(f"Protocol is required: {conf.url}")
            self.loc = html.escape(conf.url)

        # Exactly one source is used for the last modification date
        if conf.lastmod_file:
            try:
                mtime = file_modified_time(conf.lastmod_file)
            except OSError as e:
                raise InvalidLastmodError(f"lastmod file cannot be read: {conf.lastmod_file}") from e
            self.lastmod = format_timestamp(mtime, conf.lastmod_realtime)
        elif conf.lastmod:
            self.lastmod = format_timestamp(parse_local_date(conf.lastmod), conf.lastmod_realtime)
        elif conf.lastmod_iso:
            self.lastmod = conf.lastmod_iso
        else:
            self.lastmod = None

        # How frequently the page is likely to change
        self.changefreq = conf.changefreq or DEFAULT_CHANGE_FREQUENCY
        if not is_safe and self.changefreq not in CHANGE_FREQUENCIES:
            raise InvalidChangeFrequencyError()

        # The priority of this URL relative to other URLs
        self.priority = DEFAULT_PRIORITY if conf.priority is None else conf.priority
        if not is_safe:
            self.priority = self._validate_priority(self.priority)

        self.img = conf.images
        if not is_safe:
            self.img = [html.escape(image) for image in self.img]

    @staticmethod
    def _validate_priority(priority) -> float:
        if isinstance(priority, bool):
            raise InvalidPriorityError()
        try:
            value = float(priority)
        except (TypeError, ValueError):
            raise InvalidPriorityError()
        if not 0.0 <= value <= 1.0:
            raise InvalidPriorityError()
        return value

    def to_xml(self) -> str:
        """Render the <url> element."""
        parts = [f"<loc>{self.loc}</loc>"]

        if self.img:
            parts.append("".join(
                f"<image:image><image:loc>{image}</image:loc></image:image>"
                for image in self.img
            ))
        if self.lastmod:
            parts.append(f"<lastmod>{self.lastmod}</lastmod>")
        if self.changefreq:
            parts.append(f"<changefreq>{self.changefreq}</changefreq>")
        if self.priority is not None and self.priority != "":
            parts.append(f"<priority>{format_priority(self.priority)}</priority>")

        return "<url> " + " ".join(parts) + " </url>"

    def __str__(self) -> str:
        return self.to_xml()

    def __repr__(self) -> str:
        return f"SitemapItem(loc={self.loc!r})"
