"""Shared test fixtures and helpers for sitemap builder tests."""
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from sitemap_builder import config as config_module
from sitemap_builder.storage.files import FileWriter


URLSET_OPEN = (
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9" '
    'xmlns:image="http://www.google.com/schemas/sitemap-image/1.1">'
)
XML_PROLOG = '<?xml version="1.0" encoding="UTF-8"?>'


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_urls(count, base="http://example.com/page-"):
    return [f"{base}{i}" for i in range(count)]


def make_writer(fail_on=None):
    """
    Mock FileWriter recording every write.
    Writes to a path ending with ``fail_on`` raise OSError.
    """
    writer = MagicMock(spec=FileWriter)
    written = {}

    async def _write(path, data):
        if fail_on and str(path).endswith(fail_on):
            raise OSError(f"disk full: {path}")
        written[str(path)] = data

    writer.write = AsyncMock(side_effect=_write)
    writer.written = written
    return writer


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def writer():
    return make_writer()


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Each test loads configuration from scratch."""
    monkeypatch.setattr(config_module, "_config", None)
    for name in (
        "SITEMAP_HOSTNAME",
        "SITEMAP_CACHE_TIME",
        "SITEMAP_TARGET_FOLDER",
        "SITEMAP_NAME",
        "SITEMAP_SIZE",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging during a test."""
    yield
    root = logging.getLogger("sitemap_builder")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
