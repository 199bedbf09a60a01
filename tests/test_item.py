"""Tests for SitemapItem validation and <url> rendering."""
import os
from datetime import datetime

import pytest
from dateutil.tz import tzlocal

from sitemap_builder.errors import (
    MissingLocationError,
    MissingProtocolError,
    InvalidChangeFrequencyError,
    InvalidPriorityError,
    InvalidLastmodError,
)
from sitemap_builder.sitemap.item import CHANGE_FREQUENCIES, EntryConfig, SitemapItem


class TestSitemapItemValidation:

    @pytest.mark.parametrize("conf", [None, {}, {"url": ""}, EntryConfig()])
    def test_missing_location(self, conf):
        with pytest.raises(MissingLocationError):
            SitemapItem(conf)

    def test_missing_protocol(self):
        with pytest.raises(MissingProtocolError):
            SitemapItem({"url": "foo"})

    def test_with_protocol(self):
        item = SitemapItem({"url": "http://foo"})
        assert item.loc == "http://foo"

    @pytest.mark.parametrize("priority", [1.5, -0.1, "high"])
    def test_invalid_priority(self, priority):
        with pytest.raises(InvalidPriorityError):
            SitemapItem({"url": "http://foo", "priority": priority})

    @pytest.mark.parametrize("priority", [0, 0.5, 1])
    def test_valid_priority(self, priority):
        item = SitemapItem({"url": "http://foo", "priority": priority})
        assert item.priority == priority

    def test_invalid_changefreq(self):
        with pytest.raises(InvalidChangeFrequencyError):
            SitemapItem({"url": "http://foo", "changefreq": "sometimes"})

    @pytest.mark.parametrize("changefreq", CHANGE_FREQUENCIES)
    def test_valid_changefreq(self, changefreq):
        item = SitemapItem({"url": "http://foo", "changefreq": changefreq})
        assert item.changefreq == changefreq

    def test_safe_skips_validation_and_escaping(self):
        item = SitemapItem({
            "url": "foo?a=1&b=2",
            "changefreq": "sometimes",
            "priority": 5,
            "safe": True,
        })
        assert item.to_xml() == (
            "<url> <loc>foo?a=1&b=2</loc> <changefreq>sometimes</changefreq> "
            "<priority>5</priority> </url>"
        )

    def test_safe_argument_overrides_config(self):
        item = SitemapItem("foo", safe=True)
        assert item.loc == "foo"

    def test_location_is_escaped(self):
        item = SitemapItem({"url": "http://ya.ru/?a=1&b=<2>"})
        assert item.loc == "http://ya.ru/?a=1&amp;b=&lt;2&gt;"


class TestSitemapItemLastmod:

    def test_iso_string_verbatim(self):
        item = SitemapItem({"url": "http://ya.ru", "lastmod_iso": "2011-06-27T10:00:00+02:00"})
        assert item.lastmod == "2011-06-27T10:00:00+02:00"

    def test_date_string_is_local_date(self):
        item = SitemapItem({"url": "http://ya.ru", "lastmod": "2011-06-27"})
        assert item.lastmod == "2011-06-27"

    def test_date_string_realtime(self):
        item = SitemapItem({"url": "http://ya.ru", "lastmod": "2011-06-27 13:45:10", "lastmod_realtime": True})
        assert item.lastmod.startswith("2011-06-27T13:45:10")

    def test_file_mtime(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("<html></html>")
        ts = datetime(2020, 1, 2, 12, 0, tzinfo=tzlocal()).timestamp()
        os.utime(path, (ts, ts))

        item = SitemapItem({"url": "http://ya.ru", "lastmodfile": str(path)})
        assert item.lastmod == "2020-01-02"

    def test_file_wins_over_date_and_iso(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("")
        ts = datetime(2020, 1, 2, 12, 0, tzinfo=tzlocal()).timestamp()
        os.utime(path, (ts, ts))

        item = SitemapItem({
            "url": "http://ya.ru",
            "lastmod_file": str(path),
            "lastmod": "2011-06-27",
            "lastmod_iso": "2000-01-01",
        })
        assert item.lastmod == "2020-01-02"

    def test_date_wins_over_iso(self):
        item = SitemapItem({"url": "http://ya.ru", "lastmod": "2011-06-27", "lastmodISO": "2000-01-01"})
        assert item.lastmod == "2011-06-27"

    @pytest.mark.parametrize("value", ["notadate", "2011-13-45"])
    def test_invalid_date_string(self, value):
        with pytest.raises(InvalidLastmodError):
            SitemapItem({"url": "http://ya.ru", "lastmod": value})

    def test_missing_lastmod_file(self, tmp_path):
        with pytest.raises(InvalidLastmodError):
            SitemapItem({"url": "http://ya.ru", "lastmod_file": str(tmp_path / "missing.html")})


class TestSitemapItemRender:

    def test_full_entry(self):
        item = SitemapItem({
            "url": "http://ya.ru",
            "lastmod_iso": "2011-06-27",
            "changefreq": "always",
            "priority": 0.9,
        })
        assert item.to_xml() == (
            "<url> <loc>http://ya.ru</loc> <lastmod>2011-06-27</lastmod> "
            "<changefreq>always</changefreq> <priority>0.9</priority> </url>"
        )

    def test_defaults(self):
        assert str(SitemapItem("http://ya.ru")) == (
            "<url> <loc>http://ya.ru</loc> <changefreq>weekly</changefreq> "
            "<priority>0.5</priority> </url>"
        )

    def test_zero_priority_is_rendered(self):
        xml = SitemapItem({"url": "http://ya.ru", "priority": 0}).to_xml()
        assert "<priority>0</priority>" in xml

    def test_single_image(self):
        xml = SitemapItem({"url": "http://ya.ru", "img": "http://ya.ru/a.png"}).to_xml()
        assert xml == (
            "<url> <loc>http://ya.ru</loc> "
            "<image:image><image:loc>http://ya.ru/a.png</image:loc></image:image> "
            "<changefreq>weekly</changefreq> <priority>0.5</priority> </url>"
        )

    def test_multiple_images_keep_order(self):
        xml = SitemapItem({
            "url": "http://ya.ru",
            "img": ["http://ya.ru/a.png", "http://ya.ru/b.png"],
            "lastmod_iso": "2011-06-27",
        }).to_xml()
        assert (
            "<loc>http://ya.ru</loc> "
            "<image:image><image:loc>http://ya.ru/a.png</image:loc></image:image>"
            "<image:image><image:loc>http://ya.ru/b.png</image:loc></image:image> "
            "<lastmod>2011-06-27</lastmod>"
        ) in xml

    def test_no_double_spaces(self):
        xml = SitemapItem({"url": "http://ya.ru", "img": []}).to_xml()
        assert "  " not in xml
        assert "image" not in xml


class TestEntryConfig:

    def test_coerce_string(self):
        assert EntryConfig.coerce("http://a.com") == EntryConfig(url="http://a.com")

    def test_coerce_dict_with_aliases(self):
        entry = EntryConfig.coerce({"url": "http://a.com", "lastmodISO": "2020-01-01", "lastmodrealtime": True})
        assert entry.lastmod_iso == "2020-01-01"
        assert entry.lastmod_realtime is True

    def test_coerce_passthrough(self):
        entry = EntryConfig(url="http://a.com")
        assert EntryConfig.coerce(entry) is entry

    def test_unknown_key(self):
        with pytest.raises(TypeError):
            EntryConfig.coerce({"url": "http://a.com", "colour": "red"})

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            EntryConfig.coerce(42)
