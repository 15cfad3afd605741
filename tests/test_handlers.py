"""
Tests for the shared request pipeline.
"""

from datetime import date, datetime, timezone

import pytest

from year_wallpaper.handlers import (
    CACHE_CONTROL,
    PNG_CONTENT_TYPE,
    SVG_CONTENT_TYPE,
    WallpaperRequest,
    clamp,
    error_body,
    parse_date,
    render_wallpaper,
    to_int,
)
from year_wallpaper.fonts import DEFAULT_FONT_URL

NOW = datetime(2026, 1, 18, 23, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("value,expected", [
    ("42", 42), (" 7", 7), ("12px", 12), ("-3", -3), ("abc", 99), ("", 99), (None, 99),
])
def test_to_int(value, expected):
    assert to_int(value, 99) == expected


def test_clamp():
    assert clamp(10, 320, 4096) == 320
    assert clamp(5000, 320, 4096) == 4096
    assert clamp(1000, 320, 4096) == 1000


def test_parse_date():
    fallback = date(2026, 1, 1)
    assert parse_date("2024-02-29", fallback) == date(2024, 2, 29)
    assert parse_date("2024-02-29T10:00:00Z", fallback) == date(2024, 2, 29)
    assert parse_date("yesterday", fallback) == fallback
    assert parse_date("2023-02-29", fallback) == fallback
    assert parse_date(None, fallback) == fallback


@pytest.mark.parametrize("value", ["20240105", "2024-W01-1", "2024-01-05x", "24-01-05", "2024-1-5"])
def test_parse_date_accepts_only_dashed_dates(value):
    fallback = date(2026, 1, 1)
    assert parse_date(value, fallback) == fallback


def test_parse_date_with_time_suffix():
    fallback = date(2026, 1, 1)
    assert parse_date(" 2024-01-05 08:00", fallback) == date(2024, 1, 5)


class TestWallpaperRequest:
    def test_defaults_use_now(self):
        req = WallpaperRequest.from_query({}, now=NOW)
        assert req.year == 2026
        assert req.today == date(2026, 1, 18)
        assert (req.width, req.height) == (1179, 2556)
        assert req.format == "png"
        assert req.font_url == DEFAULT_FONT_URL

    def test_now_converted_to_utc(self):
        from datetime import timedelta
        local = datetime(2026, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        req = WallpaperRequest.from_query({}, now=local)
        assert req.today == date(2025, 12, 31)
        assert req.year == 2025

    def test_dimensions_clamped(self):
        req = WallpaperRequest.from_query({"width": "10", "height": "99999"}, now=NOW)
        assert (req.width, req.height) == (320, 8192)
        req = WallpaperRequest.from_query({"width": "9000", "height": "1"}, now=NOW)
        assert (req.width, req.height) == (4096, 320)

    def test_malformed_values_fall_back(self):
        req = WallpaperRequest.from_query(
            {"year": "soon", "width": "wide", "today": "someday", "format": "gif"}, now=NOW
        )
        assert req.year == 2026
        assert req.width == 1179
        assert req.today == date(2026, 1, 18)
        assert req.format == "png"

    def test_explicit_values(self):
        req = WallpaperRequest.from_query(
            {"year": "2024", "today": "2024-03-01", "format": "SVG", "fontUrl": "https://f.test/a.ttf"},
            now=NOW,
        )
        assert req.year == 2024
        assert req.today == date(2024, 3, 1)
        assert req.format == "svg"
        assert req.font_url == "https://f.test/a.ttf"
        assert req.calendar.day_index == 60
        assert req.layout.width == 1179

    def test_year_clamped_to_supported_range(self):
        assert WallpaperRequest.from_query({"year": "0"}, now=NOW).year == 1
        assert WallpaperRequest.from_query({"year": "123456"}, now=NOW).year == 9999

    def test_default_font_url_override(self):
        req = WallpaperRequest.from_query({}, now=NOW, default_font_url="https://f.test/b.ttf")
        assert req.font_url == "https://f.test/b.ttf"


class TestRenderWallpaper:
    def test_svg(self, font_cache, fake_renderer):
        req = WallpaperRequest(year=2024, today=date(2024, 1, 1), format="svg")
        result = render_wallpaper(req, font_cache, fake_renderer)
        assert result.content_type == SVG_CONTENT_TYPE
        assert result.body.startswith(b"<?xml")
        assert b"365 days left" in result.body
        assert fake_renderer.calls == []
        assert result.headers == {"content-type": SVG_CONTENT_TYPE, "cache-control": CACHE_CONTROL}

    def test_png_embeds_font(self, font_cache, fake_renderer):
        req = WallpaperRequest(year=2024, today=date(2024, 1, 1), font_url="https://f.test/x")
        result = render_wallpaper(req, font_cache, fake_renderer)
        assert result.content_type == PNG_CONTENT_TYPE
        assert result.body.startswith(b"\x89PNG")
        svg, font_bytes, kwargs = fake_renderer.calls[0]
        assert "0.3% completed" in svg
        assert font_bytes == b"FONT:https://f.test/x"
        assert kwargs["ring_width"] == 3

    def test_png_without_font_when_fetch_fails(self, fake_renderer):
        from year_wallpaper.fonts import FontCache

        def broken(url):
            raise OSError("offline")

        req = WallpaperRequest(year=2024, today=date(2024, 1, 1))
        result = render_wallpaper(req, FontCache(broken), fake_renderer)
        assert result.content_type == PNG_CONTENT_TYPE
        assert fake_renderer.calls[0][1] is None


def test_error_body():
    assert error_body(ValueError("bad")) == b"bad"
    assert error_body(RuntimeError()) == b"Internal error"
