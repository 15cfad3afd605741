"""
Tests for the edge-function handler.
"""

from datetime import datetime, timezone

from year_wallpaper.edge import fetch

from conftest import FakeRenderer

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_svg_with_defaults_from_now(font_cache):
    resp = fetch("https://wall.example/?format=svg", now=NOW, font_cache=font_cache)
    assert resp.status == 200
    assert resp.headers["content-type"] == "image/svg+xml; charset=utf-8"
    assert resp.headers["cache-control"] == "public, max-age=3600"
    assert b"365 days left" in resp.body


def test_png_uses_renderer_and_font(font_cache, fake_renderer):
    resp = fetch(
        "https://wall.example/?year=2024&today=2024-12-31&fontUrl=https%3A%2F%2Ff.test%2Fa.ttf",
        now=NOW, font_cache=font_cache, renderer=fake_renderer,
    )
    assert resp.status == 200
    assert resp.headers["content-type"] == "image/png"
    svg, font_bytes, _ = fake_renderer.calls[0]
    assert "0 days left" in svg
    assert font_bytes == b"FONT:https://f.test/a.ttf"


def test_first_query_value_wins(font_cache):
    resp = fetch("https://wall.example/?format=svg&format=png&width=400&width=900", now=NOW, font_cache=font_cache)
    assert resp.headers["content-type"].startswith("image/svg+xml")
    assert b'width="400"' in resp.body


def test_empty_font_url_renders_without_font(font_cache, fake_renderer):
    fetch("https://wall.example/?fontUrl=", now=NOW, font_cache=font_cache, renderer=fake_renderer)
    assert fake_renderer.calls[0][1] is None


def test_failure_returns_500(font_cache):
    resp = fetch("https://wall.example/", now=NOW, font_cache=font_cache, renderer=FakeRenderer(fail=True))
    assert resp.status == 500
    assert resp.headers == {"content-type": "text/plain; charset=utf-8"}
    assert resp.body == b"renderer exploded"


def test_defaults_read_from_env_on_first_fetch(monkeypatch, font_cache, fake_renderer):
    from year_wallpaper import edge

    monkeypatch.setattr(edge, "_settings", None)
    monkeypatch.setattr(edge, "_font_cache", None)
    monkeypatch.setenv("FONT_URL", "https://f.test/env.ttf")
    monkeypatch.setenv("FONT_TIMEOUT", "4")

    fetch("https://wall.example/", now=NOW, font_cache=font_cache, renderer=fake_renderer)
    assert fake_renderer.calls[0][1] == b"FONT:https://f.test/env.ttf"
    assert edge._settings.font_url == "https://f.test/env.ttf"
    assert edge._settings.font_timeout == 4.0
    assert edge._font_cache is not None
