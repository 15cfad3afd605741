import pytest

from year_wallpaper.fonts import FontCache


class FakeRenderer:
    """Stands in for the CairoSVG rasterizer."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def __call__(self, svg, font_bytes=None, **kwargs):
        self.calls.append((svg, font_bytes, kwargs))
        if self.fail:
            raise RuntimeError("renderer exploded")
        return b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def font_cache():
    return FontCache(lambda url: b"FONT:" + url.encode())
