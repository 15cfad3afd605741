"""
Request pipeline shared by the HTTP server and the edge handler.

Query parameters:
    year     target year (default: current UTC year)
    today    ISO date to highlight (default: current UTC date)
    width    canvas width, clamped to [320, 4096] (default 1179)
    height   canvas height, clamped to [320, 8192] (default 2556)
    format   "svg" or "png" (default "png")
    fontUrl  font embedded in PNG output

Malformed values fall back to their defaults rather than failing the request.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Mapping, Optional

from . import raster
from .fonts import DEFAULT_FONT_URL, FontCache
from .svg import render_svg
from .wallpaper import CalendarParameters, LayoutParameters, generate

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=3600"
SVG_CONTENT_TYPE = "image/svg+xml; charset=utf-8"
PNG_CONTENT_TYPE = "image/png"
ERROR_CONTENT_TYPE = "text/plain; charset=utf-8"

DEFAULT_WIDTH = 1179
DEFAULT_HEIGHT = 2556
WIDTH_RANGE = (320, 4096)
HEIGHT_RANGE = (320, 8192)
FORMATS = ("svg", "png")

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_DATE_RE = re.compile(r"\s*(\d{4}-\d{2}-\d{2})(?:[T ]|\s*$)")


def to_int(value, fallback: int) -> int:
    """Leading integer of value ("12px" -> 12), or fallback."""
    match = _INT_RE.match("" if value is None else str(value))
    return int(match.group(1)) if match else fallback


def clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def parse_date(value: Optional[str], fallback: date) -> date:
    """YYYY-MM-DD (optionally followed by a time), or fallback."""
    match = _DATE_RE.match(value or "")
    if not match:
        return fallback
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return fallback


@dataclass(frozen=True)
class WallpaperRequest:
    year: int
    today: date
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    format: str = "png"
    font_url: str = DEFAULT_FONT_URL

    @classmethod
    def from_query(
        cls,
        query: Mapping[str, str],
        now: Optional[datetime] = None,
        default_font_url: str = DEFAULT_FONT_URL,
    ) -> "WallpaperRequest":
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)

        year = clamp(to_int(query.get("year"), now.year), date.min.year, date.max.year)
        fmt = (query.get("format") or "png").strip().lower()

        return cls(
            year=year,
            today=parse_date(query.get("today"), now.date()),
            width=clamp(to_int(query.get("width"), DEFAULT_WIDTH), *WIDTH_RANGE),
            height=clamp(to_int(query.get("height"), DEFAULT_HEIGHT), *HEIGHT_RANGE),
            format=fmt if fmt in FORMATS else "png",
            font_url=query.get("fontUrl", default_font_url),
        )

    @property
    def calendar(self) -> CalendarParameters:
        return CalendarParameters(year=self.year, reference_date=self.today)

    @property
    def layout(self) -> LayoutParameters:
        return LayoutParameters(width=self.width, height=self.height)


@dataclass(frozen=True)
class RenderResult:
    body: bytes
    content_type: str

    @property
    def headers(self) -> dict:
        return {"content-type": self.content_type, "cache-control": CACHE_CONTROL}


Renderer = Callable[..., bytes]


def render_wallpaper(
    req: WallpaperRequest,
    font_cache: FontCache,
    renderer: Optional[Renderer] = None,
) -> RenderResult:
    """Generate the wallpaper and encode it in the requested format."""
    renderer = renderer or raster.render
    layout = req.layout
    scene = generate(req.calendar, layout)
    svg = render_svg(scene)

    if req.format == "svg":
        return RenderResult(svg.encode("utf-8"), SVG_CONTENT_TYPE)

    font_bytes = font_cache.get(req.font_url)
    png = renderer(svg, font_bytes, theme=scene.theme, ring_width=layout.ring_width)
    logger.info(
        "Rendered %d %dx%d (today=%s, font=%s)",
        req.year, req.width, req.height, req.today.isoformat(),
        "embedded" if font_bytes else "none",
    )
    return RenderResult(png, PNG_CONTENT_TYPE)


def error_body(exc: BaseException) -> bytes:
    return (str(exc) or "Internal error").encode("utf-8")
