"""
SVG -> PNG conversion.

CairoSVG does the rasterizing. It does not resolve CSS custom properties,
so theme colors are inlined first. Cairo finds fonts by family name through
fontconfig, so a fetched font is registered there and named first in the
footer font-family. The PNG is re-encoded through Pillow with optimize=True.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import hashlib
import logging
import re
import tempfile
import threading
from io import BytesIO
from pathlib import Path
from typing import Dict, Optional

from fontTools.ttLib import TTFont
from PIL import Image

from .svg import FONT_STACK
from .wallpaper import DEFAULT_THEME, Theme, format_number

logger = logging.getLogger(__name__)

_VAR_RE = re.compile(r"var\(--([A-Za-z0-9]+)\)")


class RenderError(RuntimeError):
    """The rasterizer could not turn the SVG into a PNG."""


def inline_theme_colors(svg: str, theme: Theme = DEFAULT_THEME, ring_width: float = 3) -> str:
    """Replace var(--name) references with their literal values."""
    values = {
        "bg0": theme.bg0,
        "bg1": theme.bg1,
        "dot": theme.dot,
        "accent": theme.accent,
        "todayFill": theme.today_fill,
        "ringW": f"{format_number(ring_width)}px",
    }

    def _sub(match: re.Match) -> str:
        return values.get(match.group(1), match.group(0))

    return _VAR_RE.sub(_sub, svg)


def prefer_font_family(svg: str, family: str) -> str:
    """Put family first in every footer font-family list."""
    return svg.replace(f"font-family: {FONT_STACK}", f'font-family: "{family}", {FONT_STACK}')


class FontRegistry:
    """
    Makes downloaded fonts visible to Cairo.

    Each payload is decoded with fontTools (WOFF/WOFF2 are
    unwrapped to plain sfnt), written into a private font directory and
    added to the current fontconfig configuration. Payloads are keyed by
    their SHA-256, so each one is written and registered once.
    """

    def __init__(self, font_dir: Optional[Path] = None):
        self._font_dir = font_dir
        self._lock = threading.Lock()
        self._families: Dict[str, str] = {}
        self._fontconfig = None

    @property
    def font_dir(self) -> Path:
        if self._font_dir is None:
            self._font_dir = Path(tempfile.mkdtemp(prefix="year_wallpaper_fonts_"))
        return self._font_dir

    def _load_fontconfig(self):
        if self._fontconfig is None:
            path = ctypes.util.find_library("fontconfig")
            if not path:
                raise RenderError("fontconfig library not found")
            lib = ctypes.CDLL(path)
            lib.FcConfigAppFontAddFile.argtypes = [ctypes.c_void_p, ctypes.c_char_p]
            lib.FcConfigAppFontAddFile.restype = ctypes.c_int
            self._fontconfig = lib
        return self._fontconfig

    def register(self, font_bytes: bytes) -> str:
        """Register the payload and return its family name."""
        key = hashlib.sha256(font_bytes).hexdigest()
        with self._lock:
            family = self._families.get(key)
            if family is not None:
                return family

            try:
                font = TTFont(BytesIO(font_bytes))
                family = font["name"].getBestFamilyName()
                suffix = ".otf" if "CFF " in font else ".ttf"
                font.flavor = None
                path = self.font_dir / f"{key[:16]}{suffix}"
                font.save(str(path))
            except Exception as e:
                raise RenderError(f"Unreadable font payload: {e}") from e
            if not family:
                raise RenderError("Font payload has no family name")

            lib = self._load_fontconfig()
            if not lib.FcConfigAppFontAddFile(None, str(path).encode("utf-8")):
                raise RenderError(f"fontconfig rejected {path}")

            logger.info("Registered font family %r from %s", family, path)
            self._families[key] = family
            return family


_registry = FontRegistry()


def use_font(svg: str, font_bytes: bytes, registry: Optional[FontRegistry] = None) -> str:
    """Register the payload and prefer it in the footer; unchanged svg on failure."""
    registry = registry or _registry
    try:
        family = registry.register(font_bytes)
    except RenderError as e:
        logger.warning("Rendering without embedded font: %s", e)
        return svg
    return prefer_font_family(svg, family)


def render(
    svg: str,
    font_bytes: Optional[bytes] = None,
    theme: Theme = DEFAULT_THEME,
    ring_width: float = 3,
    registry: Optional[FontRegistry] = None,
) -> bytes:
    """
    Rasterize an SVG wallpaper.

    Args:
        svg:         Document produced by svg.render_svg
        font_bytes:  Optional font payload (TTF, OTF, WOFF, WOFF2) for the footer
        theme:       Colors to inline in place of the CSS variables
        ring_width:  Stroke width to inline for today's ring
        registry:    Where fonts get registered (default: process-wide)

    Returns:
        PNG bytes
    """
    svg = inline_theme_colors(svg, theme, ring_width)
    if font_bytes:
        svg = use_font(svg, font_bytes, registry)

    # Needs the Cairo system library; only the PNG path loads it.
    import cairosvg

    try:
        png = cairosvg.svg2png(bytestring=svg.encode("utf-8"))
    except Exception as e:
        raise RenderError(f"SVG rasterization failed: {e}") from e

    img = Image.open(BytesIO(png))
    out = BytesIO()
    img.save(out, format="PNG", optimize=True)
    logger.debug("Rendered %dx%d PNG (%d bytes)", img.width, img.height, out.tell())
    return out.getvalue()
