"""
Edge-function entry point.

fetch(url) takes the full request URL and returns an EdgeResponse, so the
same pipeline as the HTTP server can be mounted on any function runtime
that hands over a URL and expects status, headers and body back.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

from .config import Settings
from .fonts import FontCache
from .handlers import (
    ERROR_CONTENT_TYPE,
    Renderer,
    WallpaperRequest,
    error_body,
    render_wallpaper,
)

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_settings: Optional[Settings] = None
_font_cache: Optional[FontCache] = None


def _defaults() -> Tuple[Settings, FontCache]:
    """Process-wide settings and font cache, built on first use."""
    global _settings, _font_cache
    with _lock:
        if _settings is None:
            _settings = Settings.from_env()
            _font_cache = FontCache(timeout=_settings.font_timeout)
        return _settings, _font_cache


@dataclass(frozen=True)
class EdgeResponse:
    status: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)


def fetch(
    url: str,
    now: Optional[datetime] = None,
    font_cache: Optional[FontCache] = None,
    settings: Optional[Settings] = None,
    renderer: Optional[Renderer] = None,
) -> EdgeResponse:
    """Handle one request for the wallpaper at url."""
    if settings is None or font_cache is None:
        default_settings, default_cache = _defaults()
        settings = settings or default_settings
        font_cache = font_cache or default_cache
    try:
        query: Dict[str, str] = {}
        for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
            query.setdefault(key, value)
        req = WallpaperRequest.from_query(query, now=now, default_font_url=settings.font_url)
        result = render_wallpaper(req, font_cache, renderer)
    except Exception as e:
        logger.exception("Edge request failed: %s", url)
        return EdgeResponse(500, error_body(e), {"content-type": ERROR_CONTENT_TYPE})
    return EdgeResponse(200, result.body, result.headers)
