"""
HTTP server: GET / returns the wallpaper for the query parameters
described in handlers.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, Response, request

from .config import Settings
from .fonts import FontCache
from .handlers import (
    ERROR_CONTENT_TYPE,
    Renderer,
    WallpaperRequest,
    error_body,
    render_wallpaper,
)
from .log import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    font_cache: Optional[FontCache] = None,
    renderer: Optional[Renderer] = None,
) -> Flask:
    settings = settings or Settings.from_env()
    font_cache = font_cache or FontCache(timeout=settings.font_timeout)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.extensions["font_cache"] = font_cache

    # Route for the wallpaper image
    @app.route("/")
    def wallpaper():
        """
        Renders the wallpaper as SVG or PNG.
        """
        try:
            req = WallpaperRequest.from_query(
                request.args, default_font_url=settings.font_url
            )
            result = render_wallpaper(req, font_cache, renderer)
        except Exception as e:
            logger.exception("Wallpaper request failed: %s", request.full_path)
            return Response(error_body(e), status=500, content_type=ERROR_CONTENT_TYPE)
        return Response(result.body, status=200, headers=result.headers)

    return app


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("year-wallpaper listening on :%d", settings.port)
    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == '__main__':
    main()
