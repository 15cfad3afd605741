"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .fonts import DEFAULT_FONT_URL, DEFAULT_TIMEOUT


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, default))
    except (TypeError, ValueError):
        return default


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    try:
        return float(env.get(key, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    """
    Server and CLI settings.

    HOST, PORT     where the HTTP server listens
    FONT_URL       font embedded in PNG output when the request names none
    FONT_TIMEOUT   seconds allowed for the font download
    LOG_LEVEL      root logging level
    OUTPUT_DIR     where the CLI writes files
    """
    host: str = "0.0.0.0"
    port: int = 3000
    font_url: str = DEFAULT_FONT_URL
    font_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    output_dir: str = "public"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            host=env.get("HOST", cls.host),
            port=_env_int(env, "PORT", cls.port),
            font_url=env.get("FONT_URL", cls.font_url),
            font_timeout=_env_float(env, "FONT_TIMEOUT", cls.font_timeout),
            log_level=env.get("LOG_LEVEL", cls.log_level).upper(),
            output_dir=env.get("OUTPUT_DIR", cls.output_dir),
        )
