"""Settings shared by the pipeline and the web app."""

from __future__ import annotations

import os
from dataclasses import dataclass

MIN_WPM = 100
MAX_WPM = 1500
DEFAULT_WPM = 300

ALLOWED_EXTENSIONS = frozenset({".txt", ".pdf", ".epub"})
MAX_CONTENT_LENGTH = 200 * 1024 * 1024  # 200MB


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class WebSettings:
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "WebSettings":
        return cls(
            host=os.environ.get("SPEEDREAD_HOST", cls.host),
            port=int(os.environ.get("SPEEDREAD_PORT", cls.port)),
            debug=_env_bool("SPEEDREAD_DEBUG", cls.debug),
            log_level=os.environ.get("SPEEDREAD_LOG_LEVEL", cls.log_level).upper(),
        )
