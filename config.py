"""
Runtime configuration for the Delta signing proxy.

Defaults live here as module constants; every value can be overridden from
the environment. Keep real credentials out of this file and supply them via
``DELTA_API_KEY`` / ``DELTA_API_SECRET`` instead.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

SERVICE_NAME = "delta-signing-proxy"
SERVICE_VERSION = "2.0"

# Delta Exchange India production host.
DELTA_BASE_URL = "https://api.india.delta.exchange"

# Upper bound for a single forwarded call (seconds).
DELTA_TIMEOUT_SECONDS = 10.0

DEFAULT_PORT = 10000
DEFAULT_CORS_ORIGINS = ("*",)


@dataclass(frozen=True, slots=True)
class ProxySettings:
    """Process-wide configuration, built once at startup."""

    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    base_url: str = DELTA_BASE_URL
    timeout_seconds: float = DELTA_TIMEOUT_SECONDS
    port: int = DEFAULT_PORT
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS

    @property
    def has_default_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)


def load_settings(environ: Mapping[str, str] | None = None) -> ProxySettings:
    """
    Build settings from environment variables.

    Empty strings are treated as unset so a blank ``DELTA_API_KEY=`` line in
    a deployment manifest does not shadow credentials sent by the caller.
    """
    env = os.environ if environ is None else environ
    return ProxySettings(
        api_key=_optional(env.get("DELTA_API_KEY")),
        api_secret=_optional(env.get("DELTA_API_SECRET")),
        base_url=(_optional(env.get("DELTA_BASE_URL")) or DELTA_BASE_URL).rstrip("/"),
        timeout_seconds=_float(env.get("DELTA_TIMEOUT_SECONDS"), DELTA_TIMEOUT_SECONDS),
        port=int(_float(env.get("PORT"), DEFAULT_PORT)),
        cors_origins=_origins(env.get("CORS_ALLOW_ORIGINS")),
    )


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _float(value: str | None, default: float) -> float:
    text = _optional(value)
    if text is None:
        return default
    try:
        parsed = float(text)
    except ValueError as exc:
        raise ValueError(f"Invalid numeric configuration value: {text!r}") from exc
    if parsed <= 0:
        raise ValueError(f"Configuration value must be positive: {text!r}")
    return parsed


def _origins(value: str | None) -> Tuple[str, ...]:
    text = _optional(value)
    if text is None:
        return DEFAULT_CORS_ORIGINS
    origins = tuple(item.strip() for item in text.split(",") if item.strip())
    return origins or DEFAULT_CORS_ORIGINS
