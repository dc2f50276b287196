"""
Credential resolution for proxied calls.
"""

from __future__ import annotations

from typing import Any, Optional

from config import ProxySettings
from exchanges.base_client import ExchangeCredentials
from exchanges.delta.errors import MissingKeysError


def resolve_credentials(
    settings: ProxySettings,
    body_key: Any = None,
    body_secret: Any = None,
) -> ExchangeCredentials:
    """
    Pick the key/secret pair for a request.

    Operator-configured values win. Key and secret fall back to the request
    body independently, so a configured secret with no configured key uses
    the caller's key together with the operator's secret.
    """
    api_key = settings.api_key or _from_body(body_key)
    api_secret = settings.api_secret or _from_body(body_secret)
    if not api_key or not api_secret:
        raise MissingKeysError()
    return ExchangeCredentials(api_key=api_key, api_secret=api_secret)


def _from_body(value: Any) -> Optional[str]:
    """Blank values count as missing; anything else is used verbatim."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    return value
