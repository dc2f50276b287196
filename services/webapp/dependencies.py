"""
Application-wide dependency providers for the web service.

The functions declared here are meant to be used with FastAPI's dependency
injection framework while keeping instantiation logic in one place.
"""

from __future__ import annotations

from functools import lru_cache

from config import ProxySettings, load_settings
from exchanges.base_client import ExchangeForwarder
from exchanges.delta.client import DeltaForwarder


@lru_cache(maxsize=1)
def get_settings() -> ProxySettings:
    """Read configuration from the environment once per process."""
    return load_settings()


@lru_cache(maxsize=1)
def get_forwarder() -> ExchangeForwarder:
    """
    Return the shared Delta forwarder.

    The forwarder only pools connections; credentials are passed per call.
    """
    settings = get_settings()
    return DeltaForwarder(base_url=settings.base_url, timeout=settings.timeout_seconds)
