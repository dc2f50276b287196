"""
Shared definitions for signed exchange integrations.

Concrete forwarders (currently Delta Exchange) implement `ExchangeForwarder`
so the web layer can depend on the protocol and tests can swap in fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class ExchangeCredentials:
    """Typed container for exchange authentication data."""

    api_key: str
    api_secret: str

    def __repr__(self) -> str:
        # Never render the secret, even in tracebacks.
        return f"ExchangeCredentials(api_key={self.api_key!r}, api_secret='***')"


@runtime_checkable
class ExchangeForwarder(Protocol):
    """Protocol describing a single-shot authenticated forwarder."""

    name: str

    async def forward(
        self,
        credentials: ExchangeCredentials,
        endpoint: Any,
        *,
        path: Optional[str] = None,
        body: Optional[dict] = None,
    ) -> Any:
        """Sign and send one request, returning the decoded (normalized) JSON."""

    async def aclose(self) -> None:
        """Release network resources."""
