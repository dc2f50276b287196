"""
Glue between the web layer and the Delta forwarder: forward one signed call
and apply any per-endpoint response normalization.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from exchanges.base_client import ExchangeCredentials, ExchangeForwarder
from exchanges.delta.endpoints import BALANCE, EndpointSpec
from services.delta.transform import normalize_balances

NORMALIZERS: Dict[str, Callable[[Any], Any]] = {
    BALANCE.name: normalize_balances,
}


async def execute(
    forwarder: ExchangeForwarder,
    credentials: ExchangeCredentials,
    endpoint: EndpointSpec,
    *,
    path: Optional[str] = None,
    body: Optional[dict] = None,
) -> Any:
    payload = await forwarder.forward(credentials, endpoint, path=path, body=body)
    normalizer = NORMALIZERS.get(endpoint.name)
    if normalizer is None:
        return payload
    return normalizer(payload)
