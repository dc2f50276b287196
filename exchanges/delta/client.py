"""
Signing forwarder for the Delta Exchange REST API.

Each call to `DeltaForwarder.forward` produces exactly one outbound request:
sign, send, decode. There is no retry. Once a request has left the process
it is not cancelled when the dashboard disconnects, so a place-order call can
still execute on the exchange after the caller has gone away.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Optional

import httpx

from config import DELTA_BASE_URL, DELTA_TIMEOUT_SECONDS
from exchanges.base_client import ExchangeCredentials, ExchangeForwarder
from exchanges.delta.endpoints import EndpointSpec
from exchanges.delta.errors import BackendError, InvalidRequestError, InvalidUpstreamResponseError
from exchanges.delta.signing import SigningRequest, build_headers

logger = logging.getLogger(__name__)


class DeltaForwarder(ExchangeForwarder):
    """Async forwarder that signs requests with the caller's credentials."""

    name = "delta"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DELTA_TIMEOUT_SECONDS,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._base_url = base_url or DELTA_BASE_URL
        self._timeout = timeout
        self._transport = transport
        self._clock = clock
        self._client: httpx.AsyncClient | None = None

    async def forward(
        self,
        credentials: ExchangeCredentials,
        endpoint: EndpointSpec,
        *,
        path: Optional[str] = None,
        body: Optional[dict] = None,
    ) -> Any:
        """
        Sign and send one request for ``endpoint``.

        ``path`` overrides the endpoint's static path (used for filtered
        queries). Exchange error bodies are returned as-is; only transport
        failures and non-JSON replies raise.
        """
        target = path or endpoint.path
        if endpoint.has_body and body is None:
            raise InvalidRequestError(f"{endpoint.name} requires a request body")
        if not endpoint.has_body and body is not None:
            raise InvalidRequestError(f"{endpoint.name} does not accept a request body")
        try:
            request = SigningRequest.create(endpoint.method, target, body)
            timestamp = str(int(self._clock()))
            headers = build_headers(credentials.api_key, credentials.api_secret, request, timestamp)
            response = await self._http().request(
                request.method,
                request.path,
                content=request.body.content if request.body is not None else None,
                headers=headers,
            )
        except httpx.TransportError as exc:
            logger.warning("Delta %s %s transport failure: %s", endpoint.method, target, exc)
            raise BackendError(str(exc) or exc.__class__.__name__) from exc
        except Exception as exc:
            logger.exception("Unexpected failure forwarding %s %s", endpoint.method, target)
            raise BackendError(str(exc) or exc.__class__.__name__) from exc

        logger.debug("Delta %s %s -> %s", request.method, request.path, response.status_code)
        if response.is_error:
            logger.info(
                "Delta %s %s returned HTTP %s; relaying exchange body",
                request.method,
                request.path,
                response.status_code,
            )
        try:
            return json.loads(response.content, parse_constant=_reject_constant)
        except ValueError as exc:
            logger.warning(
                "Delta %s %s returned non-JSON (HTTP %s)",
                request.method,
                request.path,
                response.status_code,
            )
            raise InvalidUpstreamResponseError(
                f"Exchange returned a non-JSON response (HTTP {response.status_code})"
            ) from exc

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client


def _reject_constant(token: str) -> Any:
    # NaN/Infinity are not JSON and cannot be relayed to the dashboards.
    raise ValueError(f"Non-standard JSON constant {token!r}")
