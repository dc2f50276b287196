"""
HTTP route handlers for the signing proxy.

Every route resolves credentials first, so a request without keys is
rejected with ``missing_keys`` before its payload is inspected further and
before any outbound call is attempted.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from config import ProxySettings
from exchanges.base_client import ExchangeCredentials, ExchangeForwarder
from exchanges.delta.endpoints import (
    BALANCE,
    CANCEL_ORDER,
    OPEN_ORDERS,
    ORDER_HISTORY,
    PLACE_ORDER,
    POSITIONS,
    PROFILE,
    EndpointSpec,
    build_cancel_order_body,
    build_place_order_body,
    order_history_path,
)
from services.delta.credentials import resolve_credentials
from services.delta.proxy import execute
from services.webapp.dependencies import get_forwarder, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class CredentialPayload(BaseModel):
    """
    Optional per-request credentials; operator-configured keys win.

    Fields are untyped here so a keyless request is answered with
    ``missing_keys`` whatever else it carries; order fields are checked by
    the body builders once credentials are settled.
    """

    key: Any = Field(None, description="Delta API key.")
    secret: Any = Field(None, description="Delta API secret.")


class OrderHistoryPayload(CredentialPayload):
    product_id: Any = Field(None, description="Restrict history to one product.")


class PlaceOrderPayload(CredentialPayload):
    """Order ticket as typed by the dashboard."""

    product_id: Any = Field(None, description="Delta product id, e.g. 27.")
    side: Any = Field(None, description="buy or sell.")
    size: Any = Field(None, description="Order size in contracts.")
    order_type: Any = Field(None, description="Defaults to market_order.")
    limit_price: Any = Field(None, description="Only sent when set.")
    leverage: Any = Field(None, description="Only sent when set.")


class CancelOrderPayload(CredentialPayload):
    id: Any = Field(None, description="Exchange order id.")
    product_id: Any = Field(None, description="Product the order belongs to.")


def _credentials(settings: ProxySettings, payload: Optional[CredentialPayload]) -> ExchangeCredentials:
    if payload is None:
        return resolve_credentials(settings)
    return resolve_credentials(settings, payload.key, payload.secret)


async def _relay(
    forwarder: ExchangeForwarder,
    credentials: ExchangeCredentials,
    endpoint: EndpointSpec,
    *,
    path: Optional[str] = None,
    body: Optional[dict] = None,
) -> JSONResponse:
    payload = await execute(forwarder, credentials, endpoint, path=path, body=body)
    return JSONResponse(content=payload)


@router.post("/balance", summary="Wallet balances with a normalized balance field")
async def balance(
    payload: Optional[CredentialPayload] = None,
    settings: ProxySettings = Depends(get_settings),
    forwarder: ExchangeForwarder = Depends(get_forwarder),
) -> JSONResponse:
    credentials = _credentials(settings, payload)
    return await _relay(forwarder, credentials, BALANCE)


@router.post("/positions", summary="Open margined positions")
async def positions(
    payload: Optional[CredentialPayload] = None,
    settings: ProxySettings = Depends(get_settings),
    forwarder: ExchangeForwarder = Depends(get_forwarder),
) -> JSONResponse:
    credentials = _credentials(settings, payload)
    return await _relay(forwarder, credentials, POSITIONS)


@router.post("/orders", summary="Open orders")
async def open_orders(
    payload: Optional[CredentialPayload] = None,
    settings: ProxySettings = Depends(get_settings),
    forwarder: ExchangeForwarder = Depends(get_forwarder),
) -> JSONResponse:
    credentials = _credentials(settings, payload)
    return await _relay(forwarder, credentials, OPEN_ORDERS)


@router.post("/orders/history", summary="Most recent closed orders")
async def order_history(
    payload: Optional[OrderHistoryPayload] = None,
    settings: ProxySettings = Depends(get_settings),
    forwarder: ExchangeForwarder = Depends(get_forwarder),
) -> JSONResponse:
    credentials = _credentials(settings, payload)
    product_id = payload.product_id if payload is not None else None
    return await _relay(forwarder, credentials, ORDER_HISTORY, path=order_history_path(product_id))


@router.post("/place-order", summary="Submit a new order")
async def place_order(
    payload: Optional[PlaceOrderPayload] = None,
    settings: ProxySettings = Depends(get_settings),
    forwarder: ExchangeForwarder = Depends(get_forwarder),
) -> JSONResponse:
    credentials = _credentials(settings, payload)
    ticket = payload or PlaceOrderPayload()
    body = build_place_order_body(
        product_id=ticket.product_id,
        side=ticket.side,
        size=ticket.size,
        order_type=ticket.order_type,
        limit_price=ticket.limit_price,
        leverage=ticket.leverage,
    )
    logger.info(
        "Placing %s %s order on product %s (size=%s)",
        body["side"],
        body["order_type"],
        body["product_id"],
        body["size"],
    )
    return await _relay(forwarder, credentials, PLACE_ORDER, body=body)


@router.post("/cancel-order", summary="Cancel an open order")
async def cancel_order(
    payload: Optional[CancelOrderPayload] = None,
    settings: ProxySettings = Depends(get_settings),
    forwarder: ExchangeForwarder = Depends(get_forwarder),
) -> JSONResponse:
    credentials = _credentials(settings, payload)
    ticket = payload or CancelOrderPayload()
    body = build_cancel_order_body(order_id=ticket.id, product_id=ticket.product_id)
    logger.info("Cancelling order %s on product %s", body["id"], body["product_id"])
    return await _relay(forwarder, credentials, CANCEL_ORDER, body=body)


@router.post("/profile", summary="Account profile (used to verify keys)")
async def profile(
    payload: Optional[CredentialPayload] = None,
    settings: ProxySettings = Depends(get_settings),
    forwarder: ExchangeForwarder = Depends(get_forwarder),
) -> JSONResponse:
    credentials = _credentials(settings, payload)
    return await _relay(forwarder, credentials, PROFILE)
