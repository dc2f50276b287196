"""
Static endpoint table for the Delta REST API plus the helpers that build
dynamic paths and request bodies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

import httpx

from exchanges.delta.errors import InvalidRequestError
from exchanges.delta.signing import HttpMethod

DEFAULT_ORDER_TYPE = "market_order"
ORDER_HISTORY_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class EndpointSpec:
    """Logical operation mapped to an HTTP method and path template."""

    name: str
    method: HttpMethod
    path: str
    has_body: bool = False


BALANCE = EndpointSpec("balance", "GET", "/v2/wallet/balances")
POSITIONS = EndpointSpec("positions", "GET", "/v2/positions/margined")
OPEN_ORDERS = EndpointSpec("open_orders", "GET", "/v2/orders?state=open")
ORDER_HISTORY = EndpointSpec(
    "order_history",
    "GET",
    f"/v2/orders?state=closed&page_size={ORDER_HISTORY_PAGE_SIZE}",
)
PLACE_ORDER = EndpointSpec("place_order", "POST", "/v2/orders", has_body=True)
CANCEL_ORDER = EndpointSpec("cancel_order", "DELETE", "/v2/orders", has_body=True)
PROFILE = EndpointSpec("profile", "GET", "/v2/profile")

ENDPOINTS: Dict[str, EndpointSpec] = {
    spec.name: spec
    for spec in (BALANCE, POSITIONS, OPEN_ORDERS, ORDER_HISTORY, PLACE_ORDER, CANCEL_ORDER, PROFILE)
}


def order_history_path(product_id: Any = None) -> str:
    """Closed-order window, optionally filtered to one product."""
    if _is_blank(product_id):
        return ORDER_HISTORY.path
    problems = _check_id("product_id", product_id)
    if problems:
        raise InvalidRequestError(problems)
    query = httpx.QueryParams({"product_ids": _stringify(product_id)})
    return f"{ORDER_HISTORY.path}&{query}"


def build_place_order_body(
    *,
    product_id: Any,
    side: Any,
    size: Any,
    order_type: Any = None,
    limit_price: Any = None,
    leverage: Any = None,
) -> Dict[str, Any]:
    """
    Start from the required fields and attach optional ones.

    ``limit_price`` and ``leverage`` are only sent when truthy and always as
    strings; Delta rejects numeric prices on this endpoint.
    """
    missing = [
        name
        for name, value in (("product_id", product_id), ("side", side), ("size", size))
        if _is_blank(value)
    ]
    if missing:
        raise InvalidRequestError(f"Missing required order field(s): {', '.join(missing)}")
    problems = [
        _check_id("product_id", product_id),
        _check_text("side", side),
        _check_number("size", size),
        _check_text("order_type", order_type) if order_type else "",
        _check_number("limit_price", limit_price) if limit_price else "",
        _check_number("leverage", leverage) if leverage else "",
    ]
    _raise_problems(problems)
    body: Dict[str, Any] = {
        "product_id": product_id,
        "side": side,
        "size": size,
        "order_type": order_type or DEFAULT_ORDER_TYPE,
    }
    if limit_price:
        body["limit_price"] = _stringify(limit_price)
    if leverage:
        body["leverage"] = _stringify(leverage)
    return body


def build_cancel_order_body(*, order_id: Any, product_id: Any) -> Dict[str, Any]:
    missing = [
        name for name, value in (("id", order_id), ("product_id", product_id)) if _is_blank(value)
    ]
    if missing:
        raise InvalidRequestError(f"Missing required cancel field(s): {', '.join(missing)}")
    _raise_problems([_check_id("id", order_id), _check_id("product_id", product_id)])
    return {"id": order_id, "product_id": product_id}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_id(name: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return f"{name} must be an integer or string"
    return ""


def _check_text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        return f"{name} must be a string"
    return ""


def _check_number(name: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return f"{name} must be a number or numeric string"
    if isinstance(value, float) and not math.isfinite(value):
        return f"{name} must be finite"
    return ""


def _raise_problems(problems: List[str]) -> None:
    problems = [problem for problem in problems if problem]
    if problems:
        raise InvalidRequestError("; ".join(problems))


def _stringify(value: Any) -> str:
    """Render numbers the way the dashboards type them (100.0 -> "100")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
