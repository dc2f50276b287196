import asyncio
import hashlib
import hmac
import json

import httpx
import pytest

from exchanges.base_client import ExchangeCredentials
from exchanges.delta.client import DeltaForwarder
from exchanges.delta.endpoints import CANCEL_ORDER, OPEN_ORDERS, PLACE_ORDER, PROFILE
from exchanges.delta.errors import BackendError, InvalidRequestError, InvalidUpstreamResponseError

CREDENTIALS = ExchangeCredentials(api_key="key-1", api_secret="s3cr3t")
BASE_URL = "https://api.india.delta.exchange"


def _forwarder(handler):
    return DeltaForwarder(
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
        clock=lambda: 1700000000.9,
    )


def _run(coro):
    return asyncio.run(coro)


def _expected_signature(method, path, body=""):
    message = f"{method}1700000000{path}{body}".encode("utf-8")
    return hmac.new(b"s3cr3t", message, hashlib.sha256).hexdigest()


def test_get_request_is_signed_without_body():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True, "result": {"id": 1}})

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PROFILE)
        finally:
            await forwarder.aclose()

    result = _run(scenario())

    assert result == {"success": True, "result": {"id": 1}}
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert str(request.url) == f"{BASE_URL}/v2/profile"
    assert request.headers["api-key"] == "key-1"
    assert request.headers["timestamp"] == "1700000000"
    assert request.headers["signature"] == "0927ae9520eb565e15df0cfb531d921efa2e04ecf598a0e9bc66c7828672ea7e"
    assert request.headers["accept"] == "application/json"
    assert request.content == b""


def test_query_string_is_part_of_signed_path():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"result": []})

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, OPEN_ORDERS)
        finally:
            await forwarder.aclose()

    _run(scenario())

    request = seen[0]
    assert request.url.raw_path == b"/v2/orders?state=open"
    assert request.headers["signature"] == _expected_signature("GET", "/v2/orders?state=open")


def test_transmitted_body_is_the_signed_body():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    body = {"product_id": 27, "side": "buy", "size": 1, "order_type": "market_order"}

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PLACE_ORDER, body=body)
        finally:
            await forwarder.aclose()

    _run(scenario())

    request = seen[0]
    sent = request.content.decode("utf-8")
    assert json.loads(sent) == body
    assert request.headers["signature"] == _expected_signature("POST", "/v2/orders", sent)
    assert request.headers["content-length"] == str(len(request.content))
    assert request.headers["content-type"] == "application/json"


def test_delete_carries_json_body():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True, "result": {"id": 123, "state": "cancelled"}})

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, CANCEL_ORDER, body={"id": 123, "product_id": 27})
        finally:
            await forwarder.aclose()

    result = _run(scenario())

    request = seen[0]
    assert request.method == "DELETE"
    assert request.content == b'{"id":123,"product_id":27}'
    assert request.headers["signature"] == "28f583bee7517628f7b3b759bfd37c86dfe08624068ad76239166316d559f4cb"
    assert result["result"]["state"] == "cancelled"


def test_exchange_error_body_is_relayed_verbatim():
    error_body = {"success": False, "error": {"code": "InvalidApiKey"}}

    def handler(request):
        return httpx.Response(401, json=error_body)

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PROFILE)
        finally:
            await forwarder.aclose()

    assert _run(scenario()) == error_body


def test_non_json_reply_maps_to_invalid_upstream_response():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PROFILE)
        finally:
            await forwarder.aclose()

    with pytest.raises(InvalidUpstreamResponseError) as exc:
        _run(scenario())
    assert exc.value.code == "invalid_upstream_response"
    assert "502" in exc.value.message


def test_transport_failure_maps_to_backend_error_without_retry():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PROFILE)
        finally:
            await forwarder.aclose()

    with pytest.raises(BackendError) as exc:
        _run(scenario())
    assert exc.value.code == "backend_error"
    assert "connection refused" in exc.value.message
    assert "s3cr3t" not in exc.value.message
    assert len(calls) == 1


def test_timeout_is_a_transport_failure():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PROFILE)
        finally:
            await forwarder.aclose()

    with pytest.raises(BackendError):
        _run(scenario())


def test_unserializable_body_is_contained(mocker):
    handler = mocker.Mock()

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PLACE_ORDER, body={"size": object()})
        finally:
            await forwarder.aclose()

    with pytest.raises(BackendError):
        _run(scenario())
    handler.assert_not_called()


def test_credentials_repr_hides_secret():
    assert "s3cr3t" not in repr(CREDENTIALS)


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_standard_json_constants_map_to_invalid_upstream_response(token):
    def handler(request):
        content = f'{{"result":[{{"available_balance":{token}}}]}}'.encode("utf-8")
        return httpx.Response(200, content=content, headers={"Content-Type": "application/json"})

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, PROFILE)
        finally:
            await forwarder.aclose()

    with pytest.raises(InvalidUpstreamResponseError):
        _run(scenario())


@pytest.mark.parametrize(
    "endpoint, body",
    [
        (PROFILE, {"unexpected": True}),
        (PLACE_ORDER, None),
        (CANCEL_ORDER, None),
    ],
)
def test_body_must_match_endpoint_contract(mocker, endpoint, body):
    handler = mocker.Mock()

    async def scenario():
        forwarder = _forwarder(handler)
        try:
            return await forwarder.forward(CREDENTIALS, endpoint, body=body)
        finally:
            await forwarder.aclose()

    with pytest.raises(InvalidRequestError):
        _run(scenario())
    handler.assert_not_called()
