"""
HMAC-SHA256 request signing for the Delta Exchange REST API.

Delta authenticates a request with three headers: ``api-key``, ``timestamp``
(Unix seconds) and ``signature``, where::

    signature = hex(HMAC_SHA256(secret, method + timestamp + path + body))

``path`` includes the query string and ``body`` is the exact JSON text that
goes over the wire. The body is therefore serialized exactly once into a
`SerializedBody`, and that same value is used for signing and transmission.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

HttpMethod = Literal["GET", "POST", "DELETE"]
ALLOWED_METHODS = frozenset({"GET", "POST", "DELETE"})


@dataclass(frozen=True, slots=True)
class SerializedBody:
    """JSON body rendered once, with its wire bytes."""

    text: str
    content: bytes

    @classmethod
    def from_object(cls, obj: Any) -> "SerializedBody":
        text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
        return cls(text=text, content=text.encode("utf-8"))

    @property
    def length(self) -> int:
        return len(self.content)


@dataclass(frozen=True, slots=True)
class SigningRequest:
    """Method, path (with query) and optional body of one outbound call."""

    method: HttpMethod
    path: str
    body: Optional[SerializedBody] = None

    def __post_init__(self) -> None:
        if self.method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not self.path.startswith("/"):
            raise ValueError(f"Request path must be absolute: {self.path!r}")

    @classmethod
    def create(cls, method: str, path: str, body_object: Any = None) -> "SigningRequest":
        body = SerializedBody.from_object(body_object) if body_object is not None else None
        return cls(method=method.upper(), path=path, body=body)  # type: ignore[arg-type]

    @property
    def body_text(self) -> str:
        return self.body.text if self.body is not None else ""


def build_signature_payload(method: str, timestamp: str, path: str, body_text: str = "") -> str:
    return f"{method}{timestamp}{path}{body_text}"


def sign(secret: str, payload: str) -> str:
    """Return the lowercase hex HMAC-SHA256 digest of ``payload``."""
    mac = hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    )
    return mac.hexdigest()


def build_headers(api_key: str, api_secret: str, request: SigningRequest, timestamp: str) -> Dict[str, str]:
    """
    Build the authenticated header set for ``request``.

    The same ``timestamp`` value is embedded in the signed payload and sent
    as the ``timestamp`` header.
    """
    payload = build_signature_payload(request.method, timestamp, request.path, request.body_text)
    headers = {
        "api-key": api_key,
        "timestamp": timestamp,
        "signature": sign(api_secret, payload),
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if request.body is not None and request.body.length:
        headers["Content-Length"] = str(request.body.length)
    return headers
