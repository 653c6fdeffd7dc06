"""
HTTP executor used by the client, plus its ``requests`` implementation.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import requests

from .errors import GatewayTimeoutError, TransportError

__all__ = [
    "GatewayRequest",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
    "authorization_headers",
]


def authorization_headers(token: str) -> Dict[str, str]:
    """Headers sent on every authenticated gateway call."""
    return {
        "Content-Type": "application/json",
        "Origin": "*",
        "Authorization": f"Bearer {token}",
    }


@dataclass(frozen=True)
class GatewayRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    payload: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class TransportResponse:
    """
    Outcome of a completed HTTP exchange.

    ``error`` holds the decoded body when the gateway answered with a status
    of 400 or above, and is ``None`` otherwise.
    """

    status_code: int
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[Dict[str, Any]] = None


class Transport(Protocol):
    def send(self, request: GatewayRequest) -> TransportResponse:
        ...


class RequestsTransport:
    """
    Executes :class:`GatewayRequest` objects on a :class:`requests.Session`.

    Network failures become :class:`TransportError`; a timeout becomes
    :class:`GatewayTimeoutError`.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = 30,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, request: GatewayRequest) -> TransportResponse:
        logging.debug("%s %s", request.method, request.url)
        try:
            response = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.payload,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise GatewayTimeoutError(
                f"Request to {request.url} timed out after {self.timeout}s"
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(f"Request to {request.url} failed: {exc}") from exc

        payload = _decode_body(response, request.url)
        error = payload if response.status_code >= 400 else None
        return TransportResponse(
            status_code=response.status_code,
            payload=payload,
            headers=dict(response.headers),
            error=error,
        )


def _decode_body(response: requests.Response, url: str) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError) as exc:
        if response.status_code >= 400:
            return {"output_error": response.text}
        raise TransportError(
            f"Failed to parse JSON from gateway at {url}: {response.text}"
        ) from exc
    if not isinstance(body, dict):
        raise TransportError(f"Expected a JSON object from {url}, got {type(body).__name__}")
    return body
