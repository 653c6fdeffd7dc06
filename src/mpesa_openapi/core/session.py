"""
Session acquisition and caching.

A session id is obtained by sending the RSA-encrypted API key to
``getSession/``. It stays valid for the lifetime configured on the gateway
portal, after which a new one has to be requested.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .crypto import encrypt_key
from .errors import BusinessError, GatewayError
from .markets import ROUTES, Operation
from .models import SessionResponse
from .transport import GatewayRequest, Transport, TransportResponse, authorization_headers

__all__ = [
    "Clock",
    "Session",
    "SessionManager",
    "check_response",
    "utc_now",
]

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def check_response(response: TransportResponse, output_error: str, action: str, parsed=None) -> None:
    """
    Raise if the gateway reported a failure.

    A structured error from the gateway wins over the business error field.
    """
    if response.error is not None:
        raise GatewayError(
            f"{action}: gateway responded with {response.status_code}: {response.error}",
            status_code=response.status_code,
            payload=response.error,
        )
    if output_error:
        raise BusinessError(f"{action}: {output_error}", response=parsed)


@dataclass(frozen=True)
class Session:
    id: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


class SessionManager:
    """
    Owns the cached :class:`Session` of one client.

    Refreshes triggered through :meth:`ensure_session` are serialised so that
    concurrent callers holding an expired session cause a single
    ``getSession/`` call.
    """

    def __init__(
        self,
        *,
        api_key: str,
        public_key: str,
        lifetime_minutes: int,
        base_path: str,
        transport: Transport,
        clock: Clock = utc_now,
    ) -> None:
        self._api_key = api_key
        self._public_key = public_key
        self._lifetime = timedelta(minutes=lifetime_minutes)
        self._base_path = base_path
        self._transport = transport
        self._clock = clock
        self._session: Optional[Session] = None
        self._refresh_lock = threading.Lock()

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def ensure_session(self) -> str:
        """Return a usable session id, acquiring a new one when needed."""
        current = self._session
        if current is not None and current.is_valid(self._clock()):
            return current.id

        with self._refresh_lock:
            current = self._session
            if current is not None and current.is_valid(self._clock()):
                return current.id
            logging.info("Session missing or expired, requesting a new one")
            return self.acquire_session().session_id

    def acquire_session(self) -> SessionResponse:
        """Request a new session id regardless of the cached one."""
        token = encrypt_key(self._api_key, self._public_key)
        route = ROUTES[Operation.SESSION_ID]
        request = GatewayRequest(
            method=route.method,
            url=self._base_path + route.path,
            headers=authorization_headers(token),
        )
        response = self._transport.send(request)
        parsed = SessionResponse.from_response(response.payload)
        logging.debug("%s response: %s", Operation.SESSION_ID, parsed.raw)
        check_response(response, parsed.output_error, "could not fetch session id", parsed)
        if not parsed.session_id:
            raise GatewayError(
                "could not fetch session id: response carried no output_SessionID",
                status_code=response.status_code,
                payload=response.payload,
            )

        self._session = Session(id=parsed.session_id, expires_at=self._clock() + self._lifetime)
        logging.info("Acquired session valid until %s", self._session.expires_at.isoformat())
        return parsed
