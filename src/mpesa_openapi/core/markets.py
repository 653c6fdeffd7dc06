"""
Deployment context values and the operation route table.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, NamedTuple

__all__ = [
    "Market",
    "Operation",
    "Platform",
    "Route",
    "ROUTES",
    "build_base_path",
]


class Market(Enum):
    """
    Markets served by the OpenAPI gateway.

    The value is the short country code used in request bodies.
    """

    TANZANIA = "TZN"
    GHANA = "GHA"
    LESOTHO = "LES"
    DRC = "DRC"
    MOZAMBIQUE = "MOZ"
    EGYPT = "EGY"

    @property
    def url_context_value(self) -> str:
        return _MARKET_DETAILS[self][0]

    @property
    def currency(self) -> str:
        return _MARKET_DETAILS[self][1]

    @property
    def dial_code(self) -> str:
        return _MARKET_DETAILS[self][2]

    @classmethod
    def parse(cls, raw: str) -> "Market":
        value = raw.strip()
        for market in cls:
            if value.upper() in (market.value, market.name) or value == market.url_context_value:
                return market
        raise ValueError(f"Unknown market '{raw}'")


# url context value, currency, international dial code
_MARKET_DETAILS: Dict[Market, tuple] = {
    Market.TANZANIA: ("vodacomTZN", "TZS", "255"),
    Market.GHANA: ("vodafoneGHA", "GHS", "233"),
    Market.LESOTHO: ("vodacomLES", "LSL", "266"),
    Market.DRC: ("vodacomDRC", "USD", "243"),
    Market.MOZAMBIQUE: ("vodacomMOZ", "MZN", "258"),
    Market.EGYPT: ("vodafoneEGY", "EGP", "20"),
}


class Platform(Enum):
    SANDBOX = "sandbox"
    OPENAPI = "openapi"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> "Platform":
        value = raw.strip().lower()
        for platform in cls:
            if value in (platform.value, platform.name.lower()):
                return platform
        raise ValueError(f"Unknown platform '{raw}'")


class Operation(Enum):
    SESSION_ID = "sessionID"
    PUSH_PAY = "pushPay"
    DISBURSE = "disburse"
    QUERY = "query"

    def __str__(self) -> str:
        return self.value


class Route(NamedTuple):
    method: str
    path: str


ROUTES: Dict[Operation, Route] = {
    Operation.SESSION_ID: Route("GET", "getSession/"),
    Operation.PUSH_PAY: Route("POST", "c2bPayment/singleStage/"),
    Operation.DISBURSE: Route("POST", "b2cPayment/"),
    Operation.QUERY: Route("GET", "queryTransactionStatus/"),
}


def build_base_path(host: str, platform: Platform, market: Market) -> str:
    """Return ``https://<host>/<platform>/ipg/v2/<market>/``."""
    host = host.strip().rstrip("/")
    for prefix in ("https://", "http://"):
        if host.startswith(prefix):
            host = host[len(prefix):]
    return f"https://{host}/{platform.value}/ipg/v2/{market.url_context_value}/"
