from __future__ import annotations

import pytest

from mpesa_openapi.core.config import ClientConfig
from mpesa_openapi.core.markets import ROUTES, Market, Operation, Platform, build_base_path


@pytest.mark.parametrize("market", list(Market))
@pytest.mark.parametrize("platform", list(Platform))
def test_base_path_follows_gateway_pattern(market: Market, platform: Platform) -> None:
    config = ClientConfig(api_key="key", public_key="pk", market=market, platform=platform)

    assert config.base_path == (
        f"https://openapi.m-pesa.com/{platform.value}/ipg/v2/{market.url_context_value}/"
    )


def test_base_path_strips_scheme_and_trailing_slash() -> None:
    path = build_base_path("https://openapi.m-pesa.com/", Platform.OPENAPI, Market.GHANA)

    assert path == "https://openapi.m-pesa.com/openapi/ipg/v2/vodafoneGHA/"


def test_market_context_values() -> None:
    assert Market.TANZANIA.url_context_value == "vodacomTZN"
    assert Market.TANZANIA.currency == "TZS"
    assert Market.DRC.currency == "USD"
    assert Market.EGYPT.url_context_value == "vodafoneEGY"


@pytest.mark.parametrize("raw", ["TZN", "tzn", "TANZANIA", "vodacomTZN"])
def test_market_parse_accepts_aliases(raw: str) -> None:
    assert Market.parse(raw) is Market.TANZANIA


def test_unknown_market_and_platform_raise() -> None:
    with pytest.raises(ValueError):
        Market.parse("KEN")
    with pytest.raises(ValueError):
        Platform.parse("staging")


def test_every_operation_has_a_route() -> None:
    assert set(ROUTES) == set(Operation)
    assert ROUTES[Operation.SESSION_ID].method == "GET"
    assert ROUTES[Operation.PUSH_PAY].path == "c2bPayment/singleStage/"
    assert ROUTES[Operation.DISBURSE].path == "b2cPayment/"
