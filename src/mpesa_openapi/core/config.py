"""
Configuration objects and helpers for the M-Pesa OpenAPI client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .environment import build_environment
from .errors import ConfigError
from .markets import Market, Platform, build_base_path

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "load_client_config",
]

DEFAULT_HOST = "openapi.m-pesa.com"

_PARAMETER_TO_ENV_KEY = {
    "api_key": "MPESA_API_KEY",
    "public_key": "MPESA_PUBLIC_KEY",
    "market": "MPESA_MARKET",
    "platform": "MPESA_PLATFORM",
    "service_provider_code": "MPESA_SERVICE_PROVIDER_CODE",
    "session_lifetime_minutes": "MPESA_SESSION_LIFETIME_MINUTES",
    "host": "MPESA_HOST",
    "timeout_seconds": "MPESA_TIMEOUT_SECONDS",
    "trusted_sources": "MPESA_TRUSTED_SOURCES",
    "name": "MPESA_APP_NAME",
    "version": "MPESA_APP_VERSION",
    "description": "MPESA_APP_DESCRIPTION",
}


def _stringify(value: Any) -> str:
    if isinstance(value, (Market, Platform)):
        return value.value
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.
    """

    api_key: Optional[str] = None
    public_key: Optional[str] = None
    market: Optional[Market | str] = None
    platform: Optional[Platform | str] = None
    service_provider_code: Optional[str] = None
    session_lifetime_minutes: Optional[int | str] = None
    host: Optional[str] = None
    timeout_seconds: Optional[float | str] = None
    trusted_sources: Optional[Tuple[str, ...] | str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _required(values: Mapping[str, str], key: str) -> str:
    value = (values.get(key) or "").strip()
    if not value:
        raise ConfigError(f"{key} must be provided")
    return value


def _positive_number(raw: str, key: str, kind=int):
    try:
        value = kind(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number, got '{raw}'") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be greater than zero")
    return value


@dataclass(frozen=True)
class ClientConfig:
    """
    Credentials and deployment context of one client.

    The application fields mirror what is registered on the gateway portal;
    ``trusted_sources`` is informational since the gateway enforces it.
    """

    api_key: str = field(repr=False)
    public_key: str = field(repr=False)
    market: Market = Market.TANZANIA
    platform: Platform = Platform.SANDBOX
    service_provider_code: str = "000000"
    session_lifetime_minutes: int = 60
    host: str = DEFAULT_HOST
    timeout_seconds: float = 30.0
    trusted_sources: Tuple[str, ...] = ()
    name: str = ""
    version: str = ""
    description: str = ""

    @property
    def base_path(self) -> str:
        return build_base_path(self.host, self.platform, self.market)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ClientConfig":
        api_key = _required(values, "MPESA_API_KEY")
        public_key = _required(values, "MPESA_PUBLIC_KEY")

        try:
            market = Market.parse(values.get("MPESA_MARKET", "TZN"))
            platform = Platform.parse(values.get("MPESA_PLATFORM", "sandbox"))
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        service_provider_code = values.get("MPESA_SERVICE_PROVIDER_CODE", "000000").strip()
        if not service_provider_code:
            raise ConfigError("MPESA_SERVICE_PROVIDER_CODE must not be empty")

        lifetime = _positive_number(
            values.get("MPESA_SESSION_LIFETIME_MINUTES", "60"),
            "MPESA_SESSION_LIFETIME_MINUTES",
        )
        timeout = _positive_number(
            values.get("MPESA_TIMEOUT_SECONDS", "30"), "MPESA_TIMEOUT_SECONDS", float
        )
        trusted = tuple(
            item.strip()
            for item in values.get("MPESA_TRUSTED_SOURCES", "").split(",")
            if item.strip()
        )

        return cls(
            api_key=api_key,
            public_key=public_key,
            market=market,
            platform=platform,
            service_provider_code=service_provider_code,
            session_lifetime_minutes=lifetime,
            host=values.get("MPESA_HOST", DEFAULT_HOST).strip() or DEFAULT_HOST,
            timeout_seconds=timeout,
            trusted_sources=trusted,
            name=values.get("MPESA_APP_NAME", ""),
            version=values.get("MPESA_APP_VERSION", ""),
            description=values.get("MPESA_APP_DESCRIPTION", ""),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        **explicit: Any,
    ) -> "ClientConfig":
        merged_overrides = dict(overrides or {})
        if parameters is not None:
            merged_overrides.update(parameters.as_overrides())
        for key, value in explicit.items():
            if value is None:
                continue
            try:
                env_key = _PARAMETER_TO_ENV_KEY[key]
            except KeyError as exc:
                raise TypeError(f"Unknown client parameter '{key}'") from exc
            merged_overrides[env_key] = _stringify(value)

        environment = build_environment(env_file=env_file, base=base, overrides=merged_overrides)
        return cls.from_mapping(environment.variables)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    **explicit: Any,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    The configuration can be provided through environment variables, a
    ``.env`` file, keyword arguments named like :class:`ClientParameters`
    fields, or any combination of the three.
    """
    return ClientConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        **explicit,
    )
