from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    timeout_seconds: float = 30.0
    session_init_wait_seconds: float = 3.0
    session_init_timeout_seconds: float = 10.0
    token_check_interval_seconds: float = 180.0
    token_refresh_threshold_seconds: float = 300.0
    order_poll_max_attempts: int = 5
    order_poll_delay_seconds: float = 2.0
    max_connections: int = 20
    verify_ssl: bool = True

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def _read_positive_float(name: str, default: str) -> float:
    value = _read_float(name, default)
    _validate(value > 0, f"Invalid {name}: expected > 0, got {value}")
    return value


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("YD_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"YD_API_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("YD_API_BASE_URL") or "").strip()
    )

    timeout_seconds = _read_positive_float("YD_TIMEOUT_SECONDS", "30")
    session_init_wait_seconds = _read_positive_float("YD_SESSION_INIT_WAIT_SECONDS", "3")
    session_init_timeout_seconds = _read_positive_float("YD_SESSION_INIT_TIMEOUT_SECONDS", "10")
    token_check_interval_seconds = _read_positive_float("YD_TOKEN_CHECK_INTERVAL_SECONDS", "180")

    token_refresh_threshold_seconds = _read_float("YD_TOKEN_REFRESH_THRESHOLD_SECONDS", "300")
    _validate(
        token_refresh_threshold_seconds >= 0,
        (
            "Invalid YD_TOKEN_REFRESH_THRESHOLD_SECONDS: "
            f"expected >= 0, got {token_refresh_threshold_seconds}"
        ),
    )

    order_poll_max_attempts = _read_int("YD_ORDER_POLL_MAX_ATTEMPTS", "5")
    _validate(
        order_poll_max_attempts >= 1,
        f"Invalid YD_ORDER_POLL_MAX_ATTEMPTS: expected >= 1, got {order_poll_max_attempts}",
    )

    order_poll_delay_seconds = _read_float("YD_ORDER_POLL_DELAY_SECONDS", "2")
    _validate(
        order_poll_delay_seconds >= 0,
        f"Invalid YD_ORDER_POLL_DELAY_SECONDS: expected >= 0, got {order_poll_delay_seconds}",
    )

    max_connections = _read_int("YD_MAX_CONNECTIONS", "20")
    _validate(
        max_connections >= 1,
        f"Invalid YD_MAX_CONNECTIONS: expected >= 1, got {max_connections}",
    )

    verify_ssl = _coerce_bool(os.getenv("YD_VERIFY_SSL"), True)

    values = {"YD_API_BASE_URL": api_base_url}
    _require(values, ["YD_API_BASE_URL"])

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
        session_init_wait_seconds=session_init_wait_seconds,
        session_init_timeout_seconds=session_init_timeout_seconds,
        token_check_interval_seconds=token_check_interval_seconds,
        token_refresh_threshold_seconds=token_refresh_threshold_seconds,
        order_poll_max_attempts=order_poll_max_attempts,
        order_poll_delay_seconds=order_poll_delay_seconds,
        max_connections=max_connections,
        verify_ssl=verify_ssl,
    )
