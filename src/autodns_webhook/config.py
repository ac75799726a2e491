"""Startup configuration loading and validation from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_HOST = "0.0.0.0"
_DEFAULT_PORT = 443
_DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Webhook process configuration loaded from environment variables."""

    group_name: str
    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    tls_cert_file: str | None = None
    tls_key_file: str | None = None
    log_level: str = _DEFAULT_LOG_LEVEL


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


def load_config() -> AppConfig:
    """Load and validate webhook configuration from environment variables."""
    group_name = _require_env("GROUP_NAME")
    host = os.environ.get("WEBHOOK_HOST", _DEFAULT_HOST)

    raw_port = os.environ.get("WEBHOOK_PORT", str(_DEFAULT_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        raise ValueError(f"WEBHOOK_PORT must be an integer, got: {raw_port!r}")
    if not 1 <= port <= 65535:
        raise ValueError(f"WEBHOOK_PORT must be between 1 and 65535, got: {port}")

    tls_cert_file = os.environ.get("TLS_CERT_FILE") or None
    tls_key_file = os.environ.get("TLS_KEY_FILE") or None
    if bool(tls_cert_file) != bool(tls_key_file):
        raise ValueError("TLS_CERT_FILE and TLS_KEY_FILE must be set together")

    log_level = os.environ.get("LOG_LEVEL", _DEFAULT_LOG_LEVEL).upper()

    return AppConfig(
        group_name=group_name,
        host=host,
        port=port,
        tls_cert_file=tls_cert_file,
        tls_key_file=tls_key_file,
        log_level=log_level,
    )
