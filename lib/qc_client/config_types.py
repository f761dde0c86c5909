from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_API_ROOT = "http://localhost:5000"
ENV_API_URL = "QC_API_URL"
API_PREFIX = "/api"
DEFAULT_TIMEOUT_S = 15.0


def _default_headers() -> dict[str, str]:
    return {"Content-Type": "application/json"}


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    timeout_s: float = DEFAULT_TIMEOUT_S
    headers: dict[str, str] = field(default_factory=_default_headers)
    with_credentials: bool = True
    client_version: str | None = None


def api_root_from_env(default: str = DEFAULT_API_ROOT) -> str:
    value = os.getenv(ENV_API_URL, "").strip()
    return (value or default).rstrip("/")


def scoped_config(root: str, *, client_version: str | None = None) -> ClientConfig:
    return ClientConfig(base_url=f"{root.rstrip('/')}{API_PREFIX}", client_version=client_version)


def direct_config(root: str, *, client_version: str | None = None) -> ClientConfig:
    return ClientConfig(base_url=root.rstrip("/"), client_version=client_version)
