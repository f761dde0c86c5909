from __future__ import annotations

from importlib import metadata
from typing import NoReturn

import typer
from qc_client import NetworkError, QcClient, QcClientError, RequestTimeout, StoredCredentials

from . import console
from .auth_state import ConfigTokenStore
from .config import AppConfig, resolve_api_root


def cli_version() -> str:
    try:
        return metadata.version("qc-inspect")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def make_client(cfg: AppConfig, *, base_url_override: str | None = None) -> QcClient:
    return QcClient(
        resolve_api_root(cfg, base_url_override),
        StoredCredentials(ConfigTokenStore()),
        client_version=cli_version(),
    )


def fail(e: QcClientError, action: str) -> NoReturn:
    """Report a client error and exit with code 2."""
    if isinstance(e, RequestTimeout):
        console.err(f"{action}: request timed out.")
    elif isinstance(e, NetworkError):
        console.err(f"{action}: backend unreachable ({e}).")
    elif e.status_code == 401:
        console.err("Not authenticated. Your token is invalid or expired.")
        console.hint("qc auth login")
    elif e.status_code == 403:
        console.err(f"{action}: permission denied ({e}).")
    elif e.status_code == 404:
        console.err(f"{action}: not found.")
    else:
        console.err(f"{action}: {e}")
    raise typer.Exit(code=2)
