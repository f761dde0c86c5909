from __future__ import annotations

from dataclasses import dataclass

from .config import load_config, save_config


class ConfigTokenStore:
    """Token slot in the config file.

    Reads the file on every get() so a login or logout in another process is
    seen by the next request.
    """

    def get(self) -> str | None:
        token = (load_config().auth.token or "").strip()
        return token or None

    def set(self, token: str) -> None:
        cfg = load_config()
        cfg.auth.token = token
        cfg.auth.token_type = "bearer"
        save_config(cfg)

    def delete(self) -> None:
        cfg = load_config()
        if not cfg.auth.token:
            return
        cfg.auth.token = ""
        save_config(cfg)


@dataclass
class AuthContext:
    state: str
    role: str | None = None


def resolve_auth_context() -> AuthContext:
    token = ConfigTokenStore().get()
    if not token:
        return AuthContext(state="no_token")
    return AuthContext(state="authed")
