from __future__ import annotations

import re
from typing import Protocol

_COOKIE_RE = re.compile(r"(?:^| )token=([^;]+)")


class TokenStore(Protocol):
    """Persistent slot holding the bearer token."""

    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def delete(self) -> None: ...


class CredentialProvider(Protocol):
    def get(self) -> str | None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def delete(self) -> None:
        self._token = None


class StoredCredentials:
    """Credential provider backed by a TokenStore.

    The store is read on every call, so a token written or cleared elsewhere
    is picked up by the next request.
    """

    def __init__(self, store: TokenStore):
        self.store = store

    def get(self) -> str | None:
        return self.store.get() or None

    def clear(self) -> None:
        if not self.store.get():
            return
        self.store.delete()


def token_from_cookie(cookie_header: str | None) -> str | None:
    if not cookie_header:
        return None
    match = _COOKIE_RE.search(cookie_header)
    if not match:
        return None
    return match.group(1) or None


def resolve_token(credentials: CredentialProvider, cookie_header: str | None = None) -> str | None:
    # stored token wins over the cookie
    token = credentials.get()
    if token:
        return token
    return token_from_cookie(cookie_header)
