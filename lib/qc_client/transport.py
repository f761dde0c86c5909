from __future__ import annotations

import asyncio
import json
import time
from contextlib import contextmanager
from http.cookiejar import CookieJar
from typing import Any, Iterator

import httpx

from .config_types import ClientConfig, direct_config, scoped_config
from .credentials import CredentialProvider
from .errors import ApiError, AuthError, NetworkError, QcClientError, RequestTimeout
from .errors_utils import error_message
from .middleware import RequestHook, handle_error, make_request_hook

USER_AGENT = "qc-client/0.1.0"


def _base_headers(cfg: ClientConfig) -> dict[str, str]:
    headers = {"User-Agent": USER_AGENT}
    if cfg.client_version:
        headers["X-Client-Version"] = cfg.client_version
    return headers


def _request_headers(cfg: ClientConfig, headers: dict[str, str] | None, *, multipart: bool) -> httpx.Headers:
    merged = httpx.Headers(cfg.headers)
    merged.update(headers or {})
    content_type = merged.get("Content-Type")
    # httpx has to write the multipart boundary itself
    if multipart and content_type is not None and "boundary=" not in content_type:
        del merged["Content-Type"]
    return merged


def _network_error(method: str, path: str, e: httpx.RequestError) -> NetworkError:
    if isinstance(e, httpx.TimeoutException):
        err = RequestTimeout(f"{method} {path} timed out: {e}")
    else:
        err = NetworkError(f"{method} {path} failed: {e}")
    err.__cause__ = e
    return err


def _deadline_error(method: str, path: str, timeout_s: float) -> RequestTimeout:
    return RequestTimeout(f"{method} {path} timed out: no complete response within {timeout_s:g}s")


def _parse_response(method: str, path: str, status_code: int, content: bytes, encoding: str | None) -> Any:
    # Try parse body as json for better errors / output
    text = content.decode(encoding or "utf-8", errors="replace")
    data: Any = None
    try:
        data = json.loads(text)
    except ValueError:
        pass

    if status_code >= 400:
        msg = error_message(data, f"{method} {path} failed with {status_code}")
        details = None
        if data is not None:
            details = json.dumps(data, ensure_ascii=False)
        elif text:
            details = text[:1000]

        if status_code in (401, 403):
            raise AuthError(status_code, msg, details, data)
        raise ApiError(status_code, msg, details, data)

    return data if data is not None else text


class _BaseTransport:
    """Construction and failure handling shared by the sync and async transports."""

    def __init__(self, cfg: ClientConfig, credentials: CredentialProvider, *, label: str = "API"):
        self._cfg = cfg
        self._credentials = credentials
        self.label = label

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def _client_kwargs(self, cookies: CookieJar | None) -> dict[str, Any]:
        return {
            "base_url": self._cfg.base_url.rstrip("/"),
            "timeout": self._cfg.timeout_s,
            "headers": _base_headers(self._cfg),
            "cookies": cookies if self._cfg.with_credentials else None,
            "follow_redirects": True,
        }

    def _request_hook(self) -> RequestHook:
        return make_request_hook(
            self._credentials,
            send_cookies=self._cfg.with_credentials,
            origin=self._cfg.base_url,
        )

    def _build(
            self,
            json_body: Any | None,
            params: dict[str, Any] | None,
            files: Any | None,
            data: dict[str, Any] | None,
            headers: dict[str, str] | None,
    ) -> dict[str, Any]:
        return {
            "json": json_body,
            "params": params,
            "files": files,
            "data": data,
            "headers": _request_headers(self._cfg, headers, multipart=files is not None),
        }

    @contextmanager
    def _call(self, method: str, path: str) -> Iterator[None]:
        """Map every failure of one request to a client error and run ``handle_error`` on it."""
        try:
            try:
                yield
            except httpx.RequestError as e:
                raise _network_error(method, path, e)
            except TimeoutError as e:
                raise _deadline_error(method, path, self._cfg.timeout_s) from e
        except QcClientError as e:
            handle_error(e, self._credentials, label=self.label)


class Transport(_BaseTransport):
    """Sync transport over a long-lived httpx.Client.

    ``cfg.timeout_s`` bounds the whole request, body included. httpx's own
    timeout only bounds each connect/read/write phase, so the body is streamed
    and checked against a deadline.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            credentials: CredentialProvider,
            *,
            cookies: CookieJar | None = None,
            label: str = "API",
            transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(cfg, credentials, label=label)
        self._client = httpx.Client(
            **self._client_kwargs(cookies),
            event_hooks={"request": [self._request_hook()]},
            transport=transport,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def close(self) -> None:
        self._client.close()

    def request(
            self,
            method: str,
            path: str,
            *,
            json_body: Any | None = None,
            params: dict[str, Any] | None = None,
            files: Any | None = None,
            data: dict[str, Any] | None = None,
            headers: dict[str, str] | None = None,
    ) -> Any:
        kwargs = self._build(json_body, params, files, data, headers)
        with self._call(method, path):
            deadline = time.monotonic() + self._cfg.timeout_s
            chunks: list[bytes] = []
            with self._client.stream(method, path, **kwargs) as r:
                for chunk in r.iter_bytes():
                    if time.monotonic() > deadline:
                        raise _deadline_error(method, path, self._cfg.timeout_s)
                    chunks.append(chunk)
            if time.monotonic() > deadline:
                raise _deadline_error(method, path, self._cfg.timeout_s)
            return _parse_response(method, path, r.status_code, b"".join(chunks), r.encoding)


class AsyncTransport(_BaseTransport):
    """Same contract as Transport on top of httpx.AsyncClient.

    Concurrent requests are independent: each one reads the token when it is
    dispatched and no ordering between them is kept. Each request runs under
    ``asyncio.timeout(cfg.timeout_s)``.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            credentials: CredentialProvider,
            *,
            cookies: CookieJar | None = None,
            label: str = "API",
            transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(cfg, credentials, label=label)
        inject = self._request_hook()

        async def _inject_auth(request: httpx.Request) -> None:
            inject(request)

        self._client = httpx.AsyncClient(
            **self._client_kwargs(cookies),
            event_hooks={"request": [_inject_auth]},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
            self,
            method: str,
            path: str,
            *,
            json_body: Any | None = None,
            params: dict[str, Any] | None = None,
            files: Any | None = None,
            data: dict[str, Any] | None = None,
            headers: dict[str, str] | None = None,
    ) -> Any:
        kwargs = self._build(json_body, params, files, data, headers)
        with self._call(method, path):
            async with asyncio.timeout(self._cfg.timeout_s):
                async with self._client.stream(method, path, **kwargs) as r:
                    content = await r.aread()
            return _parse_response(method, path, r.status_code, content, r.encoding)

def create_transports(
        root: str,
        credentials: CredentialProvider,
        *,
        client_version: str | None = None,
        transport: httpx.BaseTransport | None = None,
) -> tuple[Transport, Transport]:
    """Build the scoped (``<root>/api``) and direct (``<root>``) transports.

    Both share one cookie jar, so a session cookie set through either is sent
    by both, and both run the same interceptors.
    """
    cookies = CookieJar()
    scoped = Transport(
        scoped_config(root, client_version=client_version),
        credentials,
        cookies=cookies,
        label="API",
        transport=transport,
    )
    direct = Transport(
        direct_config(root, client_version=client_version),
        credentials,
        cookies=cookies,
        label="Direct API",
        transport=transport,
    )
    return scoped, direct
