from __future__ import annotations

import logging
from typing import Callable, NoReturn

import httpx

from .credentials import CredentialProvider, resolve_token
from .errors import InterceptorError, QcClientError

logger = logging.getLogger(__name__)

RequestHook = Callable[[httpx.Request], None]


def _origin(url: httpx.URL) -> tuple[str, str, int | None]:
    return url.scheme, url.host, url.port


def make_request_hook(
        credentials: CredentialProvider,
        *,
        send_cookies: bool = True,
        origin: str | None = None,
) -> RequestHook:
    """Build the pre-dispatch hook that attaches the bearer token.

    The token is resolved per request: stored credentials first, then the
    ``token`` entry of the Cookie header the client computed for this request.
    Without a token the hook adds no Authorization header.

    httpx runs request hooks again for every redirect hop. When ``origin`` is
    given, the token is only attached to requests for that scheme, host and
    port, so a redirect to another host goes out without it.
    """
    home = _origin(httpx.URL(origin)) if origin is not None else None

    def _inject_auth(request: httpx.Request) -> None:
        try:
            cookie_header = request.headers.get("Cookie")
            if not send_cookies and cookie_header is not None:
                del request.headers["Cookie"]
            if home is not None and _origin(request.url) != home:
                logger.debug("not sending token to %s", request.url.host)
                return
            token = resolve_token(credentials, cookie_header if send_cookies else None)
            if token:
                request.headers["Authorization"] = f"Bearer {token}"
        except Exception as e:
            raise InterceptorError(f"failed to prepare request: {e}") from e

    return _inject_auth


def handle_error(exc: QcClientError, credentials: CredentialProvider, *, label: str = "API") -> NoReturn:
    """Response middleware for failed requests.

    Always re-raises ``exc``. A 401 additionally clears the stored token; the
    cookie is left alone and no redirect happens here.
    """
    logger.error("%s error: %s", label, exc)
    if exc.status_code == 401:
        logger.info("Unauthorized - clearing stored token")
        credentials.clear()
    raise exc
