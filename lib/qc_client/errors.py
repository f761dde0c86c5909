from __future__ import annotations

from typing import Any


class QcClientError(Exception):
    """Base client error."""

    status_code: int | None = None

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class NetworkError(QcClientError):
    """Transport/network layer error. No HTTP response was obtained."""


class RequestTimeout(NetworkError):
    """The request did not complete within the configured timeout."""


class InterceptorError(QcClientError):
    """Failure while preparing an outgoing request (token lookup, headers)."""


class ApiError(QcClientError):
    def __init__(self, status_code: int, message: str, details: str | None = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
        self.body = body


class AuthError(ApiError):
    """Auth-related API error (401/403)."""
