from .client import QcClient
from .credentials import MemoryTokenStore, StoredCredentials
from .errors import ApiError, AuthError, InterceptorError, NetworkError, QcClientError, RequestTimeout

__all__ = [
    "QcClient",
    "MemoryTokenStore",
    "StoredCredentials",
    "ApiError",
    "AuthError",
    "InterceptorError",
    "NetworkError",
    "QcClientError",
    "RequestTimeout",
]
