"""Mutual-TLS ping: a one-shot HTTPS client and a server that answers PONG."""

from .config import (
    ClientAuthPolicy,
    ClientConfig,
    ClientIdentity,
    ServerConfig,
    ServerIdentity,
    TrustConfig,
)
from .errors import (
    ClientError,
    ConfigurationError,
    ConnectionFailure,
    ReadFailure,
    StartupError,
    TLSPingError,
    TrustValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "ClientAuthPolicy",
    "ClientConfig",
    "ClientIdentity",
    "ServerConfig",
    "ServerIdentity",
    "TrustConfig",
    "ClientError",
    "ConfigurationError",
    "ConnectionFailure",
    "ReadFailure",
    "StartupError",
    "TLSPingError",
    "TrustValidationError",
]
