class TLSPingError(Exception):
    """Base class for every error raised by tlsping."""


class ConfigurationError(TLSPingError):
    """A file or policy in the configuration cannot be used."""


class StartupError(TLSPingError):
    """The server could not load its identity."""


class ClientError(TLSPingError):
    def __init__(self, url, message):
        super().__init__("%s: %s" % (url, message))
        self.url = url


class TrustValidationError(ClientError):
    """The server certificate chain or hostname did not validate."""


class ConnectionFailure(ClientError):
    """The connection could not be established or the request was rejected."""


class ReadFailure(ClientError):
    """The response body could not be read."""
