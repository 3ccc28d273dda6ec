import enum
import logging
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_URL = "https://127.0.0.1:8443"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8443

SERVER_CERT = "server.crt"
SERVER_KEY = "server.key"
CLIENT_CERT = "client.crt"
CLIENT_KEY = "client.key"

RESPONSE_BODY = b"PONG\n"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ClientAuthPolicy(enum.Enum):
    """How the server treats client certificates during the handshake."""

    NONE = "none"
    # request but do not require; ssl still verifies a presented certificate
    REQUEST = "request"
    REQUIRE = "require"


@dataclass(frozen=True)
class TrustConfig:
    """Roots the client validates the server chain against.

    With ``ca_file`` set and ``system_roots`` true the file is appended to the
    platform pool; with ``system_roots`` false it replaces it.
    """

    ca_file: Optional[str] = None
    system_roots: bool = True
    insecure: bool = False


@dataclass(frozen=True)
class ClientIdentity:
    cert_file: str = CLIENT_CERT
    key_file: str = CLIENT_KEY

    def as_requests_cert(self):
        return (self.cert_file, self.key_file)


@dataclass(frozen=True)
class ServerIdentity:
    cert_file: str = SERVER_CERT
    key_file: str = SERVER_KEY


@dataclass(frozen=True)
class ClientConfig:
    url: str = DEFAULT_URL
    trust: TrustConfig = field(default_factory=TrustConfig)
    identity: Optional[ClientIdentity] = None


@dataclass(frozen=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    identity: ServerIdentity = field(default_factory=ServerIdentity)
    client_auth: ClientAuthPolicy = ClientAuthPolicy.NONE
    client_ca_file: Optional[str] = None


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
