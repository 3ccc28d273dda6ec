"""One-shot HTTPS client.

Performs a single GET against the ping server, validating the server with the
configured trust pool and optionally presenting a client certificate.
"""

import logging
import os
import ssl
import sys
from dataclasses import dataclass
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.ssl_ import create_urllib3_context
from urllib3.util.ssl_match_hostname import CertificateError

from .config import ClientConfig, TrustConfig, configure_logging
from .errors import (
    ClientError,
    ConfigurationError,
    ConnectionFailure,
    ReadFailure,
    TrustValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    status_code: int
    reason: str
    body: bytes

    @property
    def status(self) -> str:
        return "%d %s" % (self.status_code, self.reason)


class TrustPoolAdapter(HTTPAdapter):
    """
    Transport adapter that appends a CA file to the platform trust pool
    instead of replacing it.
    """

    def __init__(self, ca_file: str, **kwargs):
        self._ca_file = ca_file
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        ctx = create_urllib3_context()
        ctx.load_default_certs()
        try:
            ctx.load_verify_locations(self._ca_file)
        except (OSError, ssl.SSLError) as exc:
            raise ConfigurationError("cannot load CA file %s: %s" % (self._ca_file, exc)) from exc

        kwargs["ssl_context"] = ctx
        return super().init_poolmanager(*args, **kwargs)


def _check_files(config: ClientConfig):
    paths = []
    if config.trust.ca_file and not config.trust.insecure:
        paths.append(config.trust.ca_file)
    if config.identity is not None:
        paths.extend([config.identity.cert_file, config.identity.key_file])
    for path in paths:
        if not os.path.isfile(path):
            raise ConfigurationError("file not found: %s" % path)


def _apply_trust(session: requests.Session, trust: TrustConfig):
    """Mount whatever the session needs and return the ``verify`` argument."""
    if trust.insecure:
        logger.warning("server certificate validation is disabled")
        return False
    if trust.ca_file is None:
        return True
    if not trust.system_roots:
        return trust.ca_file
    session.mount("https://", TrustPoolAdapter(trust.ca_file))
    return True


def _is_verification_failure(exc: BaseException) -> bool:
    # urllib3 nests the ssl error several levels down, in causes, contexts,
    # MaxRetryError.reason and exception args.
    seen = set()
    pending = [exc]
    while pending:
        err = pending.pop()
        if id(err) in seen:
            continue
        seen.add(id(err))
        if isinstance(err, (ssl.SSLCertVerificationError, CertificateError)):
            return True
        linked = [err.__cause__, err.__context__, getattr(err, "reason", None)]
        linked.extend(err.args)
        pending.extend(e for e in linked if isinstance(e, BaseException))
    return "CERTIFICATE_VERIFY_FAILED" in str(exc)


def fetch(config: ClientConfig) -> Result:
    """GET ``config.url`` once and return its status and full body."""
    _check_files(config)

    cert = config.identity.as_requests_cert() if config.identity else None
    with requests.Session() as session:
        verify = _apply_trust(session, config.trust)
        try:
            response = session.get(config.url, verify=verify, cert=cert, stream=True)
        except requests.exceptions.SSLError as exc:
            if _is_verification_failure(exc):
                raise TrustValidationError(config.url, exc) from exc
            raise ConnectionFailure(config.url, exc) from exc
        except requests.exceptions.RequestException as exc:
            raise ConnectionFailure(config.url, exc) from exc

        with response:
            try:
                body = response.content
            except requests.exceptions.RequestException as exc:
                raise ReadFailure(config.url, exc) from exc

    logger.debug("%s answered %d (%d bytes)", config.url, response.status_code, len(body))
    return Result(response.status_code, response.reason, body)


def main(config: Optional[ClientConfig] = None) -> int:
    configure_logging()
    if config is None:
        config = ClientConfig()

    try:
        result = fetch(config)
    except (ClientError, ConfigurationError) as exc:
        logger.error("%s", exc)
        return 1

    print(result.status)
    print(result.body.decode("utf-8", errors="replace"), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
