import logging
import ssl
import sys
from typing import Optional

from cryptography import x509
from cryptography.hazmat.backends import default_backend
from flask import Flask, Response, request
from werkzeug import serving

from .config import (
    RESPONSE_BODY,
    ClientAuthPolicy,
    ServerConfig,
    configure_logging,
)
from .errors import ConfigurationError, StartupError, TLSPingError

logger = logging.getLogger(__name__)

METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def describe_certificate(pem: str) -> str:
    cert = x509.load_pem_x509_certificate(pem.encode("ascii"), default_backend())
    return cert.subject.rfc4514_string()


def create_app() -> Flask:
    app = Flask(__name__)

    @app.route("/", defaults={"path": ""}, methods=METHODS)
    @app.route("/<path:path>", methods=METHODS)
    def pong(path):
        client_cert = request.environ.get("SSL_CLIENT_CERT")
        if client_cert:
            logger.debug("%s /%s from %s", request.method, path, describe_certificate(client_cert))
        return Response(RESPONSE_BODY, status=200, mimetype="text/plain")

    return app


def build_ssl_context(config: ServerConfig) -> ssl.SSLContext:
    """Server-side TLS context carrying the identity and client-auth policy."""
    policy = config.client_auth
    if policy is ClientAuthPolicy.REQUIRE and not config.client_ca_file:
        raise ConfigurationError("client_auth=require needs client_ca_file")

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    try:
        context.load_cert_chain(config.identity.cert_file, config.identity.key_file)
        if policy is not ClientAuthPolicy.NONE:
            if config.client_ca_file:
                context.load_verify_locations(config.client_ca_file)
            else:
                context.load_default_certs(ssl.Purpose.CLIENT_AUTH)
    except (OSError, ssl.SSLError) as exc:
        raise StartupError("cannot load TLS identity: %s" % exc) from exc

    if policy is ClientAuthPolicy.NONE:
        context.verify_mode = ssl.CERT_NONE
    elif policy is ClientAuthPolicy.REQUEST:
        context.verify_mode = ssl.CERT_OPTIONAL
    else:
        context.verify_mode = ssl.CERT_REQUIRED

    return context


def make_server(config: ServerConfig, app: Optional[Flask] = None):
    """Bind the threaded werkzeug server; one thread per connection."""
    context = build_ssl_context(config)
    if app is None:
        app = create_app()
    return serving.make_server(
        config.host, config.port, app, threaded=True, ssl_context=context
    )


def serve(config: ServerConfig):
    server = make_server(config)
    logger.info(
        "serving https://%s:%d (client auth: %s)",
        config.host,
        server.port,
        config.client_auth.value,
    )
    server.serve_forever()


def main(config: Optional[ServerConfig] = None) -> int:
    configure_logging()
    if config is None:
        config = ServerConfig()

    try:
        serve(config)
    except TLSPingError as exc:
        logger.critical("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
