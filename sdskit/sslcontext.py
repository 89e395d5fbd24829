"""Client-side TLS contexts for connecting to a server over an existing socket."""

from __future__ import annotations

import socket
import ssl
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union

WINDOWS_CERT_STORE = "wincert"


class SSLContextError(IntEnum):
    """Reasons why building a TLS context can fail."""

    NONE = 0
    CREATE_FAILED = 1
    CERT_KEY_REQUIRED = 2
    CA_CERT_LOAD_FAILED = 3
    CLIENT_CERT_LOAD_FAILED = 4
    CLIENT_DEFAULT_CERT_FAILED = 5
    PRIVATE_KEY_LOAD_FAILED = 6
    OS_CERTSTORE_OPEN_FAILED = 7
    OS_CERT_ADD_FAILED = 8


_MESSAGES = {
    SSLContextError.NONE: "No Error",
    SSLContextError.CREATE_FAILED: "Failed to create OpenSSL SSL_CTX",
    SSLContextError.CERT_KEY_REQUIRED: "Client cert and key must both be specified or skipped",
    SSLContextError.CA_CERT_LOAD_FAILED: "Failed to load CA Certificate or CA Path",
    SSLContextError.CLIENT_CERT_LOAD_FAILED: "Failed to load client certificate",
    SSLContextError.PRIVATE_KEY_LOAD_FAILED: "Failed to load private key",
    SSLContextError.OS_CERTSTORE_OPEN_FAILED: "Failed to open system certificate store",
    SSLContextError.OS_CERT_ADD_FAILED: (
        "Failed to add CA certificates obtained from system to the SSL context"
    ),
}


def error_message(error: Union[SSLContextError, int]) -> str:
    """Return the human-readable description of an error code."""
    try:
        code = SSLContextError(error)
    except ValueError:
        return "Unknown error code"
    return _MESSAGES.get(code, "Unknown error code")


class SSLContextCreationError(Exception):
    """Raised when a TLS context cannot be built; ``error`` holds the reason."""

    def __init__(self, error: SSLContextError) -> None:
        self.error = SSLContextError(error)
        super().__init__(error_message(self.error))


class VerifyMode(IntEnum):
    """Whether the server certificate is verified."""

    NONE = 0
    PEER = 1


@dataclass
class SSLOptions:
    """Files and settings used to build a client TLS context."""

    cacert_filename: Optional[str] = None
    capath: Optional[str] = None
    cert_filename: Optional[str] = None
    private_key_filename: Optional[str] = None
    server_name: Optional[str] = None
    verify_mode: VerifyMode = VerifyMode.PEER


@dataclass
class TLSContext:
    """A configured client TLS context and the server name to request (SNI)."""

    ssl_context: ssl.SSLContext
    server_name: Optional[str] = None

    def wrap_socket(self, sock: socket.socket) -> ssl.SSLSocket:
        """Start a TLS session over a connected socket.

        On a blocking socket the handshake must complete; on a non-blocking
        one a handshake that still waits for I/O is accepted and the wrapped
        socket is returned so that the caller can drive it further.
        """
        try:
            wrapped = self.ssl_context.wrap_socket(
                sock,
                server_hostname=self.server_name,
                do_handshake_on_connect=False,
            )
        except (ValueError, ssl.SSLError) as exc:
            raise ConnectionError("Failed to set server_name/SNI") from exc
        try:
            wrapped.do_handshake()
        except (ssl.SSLWantReadError, ssl.SSLWantWriteError) as exc:
            if sock.gettimeout() == 0.0:
                return wrapped
            raise ConnectionError(f"SSL_connect failed: {exc}") from exc
        except ssl.SSLError as exc:
            reason = exc.reason or str(exc)
            raise ConnectionError(f"SSL_connect failed: {reason}") from exc
        except OSError as exc:
            reason = exc.strerror or str(exc)
            raise ConnectionError(f"SSL_connect failed: {reason}") from exc
        return wrapped


def create_ssl_context(
    cacert_filename: Optional[str] = None,
    capath: Optional[str] = None,
    cert_filename: Optional[str] = None,
    private_key_filename: Optional[str] = None,
    server_name: Optional[str] = None,
) -> TLSContext:
    """Build a context that verifies the server certificate."""
    options = SSLOptions(
        cacert_filename=cacert_filename,
        capath=capath,
        cert_filename=cert_filename,
        private_key_filename=private_key_filename,
        server_name=server_name,
        verify_mode=VerifyMode.PEER,
    )
    return create_ssl_context_with_options(options)


def _load_windows_store(ctx: ssl.SSLContext) -> None:
    try:
        ctx.load_default_certs(ssl.Purpose.SERVER_AUTH)
    except OSError as exc:
        raise SSLContextCreationError(SSLContextError.OS_CERTSTORE_OPEN_FAILED) from exc
    except ssl.SSLError as exc:
        raise SSLContextCreationError(SSLContextError.OS_CERT_ADD_FAILED) from exc


def _certificate_loads(cert_filename: str) -> bool:
    probe = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    try:
        probe.load_verify_locations(cafile=cert_filename)
    except (OSError, ssl.SSLError):
        return False
    return True


def create_ssl_context_with_options(options: SSLOptions) -> TLSContext:
    """Build a client TLS context (TLS 1.2 or later) from ``options``."""
    try:
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    except (ssl.SSLError, ValueError, OSError) as exc:
        raise SSLContextCreationError(SSLContextError.CREATE_FAILED) from exc

    # Only the certificate chain is checked, not the host name.
    ctx.check_hostname = False
    ctx.verify_mode = (
        ssl.CERT_REQUIRED if VerifyMode(options.verify_mode) is VerifyMode.PEER else ssl.CERT_NONE
    )

    cert = options.cert_filename
    key = options.private_key_filename
    if (cert is None) != (key is None):
        raise SSLContextCreationError(SSLContextError.CERT_KEY_REQUIRED)

    if options.capath or options.cacert_filename:
        if sys.platform == "win32" and options.cacert_filename == WINDOWS_CERT_STORE:
            _load_windows_store(ctx)
        else:
            try:
                ctx.load_verify_locations(
                    cafile=options.cacert_filename, capath=options.capath
                )
            except (OSError, ssl.SSLError) as exc:
                raise SSLContextCreationError(SSLContextError.CA_CERT_LOAD_FAILED) from exc
    else:
        try:
            ctx.set_default_verify_paths()
        except (OSError, ssl.SSLError) as exc:
            raise SSLContextCreationError(
                SSLContextError.CLIENT_DEFAULT_CERT_FAILED
            ) from exc

    if cert is not None:
        try:
            ctx.load_cert_chain(certfile=cert, keyfile=key)
        except (OSError, ssl.SSLError) as exc:
            if not _certificate_loads(cert):
                raise SSLContextCreationError(
                    SSLContextError.CLIENT_CERT_LOAD_FAILED
                ) from exc
            raise SSLContextCreationError(SSLContextError.PRIVATE_KEY_LOAD_FAILED) from exc

    return TLSContext(ssl_context=ctx, server_name=options.server_name)