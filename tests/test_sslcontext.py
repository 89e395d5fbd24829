import socket
import ssl

import pytest

from sdskit.sslcontext import (
    SSLContextCreationError,
    SSLContextError,
    SSLOptions,
    TLSContext,
    VerifyMode,
    create_ssl_context,
    create_ssl_context_with_options,
    error_message,
)


@pytest.mark.parametrize(
    "code, text",
    [
        (SSLContextError.NONE, "No Error"),
        (SSLContextError.CREATE_FAILED, "Failed to create OpenSSL SSL_CTX"),
        (
            SSLContextError.CERT_KEY_REQUIRED,
            "Client cert and key must both be specified or skipped",
        ),
        (SSLContextError.CA_CERT_LOAD_FAILED, "Failed to load CA Certificate or CA Path"),
        (SSLContextError.CLIENT_CERT_LOAD_FAILED, "Failed to load client certificate"),
        (SSLContextError.PRIVATE_KEY_LOAD_FAILED, "Failed to load private key"),
        (
            SSLContextError.OS_CERTSTORE_OPEN_FAILED,
            "Failed to open system certificate store",
        ),
        (
            SSLContextError.OS_CERT_ADD_FAILED,
            "Failed to add CA certificates obtained from system to the SSL context",
        ),
    ],
)
def test_error_messages(code, text):
    assert error_message(code) == text


def test_default_cert_failure_has_no_specific_message():
    assert error_message(SSLContextError.CLIENT_DEFAULT_CERT_FAILED) == "Unknown error code"


def test_unknown_code_message():
    assert error_message(999) == "Unknown error code"


def test_cert_without_key_is_rejected(tmp_path):
    cert = tmp_path / "client.crt"
    cert.write_text("irrelevant")
    with pytest.raises(SSLContextCreationError) as info:
        create_ssl_context(cert_filename=str(cert))
    assert info.value.error is SSLContextError.CERT_KEY_REQUIRED
    assert str(info.value) == error_message(SSLContextError.CERT_KEY_REQUIRED)


def test_key_without_cert_is_rejected(tmp_path):
    key = tmp_path / "client.key"
    key.write_text("irrelevant")
    with pytest.raises(SSLContextCreationError) as info:
        create_ssl_context(private_key_filename=str(key))
    assert info.value.error is SSLContextError.CERT_KEY_REQUIRED


def test_missing_ca_file(tmp_path):
    with pytest.raises(SSLContextCreationError) as info:
        create_ssl_context(cacert_filename=str(tmp_path / "missing.pem"))
    assert info.value.error is SSLContextError.CA_CERT_LOAD_FAILED


def test_garbage_ca_file(tmp_path):
    ca = tmp_path / "ca.pem"
    ca.write_text("not a certificate\n")
    with pytest.raises(SSLContextCreationError) as info:
        create_ssl_context(cacert_filename=str(ca))
    assert info.value.error is SSLContextError.CA_CERT_LOAD_FAILED


def test_garbage_client_cert(tmp_path):
    cert = tmp_path / "client.crt"
    key = tmp_path / "client.key"
    cert.write_text("not a certificate\n")
    key.write_text("not a key either\n")
    with pytest.raises(SSLContextCreationError) as info:
        create_ssl_context(cert_filename=str(cert), private_key_filename=str(key))
    assert info.value.error is SSLContextError.CLIENT_CERT_LOAD_FAILED


def test_default_context_verifies_peer():
    ctx = create_ssl_context(server_name="redis.example.com")
    assert ctx.server_name == "redis.example.com"
    assert ctx.ssl_context.verify_mode == ssl.CERT_REQUIRED
    assert ctx.ssl_context.minimum_version == ssl.TLSVersion.TLSv1_2


def test_options_without_verification():
    ctx = create_ssl_context_with_options(SSLOptions(verify_mode=VerifyMode.NONE))
    assert ctx.ssl_context.verify_mode == ssl.CERT_NONE
    assert ctx.server_name is None


def test_options_default_to_peer_verification():
    assert SSLOptions().verify_mode is VerifyMode.PEER


def test_wrap_nonblocking_socket_returns_pending_session():
    ctx = create_ssl_context_with_options(
        SSLOptions(server_name="redis.example.com", verify_mode=VerifyMode.NONE)
    )
    left, right = socket.socketpair()
    try:
        left.setblocking(False)
        wrapped = ctx.wrap_socket(left)
        assert wrapped.server_hostname == "redis.example.com"
        assert right.recv(5)[:1] == b"\x16"
        wrapped.close()
    finally:
        left.close()
        right.close()


def test_wrap_blocking_socket_fails_on_garbage_peer():
    ctx = TLSContext(
        ssl_context=create_ssl_context_with_options(
            SSLOptions(verify_mode=VerifyMode.NONE)
        ).ssl_context
    )
    left, right = socket.socketpair()
    try:
        left.settimeout(5)
        right.sendall(b"-ERR this is not tls\r\n" * 4)
        right.close()
        with pytest.raises(ConnectionError) as info:
            ctx.wrap_socket(left)
        assert str(info.value).startswith("SSL_connect failed")
    finally:
        left.close()