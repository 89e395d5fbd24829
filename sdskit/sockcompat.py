"""Translation between Winsock error codes and portable socket conventions."""

from __future__ import annotations

import errno
import socket
from enum import IntEnum


class WsaError(IntEnum):
    """Winsock error codes."""

    WSA_NOT_ENOUGH_MEMORY = 8
    WSAEFAULT = 10014
    WSAEINVAL = 10022
    WSAEWOULDBLOCK = 10035
    WSAEINPROGRESS = 10036
    WSAEALREADY = 10037
    WSAENOTSOCK = 10038
    WSAEDESTADDRREQ = 10039
    WSAEMSGSIZE = 10040
    WSAEPROTOTYPE = 10041
    WSAENOPROTOOPT = 10042
    WSAEPROTONOSUPPORT = 10043
    WSAESOCKTNOSUPPORT = 10044
    WSAEOPNOTSUPP = 10045
    WSAEAFNOSUPPORT = 10047
    WSAEADDRINUSE = 10048
    WSAEADDRNOTAVAIL = 10049
    WSAENETDOWN = 10050
    WSAENETUNREACH = 10051
    WSAENETRESET = 10052
    WSAECONNABORTED = 10053
    WSAECONNRESET = 10054
    WSAENOBUFS = 10055
    WSAEISCONN = 10056
    WSAENOTCONN = 10057
    WSAETIMEDOUT = 10060
    WSAECONNREFUSED = 10061
    WSAELOOP = 10062
    WSAENAMETOOLONG = 10063
    WSAEHOSTUNREACH = 10065
    WSAENOTEMPTY = 10066
    WSATYPE_NOT_FOUND = 10109
    WSAHOST_NOT_FOUND = 11001
    WSATRY_AGAIN = 11002
    WSANO_RECOVERY = 11003


_WSA_TO_ERRNO = {
    WsaError.WSAEWOULDBLOCK: errno.EWOULDBLOCK,
    WsaError.WSAEINPROGRESS: errno.EINPROGRESS,
    WsaError.WSAEALREADY: errno.EALREADY,
    WsaError.WSAENOTSOCK: errno.ENOTSOCK,
    WsaError.WSAEDESTADDRREQ: errno.EDESTADDRREQ,
    WsaError.WSAEMSGSIZE: errno.EMSGSIZE,
    WsaError.WSAEPROTOTYPE: errno.EPROTOTYPE,
    WsaError.WSAENOPROTOOPT: errno.ENOPROTOOPT,
    WsaError.WSAEPROTONOSUPPORT: errno.EPROTONOSUPPORT,
    WsaError.WSAEOPNOTSUPP: errno.EOPNOTSUPP,
    WsaError.WSAEAFNOSUPPORT: errno.EAFNOSUPPORT,
    WsaError.WSAEADDRINUSE: errno.EADDRINUSE,
    WsaError.WSAEADDRNOTAVAIL: errno.EADDRNOTAVAIL,
    WsaError.WSAENETDOWN: errno.ENETDOWN,
    WsaError.WSAENETUNREACH: errno.ENETUNREACH,
    WsaError.WSAENETRESET: errno.ENETRESET,
    WsaError.WSAECONNABORTED: errno.ECONNABORTED,
    WsaError.WSAECONNRESET: errno.ECONNRESET,
    WsaError.WSAENOBUFS: errno.ENOBUFS,
    WsaError.WSAEISCONN: errno.EISCONN,
    WsaError.WSAENOTCONN: errno.ENOTCONN,
    WsaError.WSAETIMEDOUT: errno.ETIMEDOUT,
    WsaError.WSAECONNREFUSED: errno.ECONNREFUSED,
    WsaError.WSAELOOP: errno.ELOOP,
    WsaError.WSAENAMETOOLONG: errno.ENAMETOOLONG,
    WsaError.WSAEHOSTUNREACH: errno.EHOSTUNREACH,
    WsaError.WSAENOTEMPTY: errno.ENOTEMPTY,
}

_WSA_TO_GAI = {
    WsaError.WSATRY_AGAIN: socket.EAI_AGAIN,
    WsaError.WSAEINVAL: socket.EAI_BADFLAGS,
    WsaError.WSAEAFNOSUPPORT: socket.EAI_FAMILY,
    WsaError.WSA_NOT_ENOUGH_MEMORY: socket.EAI_MEMORY,
    WsaError.WSAHOST_NOT_FOUND: socket.EAI_NONAME,
    WsaError.WSATYPE_NOT_FOUND: socket.EAI_SERVICE,
    WsaError.WSAESOCKTNOSUPPORT: socket.EAI_SOCKTYPE,
}

_GAI_TO_WSA = {gai: int(wsa) for wsa, gai in _WSA_TO_GAI.items()}


def wsa_error_to_errno(err: int) -> int:
    """Map a Winsock error to the matching errno value, or ``EIO`` if none fits."""
    try:
        return _WSA_TO_ERRNO[WsaError(err)]
    except (ValueError, KeyError):
        return errno.EIO


def wsa_to_gai_error(code: int) -> int:
    """Map a Winsock name-resolution result to an ``EAI_*`` code.

    Zero stays zero; anything unrecognised becomes ``EAI_FAIL``.
    """
    if code == 0:
        return 0
    try:
        return _WSA_TO_GAI[WsaError(code)]
    except (ValueError, KeyError):
        return socket.EAI_FAIL


def gai_to_wsa_error(code: int) -> int:
    """Map an ``EAI_*`` code back to Winsock, ``WSANO_RECOVERY`` by default."""
    if code == 0:
        return 0
    return _GAI_TO_WSA.get(code, int(WsaError.WSANO_RECOVERY))


def connect_errno(err: int) -> int:
    """Adjust the errno left by a non-blocking connect to POSIX meaning.

    ``EWOULDBLOCK`` means the connection is in progress, and ``EIO`` (the
    translation of an invalid-argument report) means one is already pending.
    """
    if err == errno.EWOULDBLOCK:
        return errno.EINPROGRESS
    if err == errno.EIO:
        return errno.EALREADY
    return err


def timeval_to_millis(sec: int, usec: int) -> int:
    """Convert a seconds/microseconds pair to whole milliseconds."""
    if sec < 0 or usec < 0:
        raise ValueError("time values must not be negative")
    return sec * 1000 + usec // 1000


def millis_to_timeval(millis: int) -> tuple[int, int]:
    """Convert milliseconds to a ``(seconds, microseconds)`` pair."""
    if millis < 0:
        raise ValueError("time values must not be negative")
    return millis // 1000, (millis * 1000) % 1000000