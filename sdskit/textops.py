"""Number formatting, splitting, quoting, fast formatting and joining of byte strings."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from sdskit.sds import LLONG_MAX, LLONG_MIN, BytesLike, Sds, _to_bytes

ULLONG_MAX = 2**64 - 1
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
UINT_MAX = 2**32 - 1

_INT_RANGES = {
    "i": (INT_MIN, INT_MAX),
    "I": (LLONG_MIN, LLONG_MAX),
    "u": (0, UINT_MAX),
    "U": (0, ULLONG_MAX),
}

_REPR_ESCAPES = {
    ord("\\"): b"\\\\",
    ord('"'): b'\\"',
    ord("\n"): b"\\n",
    ord("\r"): b"\\r",
    ord("\t"): b"\\t",
    ord("\a"): b"\\a",
    ord("\b"): b"\\b",
}


def _check_int(value: int, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, got {type(value).__name__}")
    if not low <= value <= high:
        raise OverflowError(f"{value} out of range [{low}, {high}]")
    return value


def ll2str(value: int) -> bytes:
    """Return the decimal form of a signed 64-bit integer."""
    return str(_check_int(value, LLONG_MIN, LLONG_MAX)).encode("ascii")


def ull2str(value: int) -> bytes:
    """Return the decimal form of an unsigned 64-bit integer."""
    return str(_check_int(value, 0, ULLONG_MAX)).encode("ascii")


def split_len(data: BytesLike, sep: BytesLike) -> list[Sds]:
    """Split ``data`` on every occurrence of the (possibly multi-byte) ``sep``.

    Empty input gives an empty list; an empty separator is an error.
    """
    raw = _to_bytes(data)
    separator = _to_bytes(sep)
    if not separator:
        raise ValueError("separator must not be empty")
    if not raw:
        return []
    return [Sds(part) for part in raw.split(separator)]


def cat_repr(data: BytesLike) -> Sds:
    """Return a double-quoted, escaped representation of ``data``.

    Non-printable bytes become ``\\n``-style escapes or ``\\xNN``.
    """
    out = bytearray(b'"')
    for byte in _to_bytes(data):
        escaped = _REPR_ESCAPES.get(byte)
        if escaped is not None:
            out += escaped
        elif 0x20 <= byte <= 0x7E:
            out.append(byte)
        else:
            out += b"\\x%02x" % byte
    out += b'"'
    return Sds(bytes(out))


def _next_arg(args: Iterator[object], directive: str) -> object:
    try:
        return next(args)
    except StopIteration:
        raise TypeError(f"not enough arguments for %{directive}") from None


def format_fast(fmt: BytesLike, *args: object) -> Sds:
    """Format with a small printf-like subset.

    Supported: ``%s`` (string up to its first zero byte), ``%S`` (whole byte
    string), ``%i``/``%I`` (32/64-bit signed), ``%u``/``%U`` (32/64-bit
    unsigned). Any other ``%x`` emits ``x`` verbatim, so ``%%`` gives ``%``.
    """
    spec = _to_bytes(fmt)
    values = iter(args)
    out = bytearray()
    pos = 0
    while pos < len(spec):
        byte = spec[pos]
        if byte != ord("%"):
            out.append(byte)
            pos += 1
            continue
        if pos + 1 >= len(spec):
            raise ValueError("format ends with a lone '%'")
        directive = chr(spec[pos + 1])
        pos += 2
        if directive == "s":
            text = _to_bytes(_next_arg(values, directive))  # type: ignore[arg-type]
            out += text.partition(b"\0")[0]
        elif directive == "S":
            out += _to_bytes(_next_arg(values, directive))  # type: ignore[arg-type]
        elif directive in _INT_RANGES:
            low, high = _INT_RANGES[directive]
            number = _check_int(_next_arg(values, directive), low, high)  # type: ignore[arg-type]
            out += str(number).encode("ascii")
        else:
            out.append(ord(directive))
    return Sds(bytes(out))


def join(items: Iterable[BytesLike], sep: BytesLike) -> Sds:
    """Join byte strings with ``sep`` between consecutive items."""
    separator = _to_bytes(sep)
    return Sds(separator.join(_to_bytes(item) for item in items))