"""Split a command line into arguments, honouring quotes and escapes."""

from __future__ import annotations

from sdskit.sds import BytesLike, Sds, _to_bytes

_SPACE = frozenset(b" \t\n\v\f\r")
_TERMINATORS = frozenset(b" \n\r\t")
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_ESCAPES = {
    ord("n"): ord("\n"),
    ord("r"): ord("\r"),
    ord("t"): ord("\t"),
    ord("b"): ord("\b"),
    ord("a"): ord("\a"),
}
_BACKSLASH = ord("\\")
_DQUOTE = ord('"')
_SQUOTE = ord("'")


class SplitArgsError(ValueError):
    """Raised for unbalanced quotes or a closing quote followed by text."""


def hex_digit_to_int(c: str | bytes | int) -> int:
    """Return the value 0..15 of a hexadecimal digit, or 0 for anything else."""
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError("expected a single character")
        code = ord(c)
    elif isinstance(c, (bytes, bytearray)):
        if len(c) != 1:
            raise ValueError("expected a single byte")
        code = c[0]
    else:
        code = int(c)
    if code in _HEX_DIGITS:
        return int(chr(code), 16)
    return 0


def _peek(raw: bytes, pos: int) -> int:
    return raw[pos] if pos < len(raw) else 0


def _quote_closes(raw: bytes, pos: int) -> None:
    following = _peek(raw, pos + 1)
    if following and following not in _SPACE:
        raise SplitArgsError("closing quote must be followed by a space or nothing")


def _read_token(raw: bytes, pos: int) -> tuple[bytes, int]:
    current = bytearray()
    in_double = in_single = False
    done = False
    while not done:
        ch = _peek(raw, pos)
        if in_double:
            if (
                ch == _BACKSLASH
                and _peek(raw, pos + 1) == ord("x")
                and _peek(raw, pos + 2) in _HEX_DIGITS
                and _peek(raw, pos + 3) in _HEX_DIGITS
            ):
                current.append(
                    hex_digit_to_int(raw[pos + 2]) * 16 + hex_digit_to_int(raw[pos + 3])
                )
                pos += 3
            elif ch == _BACKSLASH and _peek(raw, pos + 1):
                pos += 1
                escaped = raw[pos]
                current.append(_ESCAPES.get(escaped, escaped))
            elif ch == _DQUOTE:
                _quote_closes(raw, pos)
                done = True
            elif not ch:
                raise SplitArgsError("unterminated double quotes")
            else:
                current.append(ch)
        elif in_single:
            if ch == _BACKSLASH and _peek(raw, pos + 1) == _SQUOTE:
                pos += 1
                current.append(_SQUOTE)
            elif ch == _SQUOTE:
                _quote_closes(raw, pos)
                done = True
            elif not ch:
                raise SplitArgsError("unterminated single quotes")
            else:
                current.append(ch)
        elif not ch or ch in _TERMINATORS:
            done = True
        elif ch == _DQUOTE:
            in_double = True
        elif ch == _SQUOTE:
            in_single = True
        else:
            current.append(ch)
        if pos < len(raw):
            pos += 1
    return bytes(current), pos


def split_args(line: BytesLike) -> list[Sds]:
    """Split ``line`` into arguments in a REPL-like quoted form.

    Double-quoted arguments understand ``\\n``, ``\\r``, ``\\t``, ``\\b``,
    ``\\a`` and ``\\xNN`` escapes; single-quoted ones only ``\\'``. The line
    ends at its first zero byte. Empty input yields an empty list.
    """
    raw = _to_bytes(line).partition(b"\0")[0]
    tokens: list[Sds] = []
    pos = 0
    while True:
        while pos < len(raw) and raw[pos] in _SPACE:
            pos += 1
        if pos >= len(raw):
            return tokens
        token, pos = _read_token(raw, pos)
        tokens.append(Sds(token))