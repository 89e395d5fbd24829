"""Binary-safe dynamic byte strings with explicit length and spare capacity."""

from __future__ import annotations

import functools
from enum import IntEnum
from typing import Union

MAX_PREALLOC = 1024 * 1024
SIZE_MAX = 2**64 - 1
LLONG_MIN = -(2**63)
LLONG_MAX = 2**63 - 1

BytesLike = Union[bytes, bytearray, memoryview, str, "Sds"]


class SdsType(IntEnum):
    """Header class of a string, chosen by the size it must describe."""

    TYPE_5 = 0
    TYPE_8 = 1
    TYPE_16 = 2
    TYPE_32 = 3
    TYPE_64 = 4


_HEADER_SIZES = {
    SdsType.TYPE_5: 1,
    SdsType.TYPE_8: 3,
    SdsType.TYPE_16: 5,
    SdsType.TYPE_32: 9,
    SdsType.TYPE_64: 17,
}


def req_type(size: int) -> SdsType:
    """Return the smallest header type able to describe ``size`` bytes."""
    if size < 32:
        return SdsType.TYPE_5
    if size < 0xFF:
        return SdsType.TYPE_8
    if size < 0xFFFF:
        return SdsType.TYPE_16
    if size < 0xFFFFFFFF:
        return SdsType.TYPE_32
    return SdsType.TYPE_64


def header_size(kind: SdsType) -> int:
    """Return the number of header bytes used by a header type."""
    return _HEADER_SIZES[SdsType(kind)]


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, Sds):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes-like or str, got {type(data).__name__}")


@functools.total_ordering
class Sds:
    """A mutable byte string that tracks its length and preallocated space.

    The buffer always holds ``alloc + 1`` bytes, with a zero byte right after
    the content, mirroring the layout of a length-prefixed C string.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, init: BytesLike | None = b"") -> None:
        data = b"" if init is None else _to_bytes(init)
        size = len(data)
        kind = req_type(size)
        # Empty strings are usually created to be appended to.
        if kind is SdsType.TYPE_5 and size == 0:
            kind = SdsType.TYPE_8
        if header_size(kind) + size + 1 > SIZE_MAX:
            raise OverflowError("string too large")
        self._kind = kind
        self._len = size
        self._alloc = size
        self._buf = bytearray(data) + b"\0"

    @classmethod
    def from_int(cls, value: int) -> Sds:
        """Create a string holding the decimal form of a 64-bit signed integer."""
        if not LLONG_MIN <= value <= LLONG_MAX:
            raise OverflowError("value out of signed 64-bit range")
        return cls(str(value).encode("ascii"))

    def __len__(self) -> int:
        return self._len

    def __bytes__(self) -> bytes:
        return bytes(self._buf[: self._len])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Sds, bytes, bytearray, memoryview)):
            return bytes(self) == bytes(other)
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, (Sds, bytes, bytearray, memoryview)):
            return self.compare(other) < 0
        return NotImplemented

    def __repr__(self) -> str:
        return f"Sds({bytes(self)!r})"

    @property
    def kind(self) -> SdsType:
        """The header type currently in use."""
        return self._kind

    @property
    def avail(self) -> int:
        """Spare bytes available after the content without reallocating."""
        if self._kind is SdsType.TYPE_5:
            return 0
        return self._alloc - self._len

    @property
    def alloc(self) -> int:
        """Capacity excluding header and terminator."""
        if self._kind is SdsType.TYPE_5:
            return self._len
        return self._alloc

    @property
    def alloc_size(self) -> int:
        """Total allocation size: header, capacity and terminator."""
        return header_size(self._kind) + self.alloc + 1

    def dup(self) -> Sds:
        """Return an independent copy without spare space."""
        return Sds(bytes(self))

    def _set_capacity(self, kind: SdsType, capacity: int) -> None:
        current = len(self._buf)
        wanted = capacity + 1
        if wanted > current:
            self._buf.extend(bytes(wanted - current))
        else:
            del self._buf[wanted:]
        self._kind = kind
        self._alloc = capacity

    def make_room_for(self, addlen: int) -> None:
        """Ensure at least ``addlen`` spare bytes; the length is unchanged."""
        if addlen < 0:
            raise ValueError("addlen must not be negative")
        if self.avail >= addlen:
            return
        reqlen = newlen = self._len + addlen
        if newlen < MAX_PREALLOC:
            newlen *= 2
        else:
            newlen += MAX_PREALLOC
        kind = req_type(newlen)
        # Type 5 cannot remember spare space, so never use it for appends.
        if kind is SdsType.TYPE_5:
            kind = SdsType.TYPE_8
        if header_size(kind) + newlen + 1 > SIZE_MAX or newlen < reqlen:
            raise OverflowError("string too large")
        self._set_capacity(kind, newlen)

    def fill_spare(self, data: BytesLike) -> None:
        """Write ``data`` into the spare space after the content.

        The length is not changed; call :meth:`incr_len` afterwards.
        """
        raw = _to_bytes(data)
        if len(raw) > self.avail:
            raise ValueError("not enough spare space")
        self._buf[self._len : self._len + len(raw)] = raw

    def incr_len(self, incr: int) -> None:
        """Grow or shrink the length by ``incr`` and re-terminate."""
        if incr >= 0:
            if incr > self.avail:
                raise ValueError("increment exceeds spare space")
        elif self._len < -incr:
            raise ValueError("decrement exceeds length")
        self._len += incr
        self._buf[self._len] = 0

    def remove_free_space(self) -> None:
        """Shrink the allocation so that no spare space remains."""
        self._set_capacity(req_type(self._len), self._len)

    def grow_zero(self, length: int) -> None:
        """Extend to ``length`` bytes, padding with zeros; never shrinks."""
        if length <= self._len:
            return
        self.make_room_for(length - self._len)
        self._buf[self._len : length + 1] = bytes(length - self._len + 1)
        self._len = length

    def cat(self, data: BytesLike) -> None:
        """Append ``data`` to the content."""
        raw = _to_bytes(data)
        self.make_room_for(len(raw))
        end = self._len + len(raw)
        self._buf[self._len : end] = raw
        self._len = end
        self._buf[end] = 0

    def cpy(self, data: BytesLike) -> None:
        """Replace the content with ``data``."""
        raw = _to_bytes(data)
        if self.alloc < len(raw):
            self.make_room_for(len(raw) - self._len)
        self._buf[: len(raw)] = raw
        self._buf[len(raw)] = 0
        self._len = len(raw)

    def clear(self) -> None:
        """Make the string empty while keeping its allocation."""
        self._len = 0
        self._buf[0] = 0

    def update_len(self) -> None:
        """Set the length to the position of the first zero byte."""
        nul = self._buf.find(0, 0, self._len)
        if nul != -1:
            self._len = nul

    def trim(self, cset: BytesLike) -> None:
        """Strip bytes in ``cset`` (and zero bytes) from both ends."""
        chars = _to_bytes(cset) + b"\0"
        kept = bytes(self).strip(chars)
        self._buf[: len(kept)] = kept
        self._len = len(kept)
        self._buf[self._len] = 0

    def range(self, start: int, end: int) -> None:
        """Keep only the inclusive slice ``start..end``; negatives count from the end."""
        length = self._len
        if length == 0:
            return
        if start < 0:
            start = max(length + start, 0)
        if end < 0:
            end = max(length + end, 0)
        newlen = 0 if start > end else end - start + 1
        if newlen:
            if start >= length:
                newlen = 0
            elif end >= length:
                end = length - 1
                newlen = 0 if start > end else end - start + 1
        else:
            start = 0
        if start and newlen:
            self._buf[:newlen] = self._buf[start : start + newlen]
        self._buf[newlen] = 0
        self._len = newlen

    def to_lower(self) -> None:
        """Lower-case ASCII letters in place."""
        self._buf[: self._len] = self._buf[: self._len].lower()

    def to_upper(self) -> None:
        """Upper-case ASCII letters in place."""
        self._buf[: self._len] = self._buf[: self._len].upper()

    def map_chars(self, from_chars: BytesLike, to_chars: BytesLike) -> None:
        """Replace each byte found in ``from_chars`` by its partner in ``to_chars``."""
        src = _to_bytes(from_chars)
        dst = _to_bytes(to_chars)
        if len(src) != len(dst):
            raise ValueError("from_chars and to_chars must have the same length")
        table = bytearray(range(256))
        # Earlier entries win, so apply them last.
        for f, t in reversed(list(zip(src, dst))):
            table[f] = t
        self._buf[: self._len] = self._buf[: self._len].translate(bytes(table))

    def compare(self, other: BytesLike) -> int:
        """Compare bytewise: negative, zero or positive; longer wins on a shared prefix."""
        a = bytes(self)
        b = _to_bytes(other)
        for x, y in zip(a, b):
            if x != y:
                return x - y
        return len(a) - len(b)