# sdskit

A small toolkit built around binary-safe dynamic byte strings, with a few
helpers for talking to a server over a socket: argument splitting, client TLS
contexts, a manual-tick poll adapter and socket error-code mappings.

Only the standard library is needed.

## Modules

### `sdskit.sds`

`Sds` is a mutable byte string that records its length, its allocated
capacity and its header kind (`SdsType`, chosen with `req_type`; `header_size`
gives the header bytes of a kind). It accepts `bytes`, `bytearray`,
`memoryview`, `str` (encoded as UTF-8) or another `Sds`.

- Construction: `Sds(init)`, `Sds.from_int(value)` (signed 64-bit), `dup()`.
- Properties: `kind`, `avail` (spare bytes), `alloc` (capacity) and
  `alloc_size` (header + capacity + terminator).
- Growth in the style of a preallocating buffer: `make_room_for(addlen)`
  doubles the requested size below 1 MiB and adds 1 MiB above it;
  `fill_spare(data)` writes into the spare space and `incr_len(n)` then
  commits (or, with a negative `n`, drops) bytes; `grow_zero(length)`,
  `remove_free_space()`.
- In-place edits: `cat`, `cpy`, `clear`, `update_len` (cut at the first zero
  byte), `trim(cset)` (zero bytes are trimmed too), `range(start, end)`
  (inclusive, negative indices count from the end), `to_lower`, `to_upper`
  (ASCII only) and `map_chars(from_chars, to_chars)`.
- Comparison: `compare(other)` returns negative, zero or positive; `==` and `<`
  work against `Sds` and byte strings. `Sds` objects are not hashable.

### `sdskit.textops`

- `ll2str(value)` and `ull2str(value)` give the decimal form of a signed or
  unsigned 64-bit integer and raise `OverflowError` out of range.
- `split_len(data, sep)` splits on a separator of one or more bytes; empty
  input gives `[]`, and an empty separator raises `ValueError`.
- `cat_repr(data)` returns a double-quoted, escaped form (`\n`, `\r`, `\t`,
  `\a`, `\b`, `\\`, `\"`, `\xNN`).
- `format_fast(fmt, *args)` supports `%s` (up to the first zero byte), `%S`,
  `%i`/`%I` (32/64-bit signed) and `%u`/`%U` (32/64-bit unsigned). Any other
  `%x` emits `x`, so `%%` gives `%`.
- `join(items, sep)`.

### `sdskit.splitargs`

`split_args(line)` breaks a REPL-style line into arguments. Double-quoted
arguments understand `\n`, `\r`, `\t`, `\b`, `\a` and `\xNN`, and single-quoted
ones understand `\'`. Unbalanced quotes, or a closing quote followed by
anything but whitespace, raise `SplitArgsError`. `hex_digit_to_int(c)` returns
0..15 for a hex digit and 0 for anything else.

### `sdskit.sslcontext`

`create_ssl_context(...)` and `create_ssl_context_with_options(SSLOptions(...))`
build a `TLSContext`: a client context with TLS 1.2 or newer, optional CA file
or path (otherwise the default paths), an optional client certificate and key,
and an optional SNI `server_name`. `VerifyMode.PEER` requires a valid
certificate chain; host names are not checked. Failures raise
`SSLContextCreationError`, whose `error` attribute is an `SSLContextError`;
`error_message(code)` returns the text for a code.

`TLSContext.wrap_socket(sock)` starts a TLS session over a connected socket.
On a non-blocking socket a handshake that is still waiting for I/O is accepted.
Handshake failures raise `ConnectionError`.

### `sdskit.poll`

An event adapter for programs with a regular tick but no event loop.
`attach(context)` creates a `PollEvents` and stores it in `context.ev_data`.
It raises `RuntimeError` if a handler is already attached. The context must
provide `fd`, `handle_read()`, `handle_write()` and `handle_timeout()`, and
must drive the handler with `add_read`, `del_read`, `add_write`, `del_write`,
`schedule_timer(seconds)` and `cleanup`.

`tick(context, timeout=0.0)` polls once. A positive timeout waits that many
seconds, zero only checks, and a negative value waits without limit. It runs
the callbacks that are due and returns a `PollHandled` flag set (`READ`,
`WRITE`, `TIMEOUT`). After `cleanup()`, no callbacks run.

### `sdskit.sockcompat`

Plain mappings between Winsock codes (`WsaError`) and portable values:
`wsa_error_to_errno` (falls back to `EIO`), `wsa_to_gai_error` (falls back to
`EAI_FAIL`), `gai_to_wsa_error` (falls back to `WSANO_RECOVERY`),
`connect_errno`, `timeval_to_millis` and `millis_to_timeval`.

## Example

```python
from sdskit.sds import Sds
from sdskit.splitargs import split_args
from sdskit.textops import cat_repr, format_fast

s = Sds(b"xxciaoyyy")
s.trim(b"xy")
assert bytes(s) == b"ciao"

s.range(1, -1)
assert bytes(s) == b"iao"

assert split_args('set key "hello\\nworld"') == [b"set", b"key", b"hello\nworld"]
assert cat_repr(b"\a\n\x00foo\r") == b'"\\a\\n\\x00foo\\r"'
assert format_fast("%s=%I", b"n", 42) == b"n=42"
```

## What it does not do

The package has no client or connection of its own. It does not open sockets,
encode commands or parse server replies, and it has no command-line tool.
`sslcontext` and `poll` work on sockets and context objects that you supply.

## Running the tests

```
pip install -e .[test]
pytest
```