"""Manual polling of an asynchronous connection's socket.

This suits programs with no event loop of their own but a regular tick,
such as game loops. The connection object (the *context*) is expected to
provide:

* ``fd``: the socket, as a file descriptor or an object with ``fileno()``;
* ``ev_data``: the attached event handler, ``None`` while nothing is attached;
* ``handle_read()``, ``handle_write()`` and ``handle_timeout()``.

The context drives the handler through :meth:`PollEvents.add_read`,
:meth:`PollEvents.del_read`, :meth:`PollEvents.add_write`,
:meth:`PollEvents.del_write`, :meth:`PollEvents.schedule_timer` and
:meth:`PollEvents.cleanup`.
"""

from __future__ import annotations

import select
import time
from enum import IntFlag
from typing import Any


class PollHandled(IntFlag):
    """What a call to :func:`tick` dealt with."""

    NONE = 0
    READ = 1
    WRITE = 2
    TIMEOUT = 4


class PollEvents:
    """Read/write interest and timer deadline of one attached context."""

    def __init__(self, context: Any, fd: Any) -> None:
        self.context = context
        self.fd = fd
        self.reading = False
        self.writing = False
        self.in_tick = False
        self.deleted = False
        self.deadline = 0.0

    def add_read(self) -> None:
        """Start watching for readability."""
        self.reading = True

    def del_read(self) -> None:
        """Stop watching for readability."""
        self.reading = False

    def add_write(self) -> None:
        """Start watching for writability."""
        self.writing = True

    def del_write(self) -> None:
        """Stop watching for writability."""
        self.writing = False

    def cleanup(self) -> None:
        """Detach the handler; inside a tick this takes effect when the tick ends."""
        self.deleted = True

    def schedule_timer(self, seconds: float) -> None:
        """Arrange for a timeout ``seconds`` from now."""
        self.deadline = time.time() + seconds


def attach(context: Any) -> PollEvents:
    """Attach a poll handler to ``context`` and return it.

    Raises :class:`RuntimeError` if the context already has a handler.
    """
    if getattr(context, "ev_data", None) is not None:
        raise RuntimeError("an event handler is already attached")
    events = PollEvents(context, context.fd)
    context.ev_data = events
    return events


def _wait(fd: Any, reading: bool, writing: bool, timeout: float) -> tuple[bool, bool]:
    """Wait for I/O; return (readable, writable-or-error)."""
    if hasattr(select, "poll"):
        poller = select.poll()
        mask = 0
        if reading:
            mask |= select.POLLIN
        if writing:
            mask |= select.POLLOUT
        poller.register(fd, mask)
        millis = int(timeout * 1000.0) if timeout >= 0.0 else None
        revents = 0
        for _, event in poller.poll(millis):
            revents |= event
        return (
            bool(revents & select.POLLIN),
            bool(revents & (select.POLLOUT | select.POLLERR)),
        )
    rlist = [fd] if reading else []
    wlist = [fd] if writing else []
    # Connection failures show up in the exceptional set; treat as writable.
    readable, writable, failed = select.select(
        rlist, wlist, wlist, timeout if timeout >= 0.0 else None
    )
    return bool(readable), bool(writable or failed)


def tick(context: Any, timeout: float = 0.0) -> PollHandled:
    """Poll the socket once and run the callbacks that are due.

    A positive ``timeout`` waits at most that many seconds for I/O, zero just
    polls and a negative value waits forever. Interrupted waits are retried.
    """
    events = getattr(context, "ev_data", None)
    if not isinstance(events, PollEvents) or events.deleted:
        return PollHandled.NONE

    # Local copies: callbacks may change the flags.
    reading = events.reading
    writing = events.writing
    if not reading and not writing:
        return PollHandled.NONE

    readable, writable = _wait(events.fd, reading, writing, timeout)

    handled = PollHandled.NONE
    events.in_tick = True
    try:
        if reading and readable:
            context.handle_read()
            handled |= PollHandled.READ
        # A read callback may have disconnected the context.
        if writing and writable and not events.deleted:
            context.handle_write()
            handled |= PollHandled.WRITE

        if not events.deleted and events.deadline != 0.0:
            if time.time() >= events.deadline:
                events.deadline = 0.0
                context.handle_timeout()
                handled |= PollHandled.TIMEOUT
    finally:
        events.in_tick = False
    return handled