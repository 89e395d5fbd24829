import socket

import pytest

from sdskit.poll import PollEvents, PollHandled, attach, tick


class FakeContext:
    def __init__(self, sock, disconnect_on_read=False):
        self.fd = sock.fileno()
        self.sock = sock
        self.ev_data = None
        self.calls = []
        self.received = b""
        self.disconnect_on_read = disconnect_on_read

    def handle_read(self):
        self.calls.append("read")
        self.received += self.sock.recv(1024)
        if self.disconnect_on_read:
            self.ev_data.cleanup()

    def handle_write(self):
        self.calls.append("write")

    def handle_timeout(self):
        self.calls.append("timeout")


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def test_attach_sets_handler(pair):
    ctx = FakeContext(pair[0])
    events = attach(ctx)
    assert ctx.ev_data is events
    assert isinstance(events, PollEvents)
    assert events.fd == pair[0].fileno()
    assert (events.reading, events.writing, events.deadline) == (False, False, 0.0)


def test_attach_twice_fails(pair):
    ctx = FakeContext(pair[0])
    attach(ctx)
    with pytest.raises(RuntimeError):
        attach(ctx)


def test_tick_without_handler_does_nothing(pair):
    ctx = FakeContext(pair[0])
    assert tick(ctx, 0.0) == PollHandled.NONE
    assert ctx.calls == []


def test_tick_without_interest_does_nothing(pair):
    ctx = FakeContext(pair[0])
    attach(ctx)
    assert tick(ctx, 0.0) == PollHandled.NONE


def test_tick_handles_read(pair):
    a, b = pair
    ctx = FakeContext(a)
    attach(ctx).add_read()
    b.sendall(b"hello")
    assert tick(ctx, 1.0) == PollHandled.READ
    assert ctx.received == b"hello"


def test_no_read_when_nothing_arrived(pair):
    ctx = FakeContext(pair[0])
    attach(ctx).add_read()
    assert tick(ctx, 0.0) == PollHandled.NONE
    assert ctx.calls == []


def test_tick_handles_write(pair):
    ctx = FakeContext(pair[0])
    attach(ctx).add_write()
    assert tick(ctx, 0.0) == PollHandled.WRITE
    assert ctx.calls == ["write"]


def test_del_write_stops_watching(pair):
    ctx = FakeContext(pair[0])
    events = attach(ctx)
    events.add_write()
    events.del_write()
    assert tick(ctx, 0.0) == PollHandled.NONE


def test_read_and_write_together(pair):
    a, b = pair
    ctx = FakeContext(a)
    events = attach(ctx)
    events.add_read()
    events.add_write()
    b.sendall(b"x")
    assert tick(ctx, 1.0) == PollHandled.READ | PollHandled.WRITE
    assert ctx.calls == ["read", "write"]


def test_expired_timer_fires_once(pair):
    ctx = FakeContext(pair[0])
    events = attach(ctx)
    events.add_read()
    events.schedule_timer(0.0)
    assert tick(ctx, 0.0) == PollHandled.TIMEOUT
    assert events.deadline == 0.0
    assert tick(ctx, 0.0) == PollHandled.NONE
    assert ctx.calls == ["timeout"]


def test_future_timer_does_not_fire(pair):
    ctx = FakeContext(pair[0])
    events = attach(ctx)
    events.add_write()
    events.schedule_timer(3600.0)
    deadline = events.deadline
    assert tick(ctx, 0.0) == PollHandled.WRITE
    assert events.deadline == deadline
    assert "timeout" not in ctx.calls


def test_cleanup_during_read_skips_write_and_timer(pair):
    a, b = pair
    ctx = FakeContext(a, disconnect_on_read=True)
    events = attach(ctx)
    events.add_read()
    events.add_write()
    events.schedule_timer(0.0)
    b.sendall(b"bye")
    assert tick(ctx, 1.0) == PollHandled.READ
    assert ctx.calls == ["read"]
    assert events.deleted is True
    assert events.in_tick is False


def test_tick_after_cleanup_does_nothing(pair):
    ctx = FakeContext(pair[0])
    events = attach(ctx)
    events.add_write()
    events.cleanup()
    assert tick(ctx, 0.0) == PollHandled.NONE
    assert ctx.calls == []