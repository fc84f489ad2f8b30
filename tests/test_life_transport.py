import asyncio

import pytest
from fastapi.websockets import WebSocketState

from life_transport import INBOX_LIMIT, TransportClosed, WebSocketTransport


def text_frame(text):
    return {"type": "websocket.receive", "text": text}


def bytes_frame(data):
    return {"type": "websocket.receive", "bytes": data}


DISCONNECT = {"type": "websocket.disconnect", "code": 1000}


class FakeWebSocket:
    """Hands out queued frames, then waits until cancelled."""

    def __init__(self, frames=(), fail_send=False):
        self.frames = list(frames)
        self.fail_send = fail_send
        self.sent = []
        self.closed = False
        self.application_state = WebSocketState.CONNECTED
        self.client_state = WebSocketState.CONNECTED

    async def receive(self):
        if self.frames:
            return self.frames.pop(0)
        await asyncio.Event().wait()

    async def send_text(self, text):
        if self.fail_send:
            raise OSError("broken pipe")
        self.sent.append(text)

    async def close(self):
        self.closed = True
        self.application_state = WebSocketState.DISCONNECTED


async def started(websocket, **kwargs):
    transport = WebSocketTransport(websocket, **kwargs)
    transport.set_logger(lambda *_: None)
    transport.start()
    for _ in range(3):
        await asyncio.sleep(0)
    return transport


def test_empty_inbox_returns_none():
    async def scenario():
        transport = await started(FakeWebSocket())
        try:
            return transport.try_receive()
        finally:
            await transport.close()

    assert asyncio.run(scenario()) is None


def test_text_and_binary_frames_are_buffered_in_order():
    async def scenario():
        transport = await started(FakeWebSocket([text_frame("a"), bytes_frame(b"\x01"), text_frame("b")]))
        try:
            return [transport.try_receive() for _ in range(4)]
        finally:
            await transport.close()

    assert asyncio.run(scenario()) == ["a", b"\x01", "b", None]


def test_flood_is_bounded_and_keeps_newest():
    frames = [text_frame(str(n)) for n in range(10000)]

    async def scenario():
        transport = await started(FakeWebSocket(frames))
        try:
            size = transport.inbox.qsize()
            first = transport.try_receive()
            return size, first, transport.dropped
        finally:
            await transport.close()

    size, first, dropped = asyncio.run(scenario())
    assert size == INBOX_LIMIT
    assert first == str(10000 - INBOX_LIMIT)
    assert dropped == 10000 - INBOX_LIMIT


def test_custom_inbox_limit():
    async def scenario():
        frames = [text_frame(str(n)) for n in range(10)]
        transport = await started(FakeWebSocket(frames), inbox_limit=3)
        try:
            return [transport.try_receive() for _ in range(4)]
        finally:
            await transport.close()

    assert asyncio.run(scenario()) == ["7", "8", "9", None]


def test_disconnect_drains_then_raises():
    async def scenario():
        transport = await started(FakeWebSocket([text_frame("pause"), DISCONNECT]))
        try:
            first = transport.try_receive()
            with pytest.raises(TransportClosed):
                transport.try_receive()
            with pytest.raises(TransportClosed):
                await transport.send("frame")
            return first
        finally:
            await transport.close()

    assert asyncio.run(scenario()) == "pause"


def test_send_failure_becomes_transport_closed():
    websocket = FakeWebSocket(fail_send=True)

    async def scenario():
        transport = await started(websocket)
        try:
            with pytest.raises(TransportClosed):
                await transport.send("frame")
            assert transport.disconnected is True
            with pytest.raises(TransportClosed):
                transport.try_receive()
        finally:
            await transport.close()

    asyncio.run(scenario())
    assert websocket.sent == []


def test_send_delivers_text():
    websocket = FakeWebSocket()

    async def scenario():
        transport = await started(websocket)
        await transport.send("<div></div>")
        await transport.close()

    asyncio.run(scenario())
    assert websocket.sent == ["<div></div>"]


def test_close_stops_reader_and_is_repeatable():
    websocket = FakeWebSocket()

    async def scenario():
        transport = await started(websocket)
        reader = transport._reader
        await transport.close()
        await transport.close()
        await asyncio.sleep(0)
        return reader.done(), transport.disconnected

    assert asyncio.run(scenario()) == (True, True)
    assert websocket.closed is True
