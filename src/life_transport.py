#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Transport - Duplex Text Channel

Defines the interface the connection loop uses to talk to one client,
and the websocket implementation backed by a FastAPI/Starlette WebSocket.

The loop must never block waiting for input, so receiving is split in
two: a background reader task drains the socket into a queue, and
try_receive() only ever looks at that queue.
"""

import abc
import asyncio
from typing import Optional, Union

from fastapi.websockets import WebSocket, WebSocketState


Message = Union[str, bytes]

# Inbound messages buffered per client; the oldest is dropped when full
INBOX_LIMIT = 32


class TransportClosed(Exception):
    """Raised when the peer has gone away or a send fails."""


class Transport(abc.ABC):
    """
    Abstract base class for a per-client message channel.

    Attributes:
        log: Logging function (default: print)
    """

    def __init__(self):
        self.log = print

    def set_logger(self, log_func) -> None:
        """
        Replace the default logging function.

        Args:
            log_func: New logging function to use
        """
        self.log = log_func

    @abc.abstractmethod
    async def send(self, text: str) -> None:
        """
        Send one text frame.

        Raises:
            TransportClosed: If the frame could not be delivered
        """
        pass

    @abc.abstractmethod
    def try_receive(self) -> Optional[Message]:
        """
        Return the next buffered inbound message without waiting.

        Returns:
            str for text frames, bytes for binary frames, None if nothing
            is buffered.

        Raises:
            TransportClosed: If nothing is buffered and the peer is gone
        """
        pass

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the channel. Safe to call more than once."""
        pass


class WebSocketTransport(Transport):
    """
    Transport over an accepted FastAPI WebSocket.

    Call start() once the socket is accepted to begin buffering inbound
    frames. At most inbox_limit messages are kept; when a client sends
    faster than the loop consumes, the oldest buffered message is dropped.
    """

    def __init__(self, websocket: WebSocket, inbox_limit: int = INBOX_LIMIT):
        """
        Args:
            websocket: Accepted websocket
            inbox_limit: Maximum number of buffered inbound messages
        """
        super().__init__()
        self.websocket = websocket
        self.inbox: asyncio.Queue = asyncio.Queue(maxsize=inbox_limit)
        self.dropped = 0
        self.disconnected = False
        self._reader: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start the background reader task."""
        if self._reader is None:
            self._reader = asyncio.create_task(self._read())

    async def _read(self) -> None:
        """Move inbound frames into the inbox until the peer disconnects."""
        try:
            while True:
                message = await self.websocket.receive()
                if message["type"] == "websocket.disconnect":
                    self.log(f"Client disconnected (code {message.get('code')})")
                    return
                if message.get("text") is not None:
                    self._enqueue(message["text"])
                elif message.get("bytes") is not None:
                    self._enqueue(message["bytes"])
        except (RuntimeError, OSError) as e:
            # Surfaces to the loop as TransportClosed on the next try_receive
            self.log(f"Websocket reader stopped: {e!r}")
        finally:
            self.disconnected = True

    def _enqueue(self, message: Message) -> None:
        if self.inbox.full():
            self.inbox.get_nowait()
            self.dropped += 1
            if self.dropped == 1:
                self.log(f"Inbox full ({self.inbox.maxsize}), dropping oldest messages")
        self.inbox.put_nowait(message)

    async def send(self, text: str) -> None:
        if self.disconnected:
            raise TransportClosed("Client already disconnected")
        try:
            await self.websocket.send_text(text)
        except Exception as e:
            self.disconnected = True
            raise TransportClosed(f"Send failed: {e!r}") from e

    def try_receive(self) -> Optional[Message]:
        try:
            return self.inbox.get_nowait()
        except asyncio.QueueEmpty:
            pass
        if self.disconnected:
            raise TransportClosed("Client disconnected")
        return None

    async def close(self) -> None:
        if self._reader is not None and not self._reader.done():
            self._reader.cancel()

        ws = self.websocket
        if (ws.application_state == WebSocketState.CONNECTED and
                ws.client_state == WebSocketState.CONNECTED):
            try:
                await ws.close()
            except (RuntimeError, OSError) as e:
                self.log(f"Error closing websocket: {e}")
        self.disconnected = True
