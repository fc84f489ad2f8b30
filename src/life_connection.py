#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Connection Loop

Drives one client's simulation from accept to close:

    send initial frame
    repeat:
        send frame
        check for one buffered command (never waits)
        sleep for the tick period
        advance the grid unless paused

Every connection runs its own loop with its own Session; loops never
touch each other's state.
"""

import asyncio
import itertools
from typing import Awaitable, Callable, Optional

from life_commands import decode
from life_grid import render
from life_session import Session, SessionState, SpeedError
from life_transport import Transport, TransportClosed


_connection_ids = itertools.count(1)


class ConnectionLoop:
    """
    Per-connection tick loop.

    Attributes:
        id: Connection number, unique within the process
        transport: Channel to the client
        session: Simulation state owned by this connection
        closed: True once the loop has finished
        frames_sent: Number of frames delivered so far
        log: Logging function (default: print)
    """

    def __init__(self,
                 transport: Transport,
                 session: Optional[Session] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        """
        Args:
            transport: Channel to the client
            session: Session to drive (default: new randomly seeded one)
            sleep: Coroutine function taking seconds, used between ticks
        """
        self.id = next(_connection_ids)
        self.transport = transport
        self.session = session if session is not None else Session()
        self.sleep = sleep
        self.closed = False
        self.frames_sent = 0
        self.log = print

    def set_logger(self, log_func) -> None:
        """Replace the default logging function."""
        self.log = log_func

    @property
    def state(self) -> str:
        if self.closed:
            return SessionState.CLOSED
        return self.session.state

    async def send_frame(self) -> None:
        """Render the current grid and send it to the client."""
        await self.transport.send(render(self.session.grid))
        self.frames_sent += 1

    def poll_command(self) -> None:
        """Apply at most one buffered client command."""
        message = self.transport.try_receive()
        if message is None:
            return

        command = decode(message)
        if command is None:
            self.log(f"[conn {self.id}] No command in message: {message!r:.120}")
            return

        if not self.session.apply(command):
            self.log(f"[conn {self.id}] Unrecognized command: {command.name}")

    async def run(self) -> None:
        """Run until the client goes away or the session cannot continue."""
        self.log(f"[conn {self.id}] Session started")
        try:
            await self.send_frame()
            while True:
                await self.send_frame()
                self.poll_command()
                await self.sleep(self.session.tick_period() / 1000)
                self.session.tick()
        except TransportClosed as e:
            self.log(f"[conn {self.id}] Connection closed: {e}")
        except SpeedError as e:
            self.log(f"[conn {self.id}] Aborting session: {e}")
        finally:
            self.closed = True
            await self.transport.close()
            self.log(f"[conn {self.id}] Session ended after {self.frames_sent} frames")
