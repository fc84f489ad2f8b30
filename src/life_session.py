#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Session

Per-connection simulation state: the current grid, the speed setting and
the pause flag. Each websocket connection owns exactly one Session.

Speed divides one second: the tick period is 1000 // speed milliseconds.
"""

from typing import Optional

import numpy as np

from life_commands import Command
from life_grid import Grid, spawn, transition


class SessionState:
    """Enumeration of connection states."""
    RUNNING = 'running'
    PAUSED = 'paused'
    CLOSED = 'closed'


class SpeedError(ValueError):
    """Raised when the speed setting leaves no valid tick period."""


class Session:
    """
    Mutable simulation state for one client.

    Attributes:
        grid: Current generation
        speed: Tick period divisor (period = 1000 // speed ms)
        paused: When True, ticks render but do not advance the grid
        generation: Transitions applied since the grid was last seeded
        rng: Random generator used for seeding
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        """
        Create a session with a freshly seeded grid.

        Args:
            rng: Random generator for seeding (default: unseeded)
        """
        self.rng = rng if rng is not None else np.random.default_rng()
        self.grid: Grid = spawn(self.rng)
        self.speed = 1
        self.paused = False
        self.generation = 0

    @property
    def state(self) -> str:
        return SessionState.PAUSED if self.paused else SessionState.RUNNING

    def apply(self, command: Command) -> bool:
        """
        Apply a client command.

        Commands:
            reset        - reseed the grid (speed and pause unchanged)
            speed:-      - increment speed (shorter tick period)
            speed:<any>  - decrement speed while it is >= 1 (longer period)
            speed        - back to speed 1
            pause / play - stop / resume advancing the grid

        Args:
            command: Decoded command

        Returns:
            True if the command was recognized
        """
        name, args = command.name, command.args

        if name == "reset":
            self.grid = spawn(self.rng)
            self.generation = 0
        elif name == "speed":
            if args and args[0] == "-":
                self.speed += 1
            elif args:
                # No floor below the guard: 1 can still drop to 0
                if self.speed >= 1:
                    self.speed -= 1
            else:
                self.speed = 1
        elif name == "pause":
            self.paused = True
        elif name == "play":
            self.paused = False
        else:
            return False

        return True

    def tick_period(self) -> int:
        """
        Milliseconds to wait between ticks.

        Raises:
            SpeedError: If speed has dropped to 0
        """
        if self.speed <= 0:
            raise SpeedError(f"Speed {self.speed} has no tick period")
        return 1000 // self.speed

    def tick(self) -> bool:
        """
        Advance the grid one generation unless paused.

        Returns:
            True if the grid advanced
        """
        if self.paused:
            return False
        self.grid = transition(self.grid)
        self.generation += 1
        return True
