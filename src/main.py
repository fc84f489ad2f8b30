#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Viewer - Main Application

CLI entry point:
- --serve runs the websocket server (one simulation per client)
- otherwise runs a single simulation headless for a number of ticks and
  writes the final HTML fragment to a file

Usage:
    python main.py --ticks 100 --seed 7 --output ../output/grid.html
    python main.py --serve --config ../config/config.yaml --port 7936
"""

import argparse
import os
import sys
from typing import List, Optional

import numpy as np

from life_commands import Command
from life_grid import render
from life_session import Session


def run_simulation(ticks: int,
                   output_file: Optional[str] = None,
                   seed: Optional[int] = None,
                   commands: Optional[List[Command]] = None,
                   log=print) -> Session:
    """
    Run one simulation without a client.

    Args:
        ticks: Number of ticks to run
        output_file: Where to write the final render (None = don't write)
        seed: Random seed for the initial grid
        commands: Commands applied before the first tick
        log: Logging function

    Returns:
        The session after the last tick
    """
    rng = np.random.default_rng(seed) if seed is not None else None
    session = Session(rng)

    for command in commands or []:
        if not session.apply(command):
            log(f"Unrecognized command: {command.name}")

    log(f"Seeded grid: {session.grid.alive_count()} alive cells")

    for tick in range(ticks):
        session.tick()
        if (tick + 1) % 10 == 0 or tick + 1 == ticks:
            log(f"  Tick {tick + 1}: alive={session.grid.alive_count()}")

    if output_file:
        directory = os.path.dirname(output_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(render(session.grid))
        log(f"Render saved to {output_file}")

    return session


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Life Viewer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --ticks 50
  python main.py --ticks 200 --seed 42 --output ../output/grid.html
  python main.py --serve
  python main.py --serve --config ../config/config.yaml --port 8080
        """
    )

    parser.add_argument('--config', '-c', type=str, default=None,
                       help='Configuration file path (server mode)')

    parser.add_argument('--serve', '-s', action='store_true',
                       help='Run the websocket server')

    parser.add_argument('--host', type=str, default=None,
                       help='Listening address for server mode (default: 127.0.0.1)')

    parser.add_argument('--port', '-p', type=int, default=None,
                       help='Listening port for server mode (default: 7936)')

    parser.add_argument('--seed', type=int, default=None,
                       help='Random seed')

    parser.add_argument('--ticks', '-t', type=int, default=100,
                       help='Ticks to run in headless mode (default: 100)')

    parser.add_argument('--output', '-o', type=str, default=None,
                       help='File for the final HTML render in headless mode')

    args = parser.parse_args(argv)

    if args.serve:
        try:
            from life_server import run_server
            run_server(args.config, args.host, args.port, args.seed)
        except KeyboardInterrupt:
            print("\nServer stopped")
        except Exception as e:
            print(f"Server error: {e}")
            sys.exit(1)
        return

    if args.ticks < 0:
        print("Error: --ticks must not be negative")
        sys.exit(1)

    try:
        run_simulation(args.ticks, args.output, args.seed)
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
