#!/usr/bin/env python3
"""
Life Viewer Server

FastAPI application that gives every websocket client its own Game of
Life simulation. The grid is pushed as an htmx out-of-band fragment on
every tick; clients steer their own simulation with reset/speed/pause/play
commands.

Usage:
    python life_server.py --config ../config/config.yaml --port 7936
"""

import argparse
import itertools
import os
import sys
from typing import Any, Dict, List, Optional

import numpy as np
import uvicorn
import yaml
from fastapi import FastAPI, WebSocket
from pydantic import BaseModel

from life_connection import ConnectionLoop
from life_session import Session
from life_transport import WebSocketTransport

# --- Configuration & Defaults ---
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7936


def load_config(path: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Configuration dictionary (empty if the file is empty)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


# --- Pydantic Models for API ---
class SessionStatus(BaseModel):
    id: int
    state: str
    speed: int
    generation: int
    alive: int


class ServerStatus(BaseModel):
    connections: int
    sessions: List[SessionStatus]


# --- Server Setup ---
app = FastAPI(title="Life Viewer")

config: Dict[str, Any] = {}

# Live connection loops, by connection id
connections: Dict[int, ConnectionLoop] = {}

_session_numbers = itertools.count(1)


def configure(new_config: Optional[Dict[str, Any]]) -> None:
    """Replace the active configuration."""
    config.clear()
    config.update(new_config or {})


def make_session() -> Session:
    """Create a session; session n is seeded with SEED + n when SEED is set."""
    number = next(_session_numbers)
    seed = config.get('SEED')
    if seed is None:
        return Session()
    return Session(np.random.default_rng(int(seed) + number))


# --- Routes ---

@app.websocket("/")
async def life_socket(websocket: WebSocket):
    await websocket.accept()

    transport = WebSocketTransport(websocket)
    loop = ConnectionLoop(transport, make_session())
    connections[loop.id] = loop

    transport.start()
    try:
        await loop.run()
    finally:
        connections.pop(loop.id, None)


@app.get("/api/status", response_model=ServerStatus)
def get_status():
    sessions = [
        SessionStatus(
            id=loop.id,
            state=loop.state,
            speed=loop.session.speed,
            generation=loop.session.generation,
            alive=loop.session.grid.alive_count(),
        )
        for loop in connections.values()
    ]
    return ServerStatus(connections=len(sessions), sessions=sessions)


def run_server(config_path: Optional[str] = None,
               host: Optional[str] = None,
               port: Optional[int] = None,
               seed: Optional[int] = None) -> None:
    """
    Start the websocket server.

    Command-line values override the configuration file.

    Args:
        config_path: Path to config YAML (optional)
        host: Listening address
        port: Listening port
        seed: Base random seed for sessions
    """
    configure(load_config(config_path) if config_path else {})
    if seed is not None:
        config['SEED'] = seed

    host = host if host is not None else config.get('HOST', DEFAULT_HOST)
    port = port if port is not None else config.get('PORT', DEFAULT_PORT)

    print(f"\n{'='*60}")
    print(f"  Life Viewer Server")
    print(f"  Websocket:  ws://{host}:{port}/")
    print(f"  Status:     http://{host}:{port}/api/status")
    if config.get('SEED') is not None:
        print(f"  Seed:       {config['SEED']}")
    print(f"{'='*60}\n")

    # uvicorn exits the process if it cannot bind
    uvicorn.run(app, host=host, port=int(port))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Life Viewer Server")
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to configuration YAML")
    parser.add_argument("--host", type=str, default=None)
    parser.add_argument("--port", "-p", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)

    args = parser.parse_args()

    try:
        run_server(args.config, args.host, args.port, args.seed)
    except Exception as e:
        print(f"Fatal Error: {e}")
        sys.exit(1)
