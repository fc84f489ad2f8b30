#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Life Command Decoder

Extracts control commands from messages sent by the htmx websocket
extension. The client sends its form values and request headers as
JSON-like text:

    {"speed":"-","HEADERS":{"HX-Request":"true","HX-Trigger-Name":"speed:-",...}}

Only the HX-Trigger-Name header matters. Its value is "name" or
"name:arg1,arg2". The message is picked apart with plain string splits
rather than a JSON parser, so the exact split rules below are the
contract with the client.
"""

from dataclasses import dataclass
from typing import List, Optional


TRIGGER_HEADER = "HX-Trigger-Name"


@dataclass
class Command:
    """
    A decoded client command.

    Attributes:
        name: Command name (e.g. "reset", "speed", "pause", "play")
        args: Arguments after the ':' in the trigger name, or None
    """
    name: str
    args: Optional[List[str]] = None


def _unquote(text: str) -> str:
    """Strip one leading and one trailing double quote, if present."""
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def _trigger_name(message: str) -> Optional[str]:
    segments = message.split("{", 2)
    if len(segments) < 3:
        return None

    for entry in segments[2].split(","):
        key, sep, value = entry.partition(":")
        if not sep:
            continue
        key = _unquote(key)
        value = _unquote(value)
        if key == TRIGGER_HEADER and value:
            return value

    return None


def decode(message) -> Optional[Command]:
    """
    Decode one inbound message into a command.

    Args:
        message: Raw message from the transport. Anything that is not a
                 str (binary frames, None) never carries a command.

    Returns:
        Command, or None when the message has no usable trigger name
    """
    if not isinstance(message, str):
        return None

    trigger = _trigger_name(message)
    if trigger is None:
        return None

    name, sep, rest = trigger.partition(":")
    if not sep:
        return Command(name)
    return Command(name, rest.split(","))
