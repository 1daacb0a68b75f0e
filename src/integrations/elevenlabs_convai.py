"""ElevenLabs Conversational AI WebSocket protocol (AI side of the relay)."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlencode

import websockets

from config.settings import Settings
from relay.errors import FrameParseError


def conversation_url(settings: Settings) -> str:
    query = urlencode({"agent_id": settings.elevenlabs_agent_id})
    return f"{settings.elevenlabs_convai_url}?{query}"


def connect_convai(url: str):
    """Open the agent socket; usable as an async context manager."""

    return websockets.connect(url, ping_interval=20, ping_timeout=20)


def parse_convai_message(data: str | bytes) -> dict[str, Any]:
    try:
        message = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise FrameParseError(f"Invalid JSON frame: {exc}") from exc
    if not isinstance(message, dict):
        raise FrameParseError("Frame is not a JSON object")
    return message


def audio_payload(message: dict[str, Any]) -> str | None:
    event = message.get("audio_event") or {}
    payload = event.get("audio_base_64") if isinstance(event, dict) else None
    return payload if isinstance(payload, str) and payload else None


def ping_event_id(message: dict[str, Any]) -> Any:
    event = message.get("ping_event") or {}
    return event.get("event_id") if isinstance(event, dict) else None


def user_audio_chunk(payload: str) -> str:
    return json.dumps({"user_audio_chunk": payload})


def pong_message(event_id: Any) -> str:
    return json.dumps({"type": "pong", "event_id": event_id})
