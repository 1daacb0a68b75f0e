"""Twilio Media Streams wire format (carrier side of the relay)."""

from __future__ import annotations

import json
from typing import Any

from relay.errors import FrameParseError


def parse_twilio_ws_message(text: str | bytes) -> dict[str, Any]:
    try:
        message = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise FrameParseError(f"Invalid JSON frame: {exc}") from exc
    if not isinstance(message, dict):
        raise FrameParseError("Frame is not a JSON object")
    return message


def stream_sid_from_start(message: dict[str, Any]) -> str:
    start = message.get("start")
    stream_sid = start.get("streamSid") if isinstance(start, dict) else None
    if not isinstance(stream_sid, str) or not stream_sid:
        raise FrameParseError("start event without streamSid")
    return stream_sid


def media_payload(message: dict[str, Any]) -> str | None:
    media = message.get("media")
    if not isinstance(media, dict):
        return None
    payload = media.get("payload")
    return payload if isinstance(payload, str) and payload else None


def media_message(stream_sid: str | None, payload: str) -> str:
    """Outbound audio for the caller; payload is base64 mu-law as produced by the agent."""

    return json.dumps({"event": "media", "streamSid": stream_sid, "media": {"payload": payload}})


def clear_message(stream_sid: str | None) -> str:
    """Ask Twilio to drop any audio queued for playback."""

    return json.dumps({"event": "clear", "streamSid": stream_sid})
