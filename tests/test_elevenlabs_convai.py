from __future__ import annotations

import json

from config.settings import Settings
from integrations.elevenlabs_convai import (
    audio_payload,
    conversation_url,
    ping_event_id,
    pong_message,
    user_audio_chunk,
)


def _settings(**overrides) -> Settings:
    values = {
        "elevenlabs_agent_id": "agent 42",
        "twilio_account_sid": "AC123",
        "twilio_auth_token": "token",
        "twilio_phone_number": "+15005550006",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_conversation_url_carries_agent_id():
    assert conversation_url(_settings()) == (
        "wss://api.elevenlabs.io/v1/convai/conversation?agent_id=agent+42"
    )


def test_conversation_url_respects_override():
    url = conversation_url(_settings(elevenlabs_convai_url="wss://convai.test/ws"))
    assert url == "wss://convai.test/ws?agent_id=agent+42"


def test_agent_event_accessors():
    assert audio_payload({"type": "audio", "audio_event": {"audio_base_64": "AQID", "event_id": 1}}) == "AQID"
    assert audio_payload({"type": "audio", "audio_event": {"audio_base_64": ""}}) is None
    assert audio_payload({"type": "audio"}) is None
    assert ping_event_id({"type": "ping", "ping_event": {"event_id": 9}}) == 9
    assert ping_event_id({"type": "ping"}) is None


def test_outbound_agent_frames():
    assert json.loads(user_audio_chunk("AAAA")) == {"user_audio_chunk": "AAAA"}
    assert json.loads(pong_message(9)) == {"type": "pong", "event_id": 9}
