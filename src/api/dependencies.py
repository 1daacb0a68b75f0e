"""Shared FastAPI dependencies.

Separated so tests can override the Twilio client and the agent socket factory.
"""

from __future__ import annotations

from integrations.elevenlabs_convai import connect_convai
from integrations.twilio_client import build_twilio_client


def get_twilio_client():
    return build_twilio_client()


def get_relay_connect():
    return connect_convai
