from __future__ import annotations

from config.settings import get_settings


def build_twilio_client():
    from twilio.rest import Client

    settings = get_settings()
    return Client(settings.twilio_account_sid, settings.twilio_auth_token)
