"""API-facing Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class HealthResponse(BaseModel):
    message: str = "Server is running"


class OutboundCallRequest(BaseModel):
    to: str | None = Field(default=None, description="E.164 phone number, e.g. +1555...")

    @field_validator("to", mode="before")
    @classmethod
    def strip_number(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value


class OutboundCallResponse(BaseModel):
    message: str = "Call initiated"
    callSid: str
