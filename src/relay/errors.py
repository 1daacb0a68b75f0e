"""Domain-specific exceptions for call bridging.

These exceptions are safe to import from API layers without pulling in socket clients.
"""

from __future__ import annotations


class BridgeError(Exception):
    status_code: int = 500
    default_detail: str = "Bridge error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class InvalidRequestError(BridgeError):
    status_code = 400
    default_detail = "Destination phone number is required"


class ProviderError(BridgeError):
    status_code = 500
    default_detail = "Failed to initiate call"


class FrameParseError(BridgeError):
    default_detail = "Malformed socket frame"
