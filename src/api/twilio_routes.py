"""Twilio Voice integration.

This module provides:
- Voice webhook (TwiML) connecting the call to the media stream socket.
- Media stream WebSocket relaying call audio to the conversational AI agent.
- Outbound call endpoint.
"""

from __future__ import annotations

import logging
from typing import Any
from xml.sax.saxutils import quoteattr

from fastapi import APIRouter, Depends, Request, Response, WebSocket
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from api.dependencies import get_relay_connect, get_twilio_client
from api.schemas import OutboundCallRequest, OutboundCallResponse
from config.settings import Settings, get_settings
from integrations.elevenlabs_convai import conversation_url
from relay.errors import InvalidRequestError, ProviderError
from relay.session import MediaStreamRelay

LOGGER = logging.getLogger(__name__)

router = APIRouter(tags=["twilio"])


def _twiml_response(xml: str) -> Response:
    return Response(content=xml, media_type="text/xml")


def _stream_host(base_url: str) -> str:
    return base_url.removeprefix("https://").removeprefix("http://").rstrip("/")


def _twiml_connect_stream(*, stream_url: str) -> str:
    return (
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>"
        "<Response>"
        "<Connect>"
        f"<Stream url={quoteattr(stream_url)} />"
        "</Connect>"
        "</Response>"
    )


@router.api_route(
    "/incoming-call-eleven",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
)
async def incoming_call_eleven() -> Response:
    settings = get_settings()
    stream_url = f"wss://{_stream_host(settings.base_url)}/media-stream"
    return _twiml_response(_twiml_connect_stream(stream_url=stream_url))


@router.websocket("/media-stream")
async def media_stream(websocket: WebSocket, connect=Depends(get_relay_connect)) -> None:
    await websocket.accept()
    LOGGER.info("[Server] Twilio connected to media stream.")
    relay = MediaStreamRelay(websocket, conversation_url(get_settings()), connect=connect)
    await relay.run()


async def _read_body(request: Request) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return dict(form)
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = await request.json()
    except ValueError as exc:
        raise InvalidRequestError() from exc
    return body if isinstance(body, dict) else {}


@router.post("/make-outbound-call", response_model=OutboundCallResponse)
async def make_outbound_call(
    request: Request,
    twilio_client=Depends(get_twilio_client),
    settings: Settings = Depends(get_settings),
) -> OutboundCallResponse:
    try:
        payload = OutboundCallRequest.model_validate(await _read_body(request))
    except ValidationError as exc:
        raise InvalidRequestError() from exc
    if not payload.to:
        raise InvalidRequestError()

    try:
        call = await run_in_threadpool(
            twilio_client.calls.create,
            url=f"{settings.base_url}/incoming-call-eleven",
            to=payload.to,
            from_=settings.twilio_phone_number,
        )
    except Exception as exc:
        LOGGER.exception("[Twilio] Error initiating call: %s", exc)
        raise ProviderError() from exc

    LOGGER.info("[Twilio] Outbound call initiated: %s", call.sid)
    return OutboundCallResponse(callSid=str(call.sid))
