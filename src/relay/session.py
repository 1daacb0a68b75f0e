"""Per-call relay between a Twilio media stream and a conversational AI agent.

Each accepted carrier socket gets one ``MediaStreamRelay``. The carrier reader
runs in the calling task and owns the session; the agent reader runs as a
child task. Closing the carrier side tears down the agent socket, while the
agent going away leaves the carrier connected until Twilio hangs up.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import WebSocket, WebSocketDisconnect
from websockets.exceptions import WebSocketException
from websockets.protocol import State

from integrations import elevenlabs_convai as convai
from integrations import twilio_streaming as twilio
from relay.errors import FrameParseError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CallSession:
    stream_sid: str | None = None
    ai_ws: Any = None

    @property
    def ai_open(self) -> bool:
        return self.ai_ws is not None and self.ai_ws.state is State.OPEN

    async def close_ai(self) -> None:
        if self.ai_open:
            await self.ai_ws.close()


class MediaStreamRelay:
    def __init__(
        self,
        carrier_ws: WebSocket,
        agent_url: str,
        *,
        connect: Callable[[str], Any] = convai.connect_convai,
    ) -> None:
        self._carrier = carrier_ws
        self._agent_url = agent_url
        self._connect = connect
        self.session = CallSession()

    async def run(self) -> None:
        """Relay frames until the carrier disconnects."""

        ai_task = asyncio.create_task(self._run_agent_side())
        try:
            await self._pump_carrier()
        finally:
            await self.session.close_ai()
            ai_task.cancel()
            await asyncio.gather(ai_task, return_exceptions=True)

    async def _pump_carrier(self) -> None:
        try:
            while True:
                frame = await self._carrier.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000), frame.get("reason"))
                try:
                    message = twilio.parse_twilio_ws_message(frame.get("text") or frame.get("bytes"))
                    await self.handle_carrier_event(message)
                except FrameParseError as exc:
                    LOGGER.error("[Twilio] Error processing message: %s", exc.detail)
                except WebSocketException as exc:
                    LOGGER.warning("[ConvAI] Dropped caller audio: %s", exc)
        except WebSocketDisconnect:
            LOGGER.info("[Twilio] Client disconnected")
        except Exception:
            LOGGER.exception("[Twilio] WebSocket error")

    async def _run_agent_side(self) -> None:
        try:
            async with self._connect(self._agent_url) as ws:
                self.session.ai_ws = ws
                LOGGER.info("[ConvAI] Connected to Conversational AI.")
                async for data in ws:
                    try:
                        message = convai.parse_convai_message(data)
                        await self.handle_agent_event(message)
                    except FrameParseError as exc:
                        LOGGER.error("[ConvAI] Error parsing message: %s", exc.detail)
        except (WebSocketException, OSError, asyncio.TimeoutError) as exc:
            LOGGER.error("[ConvAI] WebSocket error: %s", exc)
        finally:
            LOGGER.info("[ConvAI] Disconnected.")

    async def handle_carrier_event(self, message: dict[str, Any]) -> None:
        event = message.get("event")
        if event == "start":
            self.session.stream_sid = twilio.stream_sid_from_start(message)
            LOGGER.info("[Twilio] Stream started with ID: %s", self.session.stream_sid)
        elif event == "media":
            payload = twilio.media_payload(message)
            if payload and self.session.ai_open:
                await self.session.ai_ws.send(convai.user_audio_chunk(payload))
        elif event == "stop":
            await self.session.close_ai()
        else:
            LOGGER.info("[Twilio] Unhandled event: %s", event)

    async def handle_agent_event(self, message: dict[str, Any]) -> None:
        kind = message.get("type")
        if kind == "conversation_initiation_metadata":
            LOGGER.info("[ConvAI] Conversation initiated.")
        elif kind == "audio":
            payload = convai.audio_payload(message)
            if payload:
                await self._send_carrier(twilio.media_message(self.session.stream_sid, payload))
        elif kind == "interruption":
            await self._send_carrier(twilio.clear_message(self.session.stream_sid))
        elif kind == "ping":
            event_id = convai.ping_event_id(message)
            if event_id:
                await self.session.ai_ws.send(convai.pong_message(event_id))

    async def _send_carrier(self, text: str) -> None:
        try:
            await self._carrier.send_text(text)
        except (WebSocketDisconnect, RuntimeError) as exc:
            # Carrier already gone; its reader ends the session.
            LOGGER.warning("[Twilio] Dropped outbound frame: %s", exc)
