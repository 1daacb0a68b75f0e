"""Entry point for the Twilio to ElevenLabs call bridge service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.routes import router as api_router
from api.twilio_routes import router as twilio_router
from config.settings import load_settings_or_exit
from relay.errors import BridgeError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

settings = load_settings_or_exit()
logging.getLogger().setLevel(settings.log_level.upper())

LOGGER = logging.getLogger(__name__)

app = FastAPI(
    title="Call Bridge",
    description="Relays Twilio Media Streams to an ElevenLabs conversational AI agent.",
)
app.include_router(api_router)
app.include_router(twilio_router)


@app.exception_handler(BridgeError)
async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


def run() -> None:
    import uvicorn

    LOGGER.info("[Server] Listening on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
