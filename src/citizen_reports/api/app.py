"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from functools import partial

from fastapi import BackgroundTasks, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from citizen_reports.adapters.whatsapp_media_client import WhatsAppMediaClient
from citizen_reports.api.admin import router as admin_router
from citizen_reports.api.signature import verify_signature
from citizen_reports.api.whatsapp_models import WhatsAppMessage, WhatsAppWebhookPayload
from citizen_reports.app_logging import configure_logging
from citizen_reports.containers import AppContainer
from citizen_reports.domain.messages import GeoLocation, InboundMessage

STATS_INTERVAL_SECONDS = 3600


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = app.state.container.settings
        logger.info(
            "Anti-ban limits: %s messages/day, %s messages/hour, %s per sender/hour",
            settings.max_messages_per_day,
            settings.max_messages_per_hour,
            settings.max_messages_per_number,
        )
        stats_task = asyncio.create_task(_log_stats_periodically(app.state.container))
        yield
        stats_task.cancel()
        try:
            await stats_task
        except asyncio.CancelledError:
            pass
        logger.info(
            "Shutting down, messages processed today: %s",
            app.state.container.rate_limiter.daily_count,
        )
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/whatsapp/webhook", response_class=PlainTextResponse)
    async def verify_webhook(
        request: Request,
        mode: str | None = Query(default=None, alias="hub.mode"),
        token: str | None = Query(default=None, alias="hub.verify_token"),
        challenge: str | None = Query(default=None, alias="hub.challenge"),
    ) -> str:
        """Answer Meta's webhook verification handshake."""
        state_container: AppContainer = request.app.state.container
        if (
            mode == "subscribe"
            and token == state_container.settings.whatsapp_verify_token
            and challenge is not None
        ):
            return challenge
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)

    @app.post("/whatsapp/webhook")
    async def whatsapp_webhook(
        request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Queue inbound WhatsApp messages for processing."""
        state_container: AppContainer = request.app.state.container
        raw_body = await request.body()
        if not verify_signature(
            raw_body,
            request.headers.get("x-hub-signature-256"),
            state_container.settings.whatsapp_app_secret,
        ):
            logger.warning("Rejected webhook with invalid signature")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
        try:
            payload = WhatsAppWebhookPayload.model_validate_json(raw_body)
        except ValidationError:
            logger.warning("Ignoring malformed webhook payload")
            return {"status": "ignored"}

        for message in payload.iter_messages():
            logger.info(
                "New message: type=%s", message.type, extra={"sender": message.from_number}
            )
            background_tasks.add_task(
                state_container.conversation_engine.handle,
                _to_inbound_message(message, state_container.media_client),
            )
        return {"status": "ok"}

    return app


def _to_inbound_message(
    message: WhatsAppMessage, media_client: WhatsAppMediaClient
) -> InboundMessage:
    """Normalize a webhook message into the engine's message model."""
    media = message.media
    if message.text is not None:
        text = message.text.body
    elif media is not None and media.caption:
        text = media.caption
    else:
        text = ""
    location = None
    if message.location is not None:
        location = GeoLocation(
            latitude=message.location.latitude,
            longitude=message.location.longitude,
        )
    return InboundMessage(
        message_id=message.id,
        sender=message.from_number,
        text=text.strip(),
        received_at=_parse_timestamp(message.timestamp),
        location=location,
        download_media=(
            partial(media_client.download_media, media.id) if media else None
        ),
    )


def _parse_timestamp(raw: str) -> datetime:
    try:
        return datetime.fromtimestamp(int(raw), tz=UTC)
    except (ValueError, OverflowError, OSError):
        return datetime.now(tz=UTC)


async def _log_stats_periodically(container: AppContainer) -> None:
    """Log limiter statistics once per interval until cancelled."""
    logger = logging.getLogger(__name__)
    while True:
        await asyncio.sleep(STATS_INTERVAL_SECONDS)
        logger.info(
            "Stats: messages today=%s/%s active senders=%s sessions=%s",
            container.rate_limiter.daily_count,
            container.settings.max_messages_per_day,
            container.rate_limiter.active_senders,
            len(container.session_store.list_sessions()),
        )
