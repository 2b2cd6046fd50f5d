"""Conversation state machine for WhatsApp report intake."""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from citizen_reports.adapters.whatsapp_client import WhatsAppClient
from citizen_reports.domain.messages import InboundMessage
from citizen_reports.domain.reports import ReportDraft
from citizen_reports.domain.sessions import ConversationState, UserSession
from citizen_reports.services import replies
from citizen_reports.services.activity import ActivityService
from citizen_reports.services.classifier import ClassifierService
from citizen_reports.services.rate_limiter import RateLimiter
from citizen_reports.services.reports import ReportService
from citizen_reports.services.sessions import SenderLocks, SessionStore
from citizen_reports.services.timing import TimingSimulator

_logger = logging.getLogger(__name__)

PAUSE_SECONDS = 2.0

Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class ConversationEngine:
    """Drive each sender through description, location and photo steps.

    Messages from the same sender are processed one at a time; the session is
    read only after the simulated read delay, inside the sender's lock.
    """

    session_store: SessionStore
    rate_limiter: RateLimiter
    timing: TimingSimulator
    classifier: ClassifierService
    report_service: ReportService
    whatsapp_client: WhatsAppClient
    activity: ActivityService = field(default_factory=ActivityService)
    locks: SenderLocks = field(default_factory=SenderLocks)
    sleep: Sleeper = asyncio.sleep
    rng: random.Random = field(default_factory=random.Random)

    async def handle(self, message: InboundMessage) -> None:
        """Apply limits, then process one inbound message end to end."""
        if message.is_empty:
            _logger.info("Ignoring empty message", extra={"sender": message.sender})
            return
        if not self.rate_limiter.check_daily_limit():
            _logger.warning("Daily message limit reached, dropping message")
            return
        if not self.rate_limiter.check_rate_limit(message.sender):
            self.activity.record("message_throttled", message.sender)
            await self._send_notice(message, replies.RATE_LIMITED)
            return

        async with self.locks.hold(message.sender):
            try:
                await self._process(message)
            except Exception as exc:
                _logger.exception(
                    "Failed to process message", extra={"sender": message.sender}
                )
                self.activity.record(
                    "message_failed", message.sender, {"error": str(exc)}
                )
                self.session_store.delete(message.sender)
                await self._send_notice(message, replies.PROCESSING_FAILED)

    async def _process(self, message: InboundMessage) -> None:
        await self.sleep(self.timing.read_delay(message.text))
        session = self.session_store.get(message.sender)

        if session.state is ConversationState.INITIAL:
            await self._handle_initial(message)
        elif session.state is ConversationState.WAITING_LOCATION:
            await self._handle_waiting_location(message)
        elif session.state is ConversationState.WAITING_PHOTO:
            await self._handle_waiting_photo(message, session)
        else:
            await self._handle_unknown(message)

        final_state = self.session_store.get(message.sender).state
        elapsed = (datetime.now(tz=UTC) - message.received_at).total_seconds()
        self.activity.record(
            "message_processed",
            message.sender,
            {"state": final_state.value, "response_seconds": round(elapsed, 1)},
        )
        self.rate_limiter.increment_daily_count()
        _logger.info(
            "Message processed: state=%s daily=%s/%s",
            final_state.value,
            self.rate_limiter.daily_count,
            self.rate_limiter.max_messages_per_day,
        )

    async def _handle_initial(self, message: InboundMessage) -> None:
        if not message.text or replies.is_greeting(message.text):
            await self._reply(message, replies.welcome_message(self.rng))
            return

        result = await self.classifier.classify(message.text)
        if not result.accepted:
            _logger.info("Description rejected: %s", result.reason or "no reason")
            await self._reply(message, replies.rejection_message(result.reason))
            return

        self.session_store.update(
            message.sender,
            state=ConversationState.WAITING_LOCATION,
            description=message.text,
        )
        await self._reply(message, replies.location_request_message())

    async def _handle_waiting_location(self, message: InboundMessage) -> None:
        if message.location is None:
            await self._reply(message, replies.MISSING_LOCATION)
            return

        self.session_store.update(
            message.sender,
            state=ConversationState.WAITING_PHOTO,
            latitude=message.location.latitude,
            longitude=message.location.longitude,
        )
        await self._reply(message, replies.photo_request_message())

    async def _handle_waiting_photo(
        self, message: InboundMessage, session: UserSession
    ) -> None:
        if message.download_media is None:
            await self._reply(message, replies.MISSING_PHOTO)
            return

        try:
            photo = await message.download_media()
            if not photo.is_image:
                await self._reply(message, replies.INVALID_IMAGE)
                return
            draft = ReportDraft(
                description=session.description or "",
                latitude=float(session.latitude),
                longitude=float(session.longitude),
                photo=photo,
            )
            result = await self.report_service.submit(draft)
        except Exception:
            _logger.exception(
                "Failed to process report photo", extra={"sender": message.sender}
            )
            await self._reply(message, replies.error_message())
            self.session_store.delete(message.sender)
            return

        if result.success and result.report_id is not None:
            self.activity.record(
                "report_submitted", message.sender, {"report_id": result.report_id}
            )
            await self._reply(message, replies.success_message(result.report_id))
        else:
            self.activity.record(
                "report_failed", message.sender, {"error": result.error}
            )
            await self._reply(message, replies.error_message())
        self.session_store.delete(message.sender)

    async def _handle_unknown(self, message: InboundMessage) -> None:
        _logger.warning("Unknown conversation state, restarting session")
        self.session_store.delete(message.sender)
        greeting = replies.random_greeting(self.rng)
        await self._reply(message, f"{greeting} {replies.welcome_message(self.rng)}")

    async def _reply(self, message: InboundMessage, text: str) -> None:
        """Show typing, wait as long as a person would type, then send."""
        await self.whatsapp_client.send_typing_indicator(message.message_id)
        await self.sleep(self.timing.typing_delay(text))
        await self.whatsapp_client.send_text(
            message.sender, text, reply_to=message.message_id
        )

    async def _send_notice(self, message: InboundMessage, text: str) -> None:
        """Send a reply after the fixed pause; transport errors are only logged."""
        await self.sleep(PAUSE_SECONDS)
        try:
            await self.whatsapp_client.send_text(
                message.sender, text, reply_to=message.message_id
            )
        except Exception:
            _logger.exception("Failed to send notice", extra={"sender": message.sender})
