"""Shared test fixtures."""

import json
import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from citizen_reports.adapters.report_backend_client import ReportBackendClient
from citizen_reports.adapters.whatsapp_client import WhatsAppClient
from citizen_reports.config import Settings
from citizen_reports.containers import AppContainer
from citizen_reports.domain.messages import GeoLocation, InboundMessage, MediaPayload
from citizen_reports.services.activity import ActivityRepository, ActivityService
from citizen_reports.services.classifier import ClassifierClient, ClassifierService
from citizen_reports.services.conversation import ConversationEngine
from citizen_reports.services.rate_limiter import RateLimiter
from citizen_reports.services.reports import ReportService
from citizen_reports.services.sessions import InMemorySessionStore
from citizen_reports.services.timing import TimingSimulator

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


@dataclass
class FakeWhatsAppClient(WhatsAppClient):
    """Fake WhatsApp client that records every call in order."""

    events: list[tuple[str, ...]] = field(default_factory=list)
    fail_for: set[str] = field(default_factory=set)

    async def send_text(self, to: str, text: str, reply_to: str | None = None) -> None:
        if to in self.fail_for:
            raise httpx.ConnectError("transport down")
        self.events.append(("text", to, text))

    async def send_typing_indicator(self, message_id: str) -> None:
        self.events.append(("typing", message_id))

    @property
    def messages(self) -> list[tuple[str, str]]:
        return [(event[1], event[2]) for event in self.events if event[0] == "text"]


@dataclass
class FakeClassifierClient(ClassifierClient):
    """Fake classifier returning a fixed raw output or raising."""

    output: str = field(default_factory=lambda: json.dumps({"accepted": True}))
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def classify(
        self,
        *,
        model: str,
        instructions: str,
        text: str,
        schema: dict[str, object],
    ) -> str:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.output


@dataclass
class FakeReportBackendClient(ReportBackendClient):
    """Fake report backend recording payloads."""

    response: dict[str, object] = field(default_factory=lambda: {"id": 42})
    error: Exception | None = None
    payloads: list[dict[str, object]] = field(default_factory=list)

    async def create_report(self, payload: dict[str, object]) -> dict[str, object]:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class InMemoryActivityRepository(ActivityRepository):
    """In-memory activity repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)

    def create_event(
        self, sender: str, event_type: str, details: dict[str, object]
    ) -> None:
        self.events.append(
            {"sender": sender, "event_type": event_type, "details": details}
        )


@dataclass
class RecordingSleeper:
    """Async sleep replacement that records requested delays."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@dataclass
class FakeClock:
    """Controllable clock for the rate limiter."""

    now: datetime = field(default_factory=lambda: datetime(2024, 5, 10, 9, 0))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_message(  # noqa: PLR0913
    sender: str = "59170000000",
    text: str = "",
    *,
    message_id: str = "wamid.1",
    location: GeoLocation | None = None,
    media: MediaPayload | None = None,
    media_error: Exception | None = None,
) -> InboundMessage:
    """Build an inbound message with an optional attachment."""
    async def _download() -> MediaPayload:
        if media_error is not None:
            raise media_error
        return media

    has_media = media is not None or media_error is not None
    return InboundMessage(
        message_id=message_id,
        sender=sender,
        text=text,
        received_at=datetime.now(tz=UTC),
        location=location,
        download_media=_download if has_media else None,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        whatsapp_access_token="wa-token",
        whatsapp_phone_number_id="123456",
        whatsapp_verify_token="verify-me",
        openai_api_key="openai-key",
        admin_token="admin-token",
    )


@pytest.fixture
def whatsapp_client() -> FakeWhatsAppClient:
    return FakeWhatsAppClient()


@pytest.fixture
def classifier_client() -> FakeClassifierClient:
    return FakeClassifierClient()


@pytest.fixture
def backend_client() -> FakeReportBackendClient:
    return FakeReportBackendClient()


@pytest.fixture
def activity_repository() -> InMemoryActivityRepository:
    return InMemoryActivityRepository()


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(max_messages_per_day=200, max_messages_per_number=10)


@pytest.fixture
def engine(  # noqa: PLR0913
    session_store: InMemorySessionStore,
    rate_limiter: RateLimiter,
    whatsapp_client: FakeWhatsAppClient,
    classifier_client: FakeClassifierClient,
    backend_client: FakeReportBackendClient,
    activity_repository: InMemoryActivityRepository,
    sleeper: RecordingSleeper,
) -> ConversationEngine:
    return ConversationEngine(
        session_store=session_store,
        rate_limiter=rate_limiter,
        timing=TimingSimulator(rng=random.Random(7)),
        classifier=ClassifierService(client=classifier_client, model="gpt-4o-mini"),
        report_service=ReportService(client=backend_client),
        whatsapp_client=whatsapp_client,
        activity=ActivityService(activity_repository),
        sleep=sleeper,
        rng=random.Random(7),
    )


@dataclass
class FakeMediaClient:
    """Fake media client returning a fixed payload."""

    payload: MediaPayload = field(
        default_factory=lambda: MediaPayload(content=JPEG_BYTES, mime_type="image/jpeg")
    )
    requested: list[str] = field(default_factory=list)

    async def download_media(self, media_id: str) -> MediaPayload:
        self.requested.append(media_id)
        return self.payload


@pytest.fixture
def media_client() -> FakeMediaClient:
    return FakeMediaClient()


@pytest.fixture
def container(
    settings: Settings,
    engine: ConversationEngine,
    whatsapp_client: FakeWhatsAppClient,
    media_client: FakeMediaClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        whatsapp_client=whatsapp_client,
        media_client=media_client,
        session_store=engine.session_store,
        rate_limiter=engine.rate_limiter,
        conversation_engine=engine,
        close_resources=close_resources,
    )
