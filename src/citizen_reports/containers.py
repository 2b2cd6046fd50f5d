"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from citizen_reports.adapters.openai_classifier_client import OpenAIClassifierClient
from citizen_reports.adapters.report_backend_client import HttpxReportBackendClient
from citizen_reports.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from citizen_reports.adapters.whatsapp_client import (
    HttpxWhatsAppClient,
    WhatsAppClient,
)
from citizen_reports.adapters.whatsapp_media_client import (
    HttpxWhatsAppMediaClient,
    WhatsAppMediaClient,
)
from citizen_reports.config import Settings
from citizen_reports.services.activity import ActivityService
from citizen_reports.services.classifier import ClassifierService
from citizen_reports.services.conversation import ConversationEngine
from citizen_reports.services.rate_limiter import RateLimiter
from citizen_reports.services.reports import ReportService
from citizen_reports.services.sessions import InMemorySessionStore, SessionStore
from citizen_reports.services.timing import TimingSimulator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    whatsapp_client: WhatsAppClient
    media_client: WhatsAppMediaClient
    session_store: SessionStore
    rate_limiter: RateLimiter
    conversation_engine: ConversationEngine
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    whatsapp_client = HttpxWhatsAppClient.create(
        access_token=resolved_settings.whatsapp_access_token,
        phone_number_id=resolved_settings.whatsapp_phone_number_id,
        graph_url=resolved_settings.whatsapp_graph_url,
        api_version=resolved_settings.whatsapp_api_version,
    )
    media_client = HttpxWhatsAppMediaClient.create(
        access_token=resolved_settings.whatsapp_access_token,
        graph_url=resolved_settings.whatsapp_graph_url,
        api_version=resolved_settings.whatsapp_api_version,
    )
    backend_client = HttpxReportBackendClient.create(resolved_settings.reports_url)
    classifier = ClassifierService(
        client=OpenAIClassifierClient.create(resolved_settings.openai_api_key),
        model=resolved_settings.openai_model,
        timeout_seconds=resolved_settings.classifier_timeout_seconds,
    )
    report_service = ReportService(
        client=backend_client,
        timeout_seconds=resolved_settings.gateway_timeout_seconds,
    )
    activity = ActivityService()
    if resolved_settings.activity_sink_enabled:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        activity = ActivityService(SupabaseActivityRepository(supabase_client))
    session_store = InMemorySessionStore()
    rate_limiter = RateLimiter(
        max_messages_per_day=resolved_settings.max_messages_per_day,
        max_messages_per_number=resolved_settings.max_messages_per_number,
    )
    engine = ConversationEngine(
        session_store=session_store,
        rate_limiter=rate_limiter,
        timing=TimingSimulator(),
        classifier=classifier,
        report_service=report_service,
        whatsapp_client=whatsapp_client,
        activity=activity,
    )

    async def close_resources() -> None:
        await whatsapp_client.close()
        await media_client.close()
        await backend_client.close()

    return AppContainer(
        settings=resolved_settings,
        whatsapp_client=whatsapp_client,
        media_client=media_client,
        session_store=session_store,
        rate_limiter=rate_limiter,
        conversation_engine=engine,
        close_resources=close_resources,
    )
