"""Supabase repository for bot activity events."""

from dataclasses import dataclass

from supabase import Client

from citizen_reports.services.activity import ActivityRepository


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Supabase-backed activity repository."""

    client: Client

    def create_event(
        self, sender: str, event_type: str, details: dict[str, object]
    ) -> None:
        """Create an activity event row."""
        self.client.table("bot_activity").insert(
            {
                "sender": sender,
                "event_type": event_type,
                "details_json": details,
            }
        ).execute()
