"""WhatsApp Cloud API client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class WhatsAppClient(Protocol):
    """Interface for WhatsApp Cloud API interactions."""

    async def send_text(self, to: str, text: str, reply_to: str | None = None) -> None:
        """Send a text message, optionally quoting an inbound message."""

    async def send_typing_indicator(self, message_id: str) -> None:
        """Mark a message as read and show the typing indicator."""


@dataclass
class HttpxWhatsAppClient(WhatsAppClient):
    """WhatsApp client implemented with httpx."""

    access_token: str
    messages_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, access_token: str, phone_number_id: str, graph_url: str, api_version: str
    ) -> "HttpxWhatsAppClient":
        """Create a WhatsApp client with a managed httpx session."""
        return cls(
            access_token=access_token,
            messages_url=f"{graph_url}/{api_version}/{phone_number_id}/messages",
            http_client=httpx.AsyncClient(),
        )

    async def send_text(self, to: str, text: str, reply_to: str | None = None) -> None:
        """Send a text message using the messages endpoint."""
        payload: dict[str, object] = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": to,
            "type": "text",
            "text": {"body": text, "preview_url": False},
        }
        if reply_to is not None:
            payload["context"] = {"message_id": reply_to}
        await self._post(payload)

    async def send_typing_indicator(self, message_id: str) -> None:
        """Send a read receipt carrying a typing indicator."""
        await self._post(
            {
                "messaging_product": "whatsapp",
                "status": "read",
                "message_id": message_id,
                "typing_indicator": {"type": "text"},
            }
        )

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _post(self, payload: dict[str, object]) -> None:
        response = await self.http_client.post(
            self.messages_url,
            json=payload,
            headers={"Authorization": f"Bearer {self.access_token}"},
            timeout=10,
        )
        response.raise_for_status()
