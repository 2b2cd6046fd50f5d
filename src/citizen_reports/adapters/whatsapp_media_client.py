"""WhatsApp media download client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from citizen_reports.domain.messages import MediaPayload, sniff_image_mime_type


class WhatsAppMediaClient(Protocol):
    """Interface for downloading WhatsApp media."""

    async def download_media(self, media_id: str) -> MediaPayload:
        """Download a media object and return its bytes and MIME type."""


@dataclass
class HttpxWhatsAppMediaClient(WhatsAppMediaClient):
    """WhatsApp media client using httpx."""

    access_token: str
    graph_base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, access_token: str, graph_url: str, api_version: str
    ) -> "HttpxWhatsAppMediaClient":
        """Create a media client with a managed httpx session."""
        return cls(
            access_token=access_token,
            graph_base_url=f"{graph_url}/{api_version}",
            http_client=httpx.AsyncClient(),
        )

    async def download_media(self, media_id: str) -> MediaPayload:
        """Resolve the media URL, then download its content."""
        headers = {"Authorization": f"Bearer {self.access_token}"}
        response = await self.http_client.get(
            f"{self.graph_base_url}/{media_id}", headers=headers, timeout=10
        )
        response.raise_for_status()
        metadata = response.json()
        media_url = metadata.get("url")
        if not media_url:
            raise RuntimeError("WhatsApp media lookup returned no URL")
        file_response = await self.http_client.get(media_url, headers=headers, timeout=20)
        file_response.raise_for_status()
        mime_type = (
            metadata.get("mime_type")
            or sniff_image_mime_type(file_response.content)
            or file_response.headers.get("content-type", "")
        )
        return MediaPayload(content=file_response.content, mime_type=mime_type)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
