"""Transport-neutral models for inbound chat messages."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GeoLocation:
    """Coordinates shared by the sender."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class MediaPayload:
    """Downloaded attachment bytes and their declared MIME type."""

    content: bytes
    mime_type: str

    @property
    def is_image(self) -> bool:
        return self.mime_type.lower().startswith("image/")


MediaDownloader = Callable[[], Awaitable[MediaPayload]]


@dataclass(frozen=True)
class InboundMessage:
    """A single message received from a sender."""

    message_id: str
    sender: str
    text: str
    received_at: datetime
    location: GeoLocation | None = None
    download_media: MediaDownloader | None = None

    @property
    def has_media(self) -> bool:
        return self.download_media is not None

    @property
    def is_empty(self) -> bool:
        return not self.text and not self.has_media and self.location is None


def sniff_image_mime_type(content: bytes) -> str | None:
    """Infer a basic image MIME type from file signatures."""
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None
