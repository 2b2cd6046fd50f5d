"""Pydantic models for WhatsApp Cloud API webhook payloads."""

from pydantic import BaseModel, Field


class WhatsAppText(BaseModel):
    """Text message body."""

    body: str


class WhatsAppMedia(BaseModel):
    """Media reference shared by image, document, audio, video and stickers."""

    id: str
    mime_type: str | None = None
    caption: str | None = None
    filename: str | None = None


class WhatsAppLocation(BaseModel):
    """Location message payload."""

    latitude: float
    longitude: float
    name: str | None = None
    address: str | None = None


class WhatsAppMessage(BaseModel):
    """Inbound message payload."""

    id: str
    from_number: str = Field(alias="from")
    timestamp: str
    type: str
    text: WhatsAppText | None = None
    image: WhatsAppMedia | None = None
    document: WhatsAppMedia | None = None
    video: WhatsAppMedia | None = None
    audio: WhatsAppMedia | None = None
    sticker: WhatsAppMedia | None = None
    location: WhatsAppLocation | None = None

    @property
    def media(self) -> WhatsAppMedia | None:
        """Return the first attached media object, if any."""
        return self.image or self.document or self.video or self.audio or self.sticker


class WhatsAppValue(BaseModel):
    """Change value holding messages and delivery statuses."""

    messaging_product: str | None = None
    messages: list[WhatsAppMessage] = Field(default_factory=list)
    statuses: list[dict[str, object]] = Field(default_factory=list)


class WhatsAppChange(BaseModel):
    """Single change notification."""

    field: str
    value: WhatsAppValue


class WhatsAppEntry(BaseModel):
    """Webhook entry for one business account."""

    id: str
    changes: list[WhatsAppChange] = Field(default_factory=list)


class WhatsAppWebhookPayload(BaseModel):
    """WhatsApp webhook envelope."""

    object: str
    entry: list[WhatsAppEntry] = Field(default_factory=list)

    def iter_messages(self) -> list[WhatsAppMessage]:
        """Return all inbound messages in the envelope."""
        return [
            message
            for entry in self.entry
            for change in entry.changes
            for message in change.value.messages
        ]
