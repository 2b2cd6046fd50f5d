"""Domain models for conversation sessions."""

from dataclasses import dataclass
from enum import Enum


class ConversationState(str, Enum):
    """Steps of the report intake conversation."""

    INITIAL = "initial"
    WAITING_LOCATION = "waiting_location"
    WAITING_PHOTO = "waiting_photo"
    # Reserved; the photo step submits directly without passing through it.
    READY_TO_SUBMIT = "ready_to_submit"


@dataclass(frozen=True)
class UserSession:
    """Conversation state and report fields collected for one sender."""

    state: ConversationState = ConversationState.INITIAL
    description: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    persisted: bool = False
