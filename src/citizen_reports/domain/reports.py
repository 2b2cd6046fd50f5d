"""Models for report classification and submission."""

from dataclasses import dataclass

from pydantic import BaseModel

from citizen_reports.domain.messages import MediaPayload


class ClassificationVerdict(BaseModel):
    """Structured output expected from the content classifier."""

    accepted: bool
    reason: str | None = None


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying a report description."""

    accepted: bool
    reason: str | None = None


@dataclass(frozen=True)
class ReportDraft:
    """Report assembled from a completed session, ready for submission."""

    description: str
    latitude: float
    longitude: float
    photo: MediaPayload


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of submitting a report to the backend."""

    success: bool
    report_id: str | None = None
    error: str | None = None
