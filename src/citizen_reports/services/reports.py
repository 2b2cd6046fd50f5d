"""Report submission to the storage backend."""

import asyncio
import base64
import logging
from dataclasses import dataclass

from citizen_reports.adapters.report_backend_client import ReportBackendClient
from citizen_reports.domain.messages import MediaPayload, sniff_image_mime_type
from citizen_reports.domain.reports import ReportDraft, SubmissionResult

_logger = logging.getLogger(__name__)


@dataclass
class ReportService:
    """Submit finished report drafts. Failures are returned, never retried."""

    client: ReportBackendClient
    timeout_seconds: float = 30.0

    async def submit(self, draft: ReportDraft) -> SubmissionResult:
        """Send a draft to the backend and return the outcome."""
        payload = {
            "description": draft.description,
            "latitude": draft.latitude,
            "longitude": draft.longitude,
            "photo": to_data_uri(draft.photo),
        }
        try:
            body = await asyncio.wait_for(
                self.client.create_report(payload), timeout=self.timeout_seconds
            )
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            _logger.warning("Report submission failed: %s", error)
            return SubmissionResult(success=False, error=error)

        report_id = body.get("id") if isinstance(body, dict) else None
        if report_id is None:
            _logger.warning("Backend response has no report id: %r", body)
            return SubmissionResult(success=False, error="Missing report id")
        _logger.info("Report created: id=%s", report_id)
        return SubmissionResult(success=True, report_id=str(report_id))


def to_data_uri(photo: MediaPayload) -> str:
    """Encode photo bytes as a base64 data URI."""
    mime_type = photo.mime_type or sniff_image_mime_type(photo.content) or "image/jpeg"
    encoded = base64.b64encode(photo.content).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"

