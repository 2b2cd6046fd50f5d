"""HTTP client for the report storage backend."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class ReportBackendError(RuntimeError):
    """Raised when the backend rejects a report."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Backend error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ReportBackendClient(Protocol):
    """Interface for creating reports on the backend."""

    async def create_report(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a report and return the backend's JSON body."""


@dataclass
class HttpxReportBackendClient(ReportBackendClient):
    """HTTPX-backed report backend client."""

    reports_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, reports_url: str) -> "HttpxReportBackendClient":
        """Create a backend client with a managed httpx session."""
        return cls(reports_url=reports_url, http_client=httpx.AsyncClient())

    async def create_report(self, payload: dict[str, object]) -> dict[str, object]:
        """POST a report and return the created resource."""
        response = await self.http_client.post(self.reports_url, json=payload, timeout=30)
        if response.is_error:
            raise ReportBackendError(response.status_code, _error_message(response))
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Extract the backend's error text, tolerating non-JSON bodies."""
    try:
        body = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return "Unknown error"
