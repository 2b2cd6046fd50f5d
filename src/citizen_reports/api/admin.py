"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from citizen_reports.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/stats", dependencies=[Depends(require_admin)])
async def stats(request: Request) -> dict[str, int]:
    """Return rate limiter counters and the number of open sessions."""
    container: AppContainer = request.app.state.container
    return {
        "daily_count": container.rate_limiter.daily_count,
        "daily_limit": container.rate_limiter.max_messages_per_day,
        "active_senders": container.rate_limiter.active_senders,
        "active_sessions": len(container.session_store.list_sessions()),
        "busy_senders": container.conversation_engine.locks.busy_senders,
    }


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(request: Request) -> dict[str, object]:
    """Return the conversations currently in progress."""
    container: AppContainer = request.app.state.container
    return {
        "sessions": [
            {
                "sender": sender,
                "state": session.state.value,
                "description": session.description,
                "latitude": session.latitude,
                "longitude": session.longitude,
            }
            for sender, session in container.session_store.list_sessions().items()
        ]
    }
