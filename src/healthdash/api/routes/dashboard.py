"""Dashboard state and control endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request

from healthdash.dashboard.layout import build_layout
from healthdash.dashboard.view import PROVIDERS, DashboardView
from healthdash.events.emitter import EVENT_TYPES

router = APIRouter(tags=["dashboard"])


def _view(request: Request) -> DashboardView:
    view: DashboardView = request.app.state.view
    return view


def _check_provider(provider: str) -> None:
    if provider not in PROVIDERS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown provider: {provider}. Expected one of {', '.join(PROVIDERS)}",
        )


@router.get("/dashboard")
async def get_dashboard(request: Request, provider: str | None = None) -> dict[str, Any]:
    """Render model for the selected tab, or for *provider* without switching tabs."""
    if provider is not None:
        _check_provider(provider)
    return build_layout(_view(request), provider).to_dict()


@router.post("/provider/{provider}")
async def select_provider(request: Request, provider: str) -> dict[str, Any]:
    _check_provider(provider)
    view = _view(request)
    view.select_provider(provider)
    return build_layout(view).to_dict()


@router.post("/refresh")
async def refresh_all(request: Request) -> dict[str, Any]:
    view = _view(request)
    await view.load_snapshot()
    return build_layout(view).to_dict()


@router.post("/table/refresh")
async def refresh_table(request: Request) -> dict[str, Any]:
    view = _view(request)
    await view.refresh_table()
    return build_layout(view).to_dict()


@router.post("/services/{name}/refresh")
async def refresh_service(request: Request, name: str) -> dict[str, Any]:
    view = _view(request)
    await view.refresh_service(name)
    state = view.service_refresh_states[name]
    return {
        "service": name,
        "is_refreshing": state.is_refreshing,
        "last_refreshed_at": state.last_refreshed_at.isoformat() if state.last_refreshed_at else None,
        "error": view.error,
    }


@router.post("/services/{name}/toggle")
async def toggle_service(request: Request, name: str) -> dict[str, Any]:
    view = _view(request)
    expanded = view.toggle_expansion(name)
    return {"service": name, "expanded": name in expanded}


@router.get("/events")
async def get_recent_events(
    request: Request, limit: int = 20, event_type: str | None = None
) -> list[dict[str, Any]]:
    """Return recent refresh events from the in-memory log."""
    if event_type is not None and event_type not in EVENT_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown event type: {event_type}")
    event_log = request.app.state.event_log
    return [e.to_dict() for e in event_log.get_recent(limit=limit, event_type=event_type)]
