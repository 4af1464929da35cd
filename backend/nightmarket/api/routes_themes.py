from typing import Optional

from fastapi import APIRouter, Depends, Query

from nightmarket.adapters.identity_provider import AuthSession
from nightmarket.api.deps import get_theme_service, require_session
from nightmarket.schemas.theme_schema import IssueIn, ThemeOut, ThemeRequestIn, ThemeToggleIn
from nightmarket.services.theme_service import ThemeService

router = APIRouter(tags=["themes"])


def _theme_dict(theme) -> dict:
    return ThemeOut.model_validate(theme).model_dump(mode="json")


@router.post("/api/themes", summary="Request a generated theme for an event")
def request_theme(
    payload: ThemeRequestIn,
    session: AuthSession = Depends(require_session),
    svc: ThemeService = Depends(get_theme_service),
):
    theme, issue = svc.request_theme(payload.event_id, payload.title, payload.notes)
    return {"theme": _theme_dict(theme), "issue": issue}


@router.get("/api/themes", summary="List themes, optionally for one event")
def list_themes(
    event_id: Optional[str] = Query(None, alias="eventId"),
    session: AuthSession = Depends(require_session),
    svc: ThemeService = Depends(get_theme_service),
):
    return {"themes": [_theme_dict(t) for t in svc.list_themes(event_id)]}


@router.patch("/api/themes/{theme_id}", summary="Enable or disable a theme")
def toggle_theme(
    theme_id: str,
    payload: ThemeToggleIn,
    session: AuthSession = Depends(require_session),
    svc: ThemeService = Depends(get_theme_service),
):
    return {"theme": _theme_dict(svc.set_theme_enabled(theme_id, payload.enabled))}


@router.post("/api/themes/{theme_id}/ready", summary="Mark a building theme as ready")
def mark_ready(
    theme_id: str,
    session: AuthSession = Depends(require_session),
    svc: ThemeService = Depends(get_theme_service),
):
    return {"theme": _theme_dict(svc.mark_theme_ready(theme_id))}


@router.post("/api/github/issue", summary="Open an issue in the theme repository")
def create_issue(
    payload: IssueIn,
    session: AuthSession = Depends(require_session),
    svc: ThemeService = Depends(get_theme_service),
):
    return {"issue": svc.create_generic_issue(payload.title, payload.body, payload.labels)}
