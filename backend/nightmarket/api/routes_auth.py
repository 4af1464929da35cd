from typing import Optional

from fastapi import APIRouter, Depends, Request

from nightmarket.adapters.identity_provider import AuthSession
from nightmarket.api.deps import bearer_token, get_context, optional_session, require_session
from nightmarket.context import AppContext

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/session", summary="Current session state")
def current_session(session: Optional[AuthSession] = Depends(optional_session)):
    if session is None:
        return {"state": "guest", "session": None}
    return {
        "state": "authed",
        "session": {"user_id": session.user_id, "email": session.email, "expires_at": session.expires_at},
    }


@router.post("/logout", summary="Sign out the current session")
def logout(
    request: Request,
    session: AuthSession = Depends(require_session),
    ctx: AppContext = Depends(get_context),
):
    ctx.identity.sign_out(bearer_token(request))
    return {"state": "guest"}
