from typing import Iterator, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from nightmarket.adapters.identity_provider import AuthSession
from nightmarket.context import AppContext
from nightmarket.exceptions import Unauthorized
from nightmarket.services.theme_service import ThemeService


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(ctx: AppContext = Depends(get_context)) -> Iterator[Session]:
    db = ctx.store.session()
    try:
        yield db
    finally:
        db.close()


def bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def optional_session(request: Request, ctx: AppContext = Depends(get_context)) -> Optional[AuthSession]:
    return ctx.identity.get_session(bearer_token(request))


def require_session(session: Optional[AuthSession] = Depends(optional_session)) -> AuthSession:
    if session is None:
        raise Unauthorized()
    return session


def get_theme_service(
    db: Session = Depends(get_db), ctx: AppContext = Depends(get_context)
) -> ThemeService:
    return ThemeService(db, issue_client=ctx.issue_client)
