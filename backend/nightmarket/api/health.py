from fastapi import APIRouter, Depends

from nightmarket.api.deps import get_context
from nightmarket.config import resolve_github_config
from nightmarket.context import AppContext
from nightmarket.exceptions import ConfigurationMissing

router = APIRouter()


@router.get("/health", tags=["health"])
def health(ctx: AppContext = Depends(get_context)):
    store_ok = False
    issues_configured = False
    try:
        store_ok = ctx.store.ping()
    except Exception:
        store_ok = False
    try:
        resolve_github_config(ctx.settings)
        issues_configured = True
    except ConfigurationMissing:
        issues_configured = False

    return {
        "status": "ok" if store_ok and issues_configured else "degraded",
        "store": store_ok,
        "issue_tracker": issues_configured,
    }
