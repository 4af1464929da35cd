from contextlib import asynccontextmanager
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nightmarket.api.health import router as health_router
from nightmarket.api.routes_admin import router as admin_router
from nightmarket.api.routes_auth import router as auth_router
from nightmarket.api.routes_storefront import router as storefront_router
from nightmarket.api.routes_themes import router as themes_router
from nightmarket.config import Settings
from nightmarket.context import AppContext, IssueClientFactory
from nightmarket.exceptions import ConfigurationMissing, NightMarketError
from nightmarket.services.theme_service import ThemeService
from nightmarket.utils.log import configure_logging, get_logger

log = get_logger("app")


def _start_reconciler(ctx: AppContext) -> Optional[BackgroundScheduler]:
    interval = ctx.settings.THEME_RECONCILE_INTERVAL_SECONDS
    if interval <= 0:
        return None

    def reconcile_job():
        try:
            with ctx.store.session_scope() as db:
                ids = ThemeService(db, issue_client=ctx.issue_client).reconcile_stale_requests(
                    ctx.settings.THEME_STALE_AFTER_SECONDS
                )
            if ids:
                log.warning("Reconciled %d stale theme request(s): %s", len(ids), ids)
        except ConfigurationMissing as e:
            log.error("Theme reconciliation skipped: %s", e.message)

    scheduler = BackgroundScheduler()
    scheduler.add_job(reconcile_job, "interval", seconds=interval, id="reconcile_theme_requests")
    scheduler.start()
    log.info("Theme reconciliation every %ss", interval)
    return scheduler


def _log_auth_change(event: str, session) -> None:
    log.info("Auth state change: %s%s", event, f" ({session.user_id})" if session else "")


def _error_summary(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NightMarketError)
    async def nightmarket_error(request: Request, exc: NightMarketError):
        if exc.status_code >= 500:
            log.error("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _error_summary(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    issue_client_factory: Optional[IssueClientFactory] = None,
) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)
    ctx = AppContext(settings, issue_client_factory=issue_client_factory)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        auth_listener = None
        try:
            auth_listener = ctx.identity.subscribe(_log_auth_change, owner="audit-log")
        except ConfigurationMissing as e:
            log.warning("Starting without store configuration: %s", e.message)
        scheduler = _start_reconciler(ctx)
        app.state.reconciler = scheduler
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
                app.state.reconciler = None
            if auth_listener is not None:
                auth_listener.unsubscribe()
            ctx.close()

    app = FastAPI(title="Night Market CMS - Backend", version="0.1.0", lifespan=lifespan)
    app.state.context = ctx
    app.state.reconciler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(storefront_router)
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(themes_router)
    return app


app = create_app()
