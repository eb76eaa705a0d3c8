"""
main.py
-------
FastAPI application factory and entry point.

Application lifecycle:
  1. App is created by create_application(settings).
  2. The engine, session factory and services are built from that one
     Settings instance and stored on app.state.
  3. lifespan context manager runs on startup / shutdown.
  4. Routers are registered with their URL prefixes.
  5. Exception handlers map service errors to status codes and normalise
     unexpected errors to a generic 500.

Run with:
    uvicorn main:app --reload              # development
    uvicorn main:app --workers 4           # production (no --reload)
    python main.py                         # listens on settings.PORT
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from accounts.api.routes import auth, companies, users
from accounts.core.config import Settings, get_settings
from accounts.core.exceptions import AccountServiceException
from accounts.core.logging import configure_logging, get_logger
from accounts.core.security import PasswordHasher, TokenService
from accounts.db.session import create_engine, create_session_factory
from accounts.dependencies import AuthGate
from accounts.services.auth_service import AuthService
from accounts.services.credential_store import CredentialStore
from accounts.services.membership_service import MembershipService

logger = get_logger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Startup: configure structured logging.
        Shutdown: dispose the async engine (graceful connection pool drain).
        """
        configure_logging(settings)
        logger.info(
            "Starting up",
            app=settings.APP_NAME,
            env=settings.APP_ENV,
            debug=settings.DEBUG,
        )
        yield
        logger.info("Shutting down - disposing DB engine")
        await app.state.engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Multi-tenant account service: password login, bearer tokens, "
            "and user/company memberships."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Wiring ────────────────────────────────────────────────────────────────
    engine = create_engine(settings)
    sessions = create_session_factory(engine)
    tokens = TokenService.from_settings(settings)
    store = CredentialStore(sessions)

    app.state.engine = engine
    app.state.sessions = sessions
    app.state.credential_store = store
    app.state.auth_gate = AuthGate(tokens, store)
    app.state.auth_service = AuthService(store, PasswordHasher.from_settings(settings), tokens)
    app.state.membership_service = MembershipService(sessions)

    # ── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(companies.router)
    app.include_router(users.router)

    # ── Exception Handlers ────────────────────────────────────────────────────

    @app.exception_handler(AccountServiceException)
    async def account_service_exception_handler(
        request: Request, exc: AccountServiceException
    ) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
            for err in exc.errors()
        ]
        missing = any(err["type"] == "missing" for err in exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Please provide all required fields" if missing else "Invalid request",
                "error": "VALIDATION_ERROR",
                "errors": errors,
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    # ── Health Check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["Health"], summary="Service health check")
    async def health() -> dict:
        return {"status": "ok", "app": settings.APP_NAME, "env": settings.APP_ENV}

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().PORT)
