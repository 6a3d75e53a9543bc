"""ClipX - FastAPI Application Entry Point.

Serves the clip form and relays requests to the clipping server:
- Clip relay with automatic download
- Download proxy that forces a file save
- Request ID tracking, request logging, security headers
- Error sanitization
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import (
    ALLOWED_HOSTS,
    CLIP_SERVER_URL,
    CORS_ORIGINS,
    DEBUG,
    HOST,
    PORT,
    STATIC_DIR,
    logger,
)
from app.middleware import (
    ErrorSanitizationMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from app.routers import web
from app.version import __version__
from app.schemas import HealthResponse


# -----------------------------------------------------------------------------
# Application Lifespan
# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("Starting ClipX v%s (clipping server: %s)", __version__, CLIP_SERVER_URL)
    yield
    logger.info("Shutting down ClipX")


# -----------------------------------------------------------------------------
# Application Factory
# -----------------------------------------------------------------------------

def create_app(debug: bool = DEBUG) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="ClipX",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if debug else None,
        redoc_url="/redoc" if debug else None,
        openapi_url="/openapi.json" if debug else None,
    )

    # -------------------------------------------------------------------------
    # Middleware Stack (order matters - first added = last executed)
    # -------------------------------------------------------------------------

    # 1. Error sanitization
    app.add_middleware(ErrorSanitizationMiddleware, debug=debug)

    # 2. Request logging
    app.add_middleware(
        RequestLoggingMiddleware,
        exclude_paths={"/health", "/healthz", "/ready"},
    )

    # 3. Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    # 4. Request ID injection
    app.add_middleware(RequestIDMiddleware)

    # 5. Trusted hosts (prevents host header attacks)
    if ALLOWED_HOSTS and ALLOWED_HOSTS != ["*"]:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=ALLOWED_HOSTS,
        )

    # 6. CORS (outermost middleware for preflight handling)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
        max_age=600,
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors with clean messages."""
        errors = exc.errors()
        clean_errors = [
            {"field": ".".join(str(loc) for loc in err.get("loc", [])), "message": err.get("msg", "Invalid value")}
            for err in errors[:5]
        ]
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "errors": clean_errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # -------------------------------------------------------------------------
    # Health Check Endpoints
    # -------------------------------------------------------------------------

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    @app.get("/healthz", response_model=HealthResponse, include_in_schema=False)
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers and orchestrators."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now(timezone.utc),
        )

    @app.get("/ready", tags=["Health"])
    async def readiness_check():
        """Readiness check. The clipping server is not contacted."""
        return {"status": "ready"}

    # -------------------------------------------------------------------------
    # Static Files & Routers
    # -------------------------------------------------------------------------

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(web.router)

    return app


# Create the application instance
app = create_app()


def run() -> None:
    uvicorn.run("app.main:app", host=HOST, port=PORT, reload=DEBUG)


if __name__ == "__main__":
    run()
