# storefront/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from sqlalchemy import text

from storefront.core.config import Settings, get_settings
from storefront.core.errors import register_exception_handlers
from storefront.core.rate_limit import FixedWindowCounter, RateLimitMiddleware
from storefront.database import create_db_and_tables, make_engine

# Routers
from storefront.routers.auth import router as auth_router
from storefront.routers.items import router as items_router
from storefront.routers.cart import router as cart_router

logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - Dispose of the engine's connection pool.
    """
    engine = app.state.engine
    logger.info("Startup: connecting to database...")
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        create_db_and_tables(engine)
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield
    engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API from a Settings instance.

    Everything stateful (engine, rate-limit counters) hangs off `app.state`,
    so separate apps never share a database or counters.
    """
    settings = settings or get_settings()

    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = make_engine(settings.DATABASE_URL)
    app.state.rate_limiter = FixedWindowCounter(
        max_requests=settings.RATE_LIMIT_MAX,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )

    # --- Rate limiting (inside CORS so 429s still carry CORS headers) ---
    app.add_middleware(RateLimitMiddleware, counter=app.state.rate_limiter)

    # --- CORS configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, expose_details=settings.is_development)

    app.include_router(auth_router)
    app.include_router(items_router)
    app.include_router(cart_router)

    @app.get("/health", tags=["Health"])
    def health():
        """Health check endpoint."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "storefront.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )
