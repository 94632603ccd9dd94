"""SocialConnect API - FastAPI application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from socialconnect.api.v1.api import api_router
from socialconnect.core.config import settings
from socialconnect.core.exceptions import register_exception_handlers
from socialconnect.core.logging import configure_logging
from socialconnect.db.session import engine

logger = logging.getLogger(__name__)


async def _ping_database() -> str | None:
    """Return None when the database answers, otherwise the error text."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        return str(e)
    return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    error = await _ping_database()
    if error is None:
        logger.info("Database: OK")
    else:
        logger.warning("Database connection failed: %s", error)
        logger.warning("Ensure PostgreSQL is running (e.g. docker compose up -d postgres)")
    logger.info("API: /api | Docs: /docs | Health: /health | Ready (DB): /ready")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)
app.include_router(api_router, prefix="/api")

# Uploaded images: uploads/{bucket}/{user_id}/...
uploads_dir = Path(settings.UPLOAD_DIR).resolve()
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": "/api",
    }


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    """Health check including DB."""
    error = await _ping_database()
    if error is None:
        return {"status": "ok", "database": "connected"}
    return JSONResponse(status_code=503, content={"status": "error", "database": error})
