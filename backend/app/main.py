"""
VideoShare Backend - FastAPI Application

Identity, session and relational-view core of a video-sharing platform.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import get_settings
from app.core.exceptions import AppError
from app.database.connections import close_connections, get_mongo_client
from app.database.registry import create_indexes, sync_registry
from app.logging_config import configure_logging
from app.routers import comments, health, likes, playlists, users

API_PREFIX = "/api/v1"

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Initialize database connections
    - Sync database registry
    - Create indexes (unique email / handle, one like per target)

    Shutdown:
    - Close all database connections
    """
    logger.info("Starting up VideoShare Backend...")

    try:
        client = await get_mongo_client()
        await sync_registry(client)
        await create_indexes(client)
        logger.info("Database registry synced and indexes created")
    except Exception as e:
        logger.warning("Database initialization warning: %s", e)

    yield

    logger.info("Shutting down VideoShare Backend...")
    await close_connections()
    logger.info("Database connections closed")


app = FastAPI(
    title="VideoShare API",
    description="""
## Video-sharing platform API

### Features
- **Users**: Two-phase registration, email verification, password reset
- **Sessions**: Access/refresh JWTs with refresh rotation and logout revocation
- **Playlists**: Ordered, owner-only playlists
- **Likes**: Toggle likes on videos, comments and tweets
- **Comments**: Paginated video comments

### Authentication
Protected endpoints accept either header or cookie:
```
Authorization: Bearer <access_token>
Cookie: accessToken=<access_token>
```

Obtain tokens via `POST /api/v1/users/login`, rotate them via
`POST /api/v1/users/refresh-token`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render domain errors as ``{"detail": message}`` with their status."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(health.router)
app.include_router(users.router, prefix=API_PREFIX)
app.include_router(playlists.router, prefix=API_PREFIX)
app.include_router(likes.router, prefix=API_PREFIX)
app.include_router(comments.router, prefix=API_PREFIX)

if settings.media_mount_enabled:
    app.mount("/media", StaticFiles(directory=settings.media_root, check_dir=False), name="media")


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "VideoShare API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
