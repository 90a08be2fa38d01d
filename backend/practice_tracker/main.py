from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from practice_tracker.config import settings
from practice_tracker.logging_setup import configure_logging
from practice_tracker.routes.system import router as system_router
from practice_tracker.routes.tasks import router as tasks_router
from practice_tracker.routes.submissions import router as submissions_router
from practice_tracker.routes.community import router as community_router
from practice_tracker.upstream import UpstreamError
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha,
             upstream=settings.upstream_api_url, lateness_clock=settings.lateness_clock)
    yield
    # Shutdown
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description=f"{settings.app_display_name} API: completion matrices, comment threads and practice leaderboards",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(system_router)
app.include_router(tasks_router)
app.include_router(submissions_router)
app.include_router(community_router)

@app.exception_handler(UpstreamError)
async def upstream_error(request: Request, exc: UpstreamError):
    log.info("upstream_error_response", status=exc.status_code, detail=exc.detail, path=request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid)
    try:
        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
    finally:
        structlog.contextvars.clear_contextvars()
