import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from client_reporter.admin import setup_admin
from client_reporter.core.config import settings
from client_reporter.core.db import async_session_maker, dispose_engine, engine
from client_reporter.core.errors import register_exception_handlers
from client_reporter.core.logging import log_db, log_end, log_payload, log_start, setup_logging
from client_reporter.models import Base
from client_reporter.routers import auth, clients, dashboard, integrations, reports, team, templates
from client_reporter.services.templates import seed_default_templates

# Configure logging
setup_logging(
    log_level=settings.LOG_LEVEL,
    log_dir=settings.LOG_DIR,
    log_to_file=settings.LOG_TO_FILE,
)
logger = logging.getLogger("client_reporter.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_start(logger, f"Starting {settings.PROJECT_NAME} {settings.VERSION}")
    if settings.CREATE_TABLES_ON_STARTUP:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log_db(logger, "Tables ensured")

    async with async_session_maker() as session:
        await seed_default_templates(session)

    yield

    await dispose_engine()
    log_end(logger, "Shutdown complete")


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    path = request.url.path
    if path.startswith("/admin/statics") or path == "/health":
        return await call_next(request)

    logger.info("[REQ] %s %s", request.method, path)
    if request.headers.get("content-type", "").startswith("application/json"):
        body = await request.body()
        if body.strip():
            try:
                log_payload(logger, json.loads(body), f"{request.method} {path} body")
            except ValueError:
                logger.info("[RAW BODY] %s", body[:1024])

    response = await call_next(request)
    logger.info("[RES] %s %s %s", response.status_code, request.method, path)
    return response


# Added after the logging middleware so the session is decoded first
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
)

# API
for api_router in (auth.router, clients.router, reports.router, templates.router, integrations.router, team.router):
    app.include_router(api_router, prefix="/api")

# Server-rendered dashboard
app.include_router(dashboard.router)

# Back-office
setup_admin(app, engine)


@app.get("/health")
async def health():
    return {"status": "ok"}
