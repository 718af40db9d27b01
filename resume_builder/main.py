import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from resume_builder.config import settings
from resume_builder.core.rate_limiter import rate_limiter
from resume_builder.database import init_db, engine
from resume_builder.logging_config import setup_logging
from resume_builder.routers import auth, catalog, public, resumes, sections

setup_logging()
logger = logging.getLogger(__name__)

PLACEHOLDER_SECRET_KEY = "replace-with-a-long-random-secret-key"

app = FastAPI(
    title="Resume Builder API",
    description="Resumes, ordered sections, templates, previews and exports.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(resumes.router)
app.include_router(sections.router)
app.include_router(catalog.router)
app.include_router(public.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def _rate_limit_for(path: str) -> tuple[str, int] | None:
    """(bucket, per-minute limit) for limited paths. Buckets group paths so ids and slugs share one budget."""
    if path in {"/auth/login", "/auth/register"}:
        return "auth", settings.rate_limit_auth_per_min
    if path.startswith("/resumes/") and path.endswith("/export"):
        return "export", settings.rate_limit_export_per_min
    if path.startswith("/public/"):
        return "public", settings.rate_limit_public_view_per_min
    return None


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    path = request.url.path
    if request.method == "OPTIONS":
        return await call_next(request)

    rule = _rate_limit_for(path)
    if rule is not None and rule[1] > 0:
        bucket, limit = rule
        client_ip = request.client.host if request.client else "unknown"
        key = f"{client_ip}:{bucket}"
        allowed, retry_after = rate_limiter.allow(key, limit=limit, window_seconds=60)
        if not allowed:
            logger.info("Rate limit hit for %s on %s", client_ip, path)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please retry shortly."},
                headers={"Retry-After": str(retry_after)},
            )

    return await call_next(request)


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.on_event("startup")
def on_startup():
    logger.info("Starting Resume Builder API")
    env = (settings.app_env or "development").lower()
    if env in {"production", "prod"}:
        if settings.secret_key == PLACEHOLDER_SECRET_KEY:
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        if "username:password@" in settings.database_url:
            raise RuntimeError("DATABASE_URL placeholder credentials are not allowed in production")
    else:
        if settings.secret_key == PLACEHOLDER_SECRET_KEY:
            logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")
        if "username:password@" in settings.database_url:
            logger.warning("DATABASE_URL appears to use placeholder credentials. Set DATABASE_URL in .env.")
    init_db()


@app.get("/")
def root():
    return {"message": "Resume Builder API. See /docs for endpoints."}
