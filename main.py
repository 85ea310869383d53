import uvicorn
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.health import router as health_router
from app.api.upload import router as upload_router
from app.api.report import router as report_router
from app.api.files import router as files_router
from app.core.config import get_settings
from app.services.upload_service import UploadService
from app.utils.logging_config import setup_logging

_settings = get_settings()
setup_logging(level=getattr(logging, _settings.log_level, logging.INFO), log_dir=_settings.log_dir)
logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Honour test overrides so the startup checks see the same settings as routes
    settings = app.dependency_overrides.get(get_settings, get_settings)()
    UploadService(settings).ensure_upload_dir()
    if not settings.has_github_config:
        logger.warning(
            "missing_github_config has_token=%s has_repo=%s",
            bool(settings.github_token), bool(settings.github_repo),
        )
    logger.info("server_started upload_dir=%s", settings.upload_dir)
    yield


app = FastAPI(title="Game Bug Report Relay", lifespan=lifespan)

# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.headers.get("x-forwarded-for") or (
            request.client.host if request.client else "unknown"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                "http_request_failed method=%s path=%s duration_ms=%.0f error=%s",
                request.method, request.url.path, process_time, e,
            )
            raise

        process_time = (time.time() - start_time) * 1000
        logger.info(
            "http_request method=%s path=%s status=%d duration_ms=%.0f ip=%s content_type=%s",
            request.method, request.url.path, response.status_code, process_time,
            client_host, request.headers.get("content-type"),
        )
        return response

app.add_middleware(LoggingMiddleware)

# ---------------------------------------------------------------------------
# CORS — the game client and web tools post from anywhere
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Error handlers — every error body is {"error": <message>}
# ---------------------------------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("request_rejected path=%s errors=%d", request.url.path, len(exc.errors()))
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(upload_router)
app.include_router(report_router)
app.include_router(files_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host=_settings.host, port=_settings.port)
