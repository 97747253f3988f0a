# app/main.py
from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from api.routers.news import router as news_router
from api.routers.weather import router as weather_router
from app.config import get_settings
from app.core.errors import DashboardError
from app.core.logging import configure_logging, logger
from app.core.request_id import clear_request_id, new_request_id, set_request_id

settings = get_settings()
configure_logging(service_name="api", level=settings.LOG_LEVEL)

app = FastAPI(
    title="Weather & News Dashboard - Backend",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
}


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answers every preflight and stamps the CORS headers on every response."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response: StarletteResponse = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("x-request-id") or new_request_id()
        set_request_id(req_id)

        logger.info("request_started", method=request.method, path=str(request.url.path))
        try:
            response: StarletteResponse = await call_next(request)
        except Exception as exc:
            logger.error("request_exception", error=str(exc.__class__.__name__))
            clear_request_id()
            raise
        logger.info("request_ended", status_code=response.status_code)
        response.headers["X-Request-Id"] = req_id
        clear_request_id()
        return response


# Last added = outermost: CORS wraps everything, preflights never reach the request-id layer.
app.add_middleware(RequestIdMiddleware)
app.add_middleware(CORSHeadersMiddleware)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        "lookup_failed",
        path=str(request.url.path),
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        error=exc.message,
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    details = f"{location}: {message}" if location else message
    logger.info("request_invalid", path=str(request.url.path), details=details)
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": details})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=dict(exc.headers or {}),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the middleware stack, so CORS headers are added here.
    logger.exception("unhandled_exception", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"}, headers=CORS_HEADERS)


# --- Health endpoints ---
@app.get("/")
async def root():
    return {"ok": True, "app": "Weather & News Dashboard", "message": "Up & running"}

@app.head("/")
async def root_head():
    return Response(status_code=200)

@app.get("/healthz")
async def healthz():
    return {"status": "healthy"}

@app.get("/health")
async def health():
    return {"ok": True}


# --- API v1 router ---
api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(weather_router)
api_v1_router.include_router(news_router)

app.include_router(api_v1_router)
