"""
Entrypoint for the Delta signing proxy web service.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import SERVICE_NAME, SERVICE_VERSION
from exchanges.delta.errors import BackendError, DeltaProxyError, InvalidRequestError
from services.webapp import routes
from services.webapp.dependencies import get_forwarder, get_settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title=SERVICE_NAME,
    description="Signs dashboard requests and forwards them to the Delta Exchange REST API",
    version=SERVICE_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes.router)


@app.on_event("startup")
async def _startup() -> None:
    settings = get_settings()
    logger.info("%s %s forwarding to %s", SERVICE_NAME, SERVICE_VERSION, settings.base_url)
    if settings.has_default_credentials:
        logger.info("API keys from env: set")
    else:
        logger.info("API keys from env: not set (will use request body)")


@app.on_event("shutdown")
async def _shutdown() -> None:
    if get_forwarder.cache_info().currsize:
        try:
            await get_forwarder().aclose()
        except Exception as exc:
            logger.warning("Failed to close outbound HTTP client cleanly: %s", exc)


@app.exception_handler(DeltaProxyError)
async def _proxy_error_handler(request: Request, exc: DeltaProxyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    error = InvalidRequestError("; ".join(problems) or "Malformed request body")
    return JSONResponse(status_code=error.status_code, content=error.to_envelope())


@app.exception_handler(Exception)
async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error serving %s %s", request.method, request.url.path)
    error = BackendError(str(exc) or exc.__class__.__name__)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error.to_envelope())


@app.get("/", summary="Health check")
def health() -> dict:
    return {
        "status": f"{SERVICE_NAME} running",
        "version": SERVICE_VERSION,
        "time": datetime.now(tz=timezone.utc).isoformat(),
    }
