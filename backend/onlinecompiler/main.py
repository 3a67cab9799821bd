"""FastAPI application serving the compile bridge.

``create_app`` takes an explicit :class:`~onlinecompiler.config.Config`; the
environment is only read by the entry points (``onlinecompiler serve`` or
``uvicorn onlinecompiler.main:app_from_env --factory``).
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .bridge import ExecutionBridge
from .config import Config
from .errors import BridgeError, ValidationError
from .judge0 import Judge0Client
from .routers import compilation, meta

logger = logging.getLogger("onlinecompiler")


def configure_logging(level: str) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("[onlinecompiler] %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level)


def create_app(config: Config, judge0_client: Optional[Judge0Client] = None) -> FastAPI:
    configure_logging(config.log_level)

    client = judge0_client or Judge0Client.from_config(config)
    bridge = ExecutionBridge(
        client,
        max_attempts=config.poll_max_attempts,
        interval_seconds=config.poll_interval_seconds,
    )
    logger.info(
        "Loaded config: judge0_url=%s, allowed_origin=%s, poll=%sx%sms, rapidapi=%s",
        config.judge0_url,
        config.allowed_origin,
        config.poll_max_attempts,
        config.poll_interval_ms,
        "on" if config.rapidapi_key else "off",
    )

    app = FastAPI(title="Online Compiler", version="0.1.0")
    app.state.config = config
    app.state.bridge = bridge

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.allowed_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client_host = getattr(request.client, "host", "unknown")
        logger.info("Incoming request: %s %s from %s", request.method, request.url.path, client_host)
        response = await call_next(request)
        logger.info("Response: %s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        if exc.status_code >= 500:
            logger.error("FAILED %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # a body that does not even parse is treated like a missing field
        logger.info("Rejected body for %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": ValidationError.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error during %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": BridgeError.message})

    app.include_router(compilation.router, prefix="/compile", tags=["compile"])
    app.include_router(meta.router, tags=["meta"])
    return app


def app_from_env() -> FastAPI:
    return create_app(Config.from_env())
