# cvbuilder/main.py
from __future__ import annotations
import logging
from typing import Optional

import sentry_sdk
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cvbuilder.core.config import Settings, get_settings
from cvbuilder.core.exceptions import CVBuilderError, ProviderError
from cvbuilder.core.log import configure_logging
from cvbuilder.routes import generate
from cvbuilder.routes.responses import error_response
from cvbuilder.utils.analytics import init_analytics

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    # every failure path ends in the same {success: false, error, details?} envelope

    @app.exception_handler(CVBuilderError)
    async def _cvbuilder_error(request: Request, exc: CVBuilderError):
        if isinstance(exc, ProviderError):
            # generic message for the client, provider detail kept in "details"
            logger.error("%s (%s): %s", type(exc).__name__, exc.reason.value, exc)
            return error_response(exc.status_code, exc.public_message, exc.message)
        log = logger.error if exc.status_code >= 500 else logger.info
        log("%s: %s", type(exc).__name__, exc)
        return error_response(exc.status_code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        # keeps Allow on 405s
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request", str(exc.errors()))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return error_response(500, "Failed to process files with AI", str(exc))


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    cfg = cfg or get_settings()
    configure_logging(cfg.log_level)

    # observability
    if cfg.sentry_dsn:
        sentry_sdk.init(dsn=cfg.sentry_dsn, traces_sample_rate=0.1)
    init_analytics(cfg)
    if not cfg.has_provider_key:
        logger.warning("GEMINI_API_KEY is not set; /ocr-extract will answer with a configuration error")

    app = FastAPI(title=cfg.api_title, version=cfg.api_version)
    _register_error_handlers(app)

    # routers
    app.include_router(generate.router, tags=["cv"])

    @app.get("/healthz")
    def health(settings: Settings = Depends(get_settings)):
        return {"ok": True, "model": settings.generation_model}

    return app


app = create_app()


if __name__ == "__main__":
    # python -m cvbuilder.main, same as `uvicorn cvbuilder.main:app`
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
