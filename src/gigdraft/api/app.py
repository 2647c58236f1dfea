from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gigdraft.api.middleware import MethodGuardMiddleware, NoContentCORSMiddleware
from gigdraft.api.routes import DRAFT_ENDPOINT, api_router, router
from gigdraft.context import AppContext
from gigdraft.errors import GigdraftError, InternalError

logger = logging.getLogger(__name__)


def create_app(context: AppContext | None = None) -> FastAPI:
    context = context or AppContext.from_settings()
    settings = context.settings

    app = FastAPI(title=settings.app_name)
    app.state.context = context

    # Added first so CORS wraps it and decorates its short-circuit responses.
    app.add_middleware(MethodGuardMiddleware, paths=[DRAFT_ENDPOINT], allowed_methods=["POST"])
    app.add_middleware(
        NoContentCORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GigdraftError)
    async def _gigdraft_error(request: Request, exc: GigdraftError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.details)
        return JSONResponse(exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
        return JSONResponse(InternalError("Internal server error").to_payload(), status_code=500)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            {"error": {"message": "Invalid request body", "details": jsonable_encoder(exc.errors())}},
            status_code=400,
        )

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(router)
    app.include_router(api_router)
    return app
