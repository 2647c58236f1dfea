from __future__ import annotations

from collections.abc import Iterable

from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp


class MethodGuardMiddleware(BaseHTTPMiddleware):
    """Short-circuits guarded paths before routing.

    ``OPTIONS`` answers 204 with no body; any method outside ``allowed_methods``
    answers 405 with the error envelope.
    """

    def __init__(self, app: ASGIApp, *, paths: Iterable[str], allowed_methods: Iterable[str] = ("POST",)):
        super().__init__(app)
        self.paths = frozenset(paths)
        self.allowed_methods = frozenset(method.upper() for method in allowed_methods)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path not in self.paths:
            return await call_next(request)
        if request.method == "OPTIONS":
            return Response(status_code=204)
        if request.method not in self.allowed_methods:
            return JSONResponse({"error": {"message": "Method not allowed"}}, status_code=405)
        return await call_next(request)


class NoContentCORSMiddleware(CORSMiddleware):
    """CORS middleware whose accepted preflights answer 204 with an empty body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)
