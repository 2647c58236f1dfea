from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from gigdraft.context import AppContext
from gigdraft.errors import UnauthenticatedError, ValidationError


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(context: AppContext = Depends(get_context)) -> Generator[Session, None, None]:
    db = context.sessions()
    try:
        yield db
    finally:
        db.close()


def get_optional_caller_id(request: Request, context: AppContext = Depends(get_context)) -> str | None:
    value = request.headers.get(context.settings.auth_header, "").strip()
    if not value:
        return None
    if "/" in value:
        raise ValidationError("Invalid user identity")
    return value


def get_caller_id(caller_id: str | None = Depends(get_optional_caller_id)) -> str:
    if caller_id is None:
        raise UnauthenticatedError("The request must be made by an authenticated user.")
    return caller_id
