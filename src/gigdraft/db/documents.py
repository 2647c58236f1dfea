from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from gigdraft.db.base import utcnow
from gigdraft.db.models import DraftDocument, UserDocument

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


# Placeholder replaced with the store's clock when a write is applied.
SERVER_TIMESTAMP = _ServerTimestamp()


class DocumentStore:
    """Per-user documents and per-user application drafts.

    Merge writes replace only the named top-level fields and leave every other
    field of the stored document untouched. Concurrent merges on the same
    document are last-writer-wins.
    """

    def __init__(self, sessions: sessionmaker[Session], *, clock: Callable[[], datetime] = utcnow):
        self._sessions = sessions
        self._clock = clock

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        with self._sessions() as session:
            row = session.get(UserDocument, user_id)
            return copy.deepcopy(row.data) if row is not None else None

    def set_user(self, user_id: str, data: dict[str, Any]) -> dict[str, Any]:
        resolved = self._resolve(data, self._clock().isoformat())
        with self._sessions() as session, session.begin():
            row = session.get(UserDocument, user_id)
            if row is None:
                session.add(UserDocument(id=user_id, data=resolved))
            else:
                row.data = resolved
        return copy.deepcopy(resolved)

    def merge_user(self, user_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        resolved = self._resolve(fields, self._clock().isoformat())
        with self._sessions() as session, session.begin():
            row = session.get(UserDocument, user_id)
            if row is None:
                merged = resolved
                session.add(UserDocument(id=user_id, data=merged))
            else:
                merged = {**row.data, **resolved}
                row.data = merged
        logger.debug("Merged fields=%s into user document %s", sorted(fields), user_id)
        return copy.deepcopy(merged)

    def get_draft(self, user_id: str, job_id: str) -> dict[str, Any] | None:
        with self._sessions() as session:
            row = self._draft_row(session, user_id, job_id)
            return copy.deepcopy(row.data) if row is not None else None

    def list_drafts(self, user_id: str) -> list[dict[str, Any]]:
        with self._sessions() as session:
            rows = session.scalars(select(DraftDocument).where(DraftDocument.user_id == user_id)).all()
            drafts = [copy.deepcopy(row.data) for row in rows]
        return sorted(drafts, key=lambda item: item.get("savedAt") or "", reverse=True)

    def merge_draft(self, user_id: str, job_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        resolved = self._resolve(fields, self._clock().isoformat())
        with self._sessions() as session, session.begin():
            row = self._draft_row(session, user_id, job_id)
            if row is None:
                merged = resolved
                session.add(DraftDocument(user_id=user_id, job_id=job_id, data=merged))
            else:
                merged = {**row.data, **resolved}
                row.data = merged
        return copy.deepcopy(merged)

    def delete_draft(self, user_id: str, job_id: str) -> bool:
        with self._sessions() as session, session.begin():
            result = session.execute(
                delete(DraftDocument).where(
                    DraftDocument.user_id == user_id,
                    DraftDocument.job_id == job_id,
                )
            )
        return bool(result.rowcount)

    @staticmethod
    def _draft_row(session: Session, user_id: str, job_id: str) -> DraftDocument | None:
        return session.scalar(
            select(DraftDocument).where(
                DraftDocument.user_id == user_id,
                DraftDocument.job_id == job_id,
            )
        )

    @classmethod
    def _resolve(cls, value: Any, now: str) -> Any:
        if value is SERVER_TIMESTAMP:
            return now
        if isinstance(value, dict):
            return {key: cls._resolve(item, now) for key, item in value.items()}
        if isinstance(value, list):
            return [cls._resolve(item, now) for item in value]
        return value
