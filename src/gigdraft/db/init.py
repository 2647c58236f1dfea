from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine

from gigdraft.config import Settings
from gigdraft.db.base import Base
from gigdraft.db import models  # noqa: F401


def ensure_data_directories(settings: Settings) -> None:
    paths: list[Path] = [settings.data_dir, settings.storage_dir]
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database(engine: Engine) -> list[str]:
    Base.metadata.create_all(bind=engine)
    return sorted(Base.metadata.tables)
