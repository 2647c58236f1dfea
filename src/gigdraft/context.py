from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from gigdraft.config import Settings, get_settings
from gigdraft.core.text_extraction import PdfTextExtractor
from gigdraft.db.documents import DocumentStore
from gigdraft.db.init import ensure_data_directories, init_database
from gigdraft.db.session import create_db_engine, create_session_factory
from gigdraft.llm.providers import CompletionClient
from gigdraft.storage.objects import LocalObjectStore


@dataclass(slots=True)
class AppContext:
    """Collaborators shared by every request, built once at process start."""

    settings: Settings
    engine: Engine
    sessions: sessionmaker[Session]
    documents: DocumentStore
    objects: LocalObjectStore
    extractor: PdfTextExtractor
    completion: CompletionClient

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> AppContext:
        settings = settings or get_settings()
        ensure_data_directories(settings)
        engine = create_db_engine(settings.database_url)
        init_database(engine)
        sessions = create_session_factory(engine)
        return cls(
            settings=settings,
            engine=engine,
            sessions=sessions,
            documents=DocumentStore(sessions),
            objects=LocalObjectStore(settings.storage_dir),
            extractor=PdfTextExtractor(
                timeout_sec=settings.pdf_extract_timeout_sec,
                max_chars=settings.resume_max_chars,
            ),
            completion=CompletionClient.from_settings(settings),
        )
