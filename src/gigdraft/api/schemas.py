from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from gigdraft.types import (
    ApplicationDraft,
    CamelModel,
    DraftRequest,
    DraftResult,
    ProcessingResult,
)


class DraftRequestEnvelope(BaseModel):
    data: DraftRequest | None = None


class DraftResponseEnvelope(BaseModel):
    data: DraftResult


class ProcessingEnvelope(BaseModel):
    data: ProcessingResult


class UploadResult(CamelModel):
    uploaded: bool = True
    object_path: str
    processed: bool
    error: str | None = None


class UploadEnvelope(BaseModel):
    data: UploadResult


class UserDocumentEnvelope(BaseModel):
    data: dict[str, Any]


class DraftSaveRequest(CamelModel):
    draft_text: str


class DraftEnvelope(BaseModel):
    data: ApplicationDraft


class DraftListEnvelope(BaseModel):
    data: list[ApplicationDraft]


class JobResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    source_id: str
    title: str
    description: str
    skills: list[str]
    currency: str
    budget_min: float | None = None
    budget_max: float | None = None
    status: str
    type: str
    posted_at: datetime | None = None
    seo_url: str | None = None
    source: str
