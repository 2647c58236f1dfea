from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from gigdraft.api.deps import get_caller_id, get_context, get_db, get_optional_caller_id
from gigdraft.api.schemas import (
    DraftEnvelope,
    DraftListEnvelope,
    DraftRequestEnvelope,
    DraftResponseEnvelope,
    DraftSaveRequest,
    JobResponse,
    ProcessingEnvelope,
    UploadEnvelope,
    UploadResult,
    UserDocumentEnvelope,
)
from gigdraft.context import AppContext
from gigdraft.core import applications
from gigdraft.core.draft_pipeline import DraftGenerator
from gigdraft.core.resume_pipeline import ResumeProcessor, resume_path_for
from gigdraft.db.repositories import JobRepository
from gigdraft.errors import GigdraftError, NotFoundError, ValidationError
from gigdraft.types import ApprovedProfile, DraftRequest

logger = logging.getLogger(__name__)

DRAFT_ENDPOINT = "/generateApplicationDraft"

router = APIRouter(tags=["drafts"])
api_router = APIRouter(prefix="/api", tags=["api"])


def resume_processor(context: AppContext = Depends(get_context)) -> ResumeProcessor:
    return ResumeProcessor(
        documents=context.documents,
        objects=context.objects,
        extractor=context.extractor,
        completion=context.completion,
    )


def draft_generator(context: AppContext = Depends(get_context)) -> DraftGenerator:
    return DraftGenerator(documents=context.documents, completion=context.completion)


@router.post(DRAFT_ENDPOINT, response_model=DraftResponseEnvelope)
def generate_application_draft(
    payload: DraftRequestEnvelope,
    generator: DraftGenerator = Depends(draft_generator),
) -> DraftResponseEnvelope:
    result = generator.generate(payload.data or DraftRequest())
    return DraftResponseEnvelope(data=result)


@api_router.put("/resume", response_model=UploadEnvelope, status_code=201)
async def upload_resume(
    request: Request,
    caller_id: str = Depends(get_caller_id),
    context: AppContext = Depends(get_context),
    processor: ResumeProcessor = Depends(resume_processor),
) -> UploadEnvelope:
    body = await request.body()
    if not body:
        raise ValidationError("Request body must contain the resume PDF")

    object_path = resume_path_for(caller_id)
    await run_in_threadpool(context.objects.upload, object_path, body)
    try:
        await run_in_threadpool(processor.handle_object_finalized, object_path)
    except GigdraftError as exc:
        return UploadEnvelope(data=UploadResult(object_path=object_path, processed=False, error=exc.message))
    return UploadEnvelope(data=UploadResult(object_path=object_path, processed=True))


@api_router.post("/resume/process", response_model=ProcessingEnvelope)
def process_resume(
    caller_id: str | None = Depends(get_optional_caller_id),
    processor: ResumeProcessor = Depends(resume_processor),
) -> ProcessingEnvelope:
    return ProcessingEnvelope(data=processor.process_for_caller(caller_id))


@api_router.get("/profile", response_model=UserDocumentEnvelope)
def get_profile(
    caller_id: str = Depends(get_caller_id),
    context: AppContext = Depends(get_context),
) -> UserDocumentEnvelope:
    data = context.documents.get_user(caller_id)
    if data is None:
        raise NotFoundError("User profile not found")
    return UserDocumentEnvelope(data=data)


@api_router.put("/profile/approved", response_model=UserDocumentEnvelope)
def approve_profile(
    payload: ApprovedProfile,
    caller_id: str = Depends(get_caller_id),
    context: AppContext = Depends(get_context),
) -> UserDocumentEnvelope:
    approved = applications.approve_profile(context.documents, caller_id, payload)
    return UserDocumentEnvelope(data=approved)


@api_router.get("/drafts", response_model=DraftListEnvelope)
def list_drafts(
    caller_id: str = Depends(get_caller_id),
    context: AppContext = Depends(get_context),
) -> DraftListEnvelope:
    return DraftListEnvelope(data=applications.list_drafts(context.documents, caller_id))


@api_router.put("/drafts/{job_id}", response_model=DraftEnvelope)
def save_draft(
    job_id: int,
    payload: DraftSaveRequest,
    caller_id: str = Depends(get_caller_id),
    context: AppContext = Depends(get_context),
    db: Session = Depends(get_db),
) -> DraftEnvelope:
    job = JobRepository(db).get_job(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    draft = applications.save_draft(context.documents, caller_id, job, payload.draft_text)
    return DraftEnvelope(data=draft)


@api_router.post("/drafts/{job_id}/applied", response_model=DraftEnvelope)
def mark_draft_applied(
    job_id: str,
    caller_id: str = Depends(get_caller_id),
    context: AppContext = Depends(get_context),
) -> DraftEnvelope:
    return DraftEnvelope(data=applications.mark_applied(context.documents, caller_id, job_id))


@api_router.delete("/drafts/{job_id}", status_code=204)
def delete_draft(
    job_id: str,
    caller_id: str = Depends(get_caller_id),
    context: AppContext = Depends(get_context),
) -> None:
    applications.remove_draft(context.documents, caller_id, job_id)


@api_router.get("/jobs", response_model=list[JobResponse])
def list_jobs(limit: int = 50, db: Session = Depends(get_db)) -> list[JobResponse]:
    return [JobResponse.model_validate(row) for row in JobRepository(db).list_jobs(limit=limit)]


@api_router.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)) -> JobResponse:
    job = JobRepository(db).get_job(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    return JobResponse.model_validate(job)
