from __future__ import annotations

import logging
from typing import Any

from gigdraft.db.documents import SERVER_TIMESTAMP, DocumentStore
from gigdraft.db.models import JobPosting
from gigdraft.errors import NotFoundError, ValidationError
from gigdraft.types import ApplicationDraft, ApprovedProfile

logger = logging.getLogger(__name__)


def approve_profile(documents: DocumentStore, user_id: str, profile: ApprovedProfile) -> dict[str, Any]:
    payload = profile.model_dump(by_alias=True, exclude={"verified_at"})
    payload["verifiedAt"] = SERVER_TIMESTAMP
    merged = documents.merge_user(user_id, {"approvedProfileData": payload})
    logger.info("Approved profile for user %s", user_id)
    return merged["approvedProfileData"]


def save_draft(documents: DocumentStore, user_id: str, job: JobPosting, draft_text: str) -> ApplicationDraft:
    """Create or overwrite the caller's draft for ``job``.

    Re-saving keeps an ``applied`` status; only ``mark_applied`` changes it.
    """
    if not draft_text or not draft_text.strip():
        raise ValidationError("draftText is required")

    job_id = str(job.id)
    fields: dict[str, Any] = {
        "jobId": job_id,
        "jobTitle": job.title,
        "draftText": draft_text,
        "savedAt": SERVER_TIMESTAMP,
        "jobBudgetSnapshot": {"min": job.budget_min, "max": job.budget_max, "currency": job.currency},
        "jobSkillsSnapshot": list(job.skills or []),
    }
    existing = documents.get_draft(user_id, job_id)
    if existing is None or existing.get("status") != "applied":
        fields["status"] = "draft_saved"

    stored = documents.merge_draft(user_id, job_id, fields)
    logger.info("Saved draft for user %s job %s", user_id, job_id)
    return ApplicationDraft.model_validate(stored)


def mark_applied(documents: DocumentStore, user_id: str, job_id: str) -> ApplicationDraft:
    existing = documents.get_draft(user_id, job_id)
    if existing is None:
        raise NotFoundError(f"No saved draft for job {job_id}")
    if existing.get("status") == "applied":
        return ApplicationDraft.model_validate(existing)

    stored = documents.merge_draft(user_id, job_id, {"status": "applied", "appliedAt": SERVER_TIMESTAMP})
    return ApplicationDraft.model_validate(stored)


def list_drafts(documents: DocumentStore, user_id: str) -> list[ApplicationDraft]:
    return [ApplicationDraft.model_validate(item) for item in documents.list_drafts(user_id)]


def remove_draft(documents: DocumentStore, user_id: str, job_id: str) -> None:
    if not documents.delete_draft(user_id, job_id):
        raise NotFoundError(f"No saved draft for job {job_id}")
