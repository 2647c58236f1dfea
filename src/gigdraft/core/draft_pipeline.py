from __future__ import annotations

import logging

from pydantic import ValidationError as SchemaValidationError

from gigdraft.db.documents import DocumentStore
from gigdraft.errors import (
    GigdraftError,
    InternalError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from gigdraft.llm.prompts import build_draft_prompt
from gigdraft.llm.providers import CompletionClient
from gigdraft.types import ApprovedProfile, DraftRequest, DraftResult, JobDetails

logger = logging.getLogger(__name__)


def validate_draft_request(request: DraftRequest) -> tuple[str, JobDetails]:
    user_id = (request.user_id or "").strip()
    if not user_id:
        raise ValidationError("userId is required")

    job = request.job_details
    if job is None or not (job.description or "").strip() or not job.skills:
        raise ValidationError("jobDetails with description and skills is required")
    return user_id, job


class DraftGenerator:
    def __init__(self, *, documents: DocumentStore, completion: CompletionClient):
        self.documents = documents
        self.completion = completion

    def load_approved_profile(self, user_id: str) -> ApprovedProfile:
        user_data = self.documents.get_user(user_id)
        if user_data is None:
            raise NotFoundError("User profile not found")

        approved = user_data.get("approvedProfileData")
        if not approved:
            raise PreconditionError(
                "User profile has not been approved yet. Please complete profile verification."
            )

        try:
            return ApprovedProfile.model_validate(approved)
        except SchemaValidationError as exc:
            raise InternalError("Stored approved profile is invalid", details=str(exc)) from exc

    def generate(self, request: DraftRequest) -> DraftResult:
        user_id, job = validate_draft_request(request)
        try:
            profile = self.load_approved_profile(user_id)
        except GigdraftError:
            raise
        except Exception as exc:
            logger.exception("Loading approved profile failed for user %s", user_id)
            raise InternalError("Failed to generate application draft", details=str(exc) or "Unknown error") from exc

        logger.info("Generating application draft for user %s", user_id)
        try:
            prompt = build_draft_prompt(job, profile)
            response = self.completion.complete_text(prompt)
        except Exception as exc:
            logger.exception("Application draft generation failed for user %s", user_id)
            details = exc.message if isinstance(exc, GigdraftError) else str(exc)
            raise InternalError("Failed to generate application draft", details=details or "Unknown error") from exc

        logger.info("Application draft generated for user %s", user_id)
        return DraftResult(draft=response.content, user_id=user_id, job_title=job.title)
