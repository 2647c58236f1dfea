"""Résumé processing: stored PDF -> text -> model extraction -> user document.

Both entry points, the object-finalized hook and the manual trigger, call
``ResumeProcessor.process`` directly.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import ValidationError as SchemaValidationError

from gigdraft.core.text_extraction import PdfTextExtractor
from gigdraft.db.documents import SERVER_TIMESTAMP, DocumentStore
from gigdraft.errors import (
    EmptyContentError,
    MalformedAIResponseError,
    NotFoundError,
    UnauthenticatedError,
)
from gigdraft.llm.prompts import build_resume_prompt
from gigdraft.llm.providers import CompletionClient, parse_json_object
from gigdraft.storage.objects import LocalObjectStore
from gigdraft.types import PROFILE_SOURCE, ProcessingResult, StructuredProfile

logger = logging.getLogger(__name__)

RESUME_PATH_PATTERN = re.compile(r"^resumes/([^/]+)/resume\.pdf$")


def resume_path_for(user_id: str) -> str:
    return f"resumes/{user_id}/resume.pdf"


def match_resume_path(object_path: str | None) -> str | None:
    if not object_path:
        return None
    match = RESUME_PATH_PATTERN.match(object_path)
    if match is None or match.group(1) in (".", ".."):
        return None
    return match.group(1)


class ResumeProcessor:
    def __init__(
        self,
        *,
        documents: DocumentStore,
        objects: LocalObjectStore,
        extractor: PdfTextExtractor,
        completion: CompletionClient,
    ):
        self.documents = documents
        self.objects = objects
        self.extractor = extractor
        self.completion = completion

    def handle_object_finalized(self, object_path: str | None) -> ProcessingResult | None:
        user_id = match_resume_path(object_path)
        if user_id is None:
            logger.debug("Ignoring finalized object %s: not a resume upload", object_path)
            return None
        return self.process(user_id, object_path)

    def process_for_caller(self, user_id: str | None) -> ProcessingResult:
        if not user_id:
            raise UnauthenticatedError("The request must be made by an authenticated user.")

        object_path = resume_path_for(user_id)
        if not self.objects.exists(object_path):
            raise NotFoundError("Resume file not found. Please upload a resume first.")

        logger.info("Manual resume processing requested for user %s", user_id)
        return self.process(user_id, object_path)

    def process(self, user_id: str, object_path: str) -> ProcessingResult:
        logger.info("Processing resume for user %s", user_id)
        try:
            profile_data = self._extract_profile(object_path)
            self.documents.merge_user(
                user_id,
                {
                    "aiProfileData": profile_data,
                    "resumeProcessedAt": SERVER_TIMESTAMP,
                    "resumeProcessingError": None,
                },
            )
        except Exception as exc:
            logger.error("Resume processing failed for user %s: %s", user_id, exc)
            self._record_failure(user_id, exc)
            raise

        logger.info("Saved AI profile data for user %s", user_id)
        return ProcessingResult(user_id=user_id)

    def _extract_profile(self, object_path: str) -> dict[str, Any]:
        payload = self.objects.download(object_path)
        text = self.extractor.extract(payload)
        if not text.strip():
            raise EmptyContentError("No text could be extracted from the PDF")

        response = self.completion.complete_text(build_resume_prompt(text))
        data = parse_json_object(response.content)
        try:
            profile = StructuredProfile.model_validate(data)
        except SchemaValidationError as exc:
            logger.error(
                "Model output does not match the profile schema: %s\n--- raw response ---\n%s",
                exc,
                response.content,
            )
            raise MalformedAIResponseError("AI response did not match the expected profile schema") from exc

        profile_data = profile.model_dump(by_alias=True)
        profile_data["processedAt"] = SERVER_TIMESTAMP
        profile_data["source"] = PROFILE_SOURCE
        return profile_data

    def _record_failure(self, user_id: str, exc: Exception) -> None:
        message = getattr(exc, "message", None) or str(exc) or "Unknown error"
        try:
            self.documents.merge_user(
                user_id,
                {"resumeProcessingError": {"message": message, "timestamp": SERVER_TIMESTAMP}},
            )
        except Exception:
            logger.exception("Failed to save processing error for user %s", user_id)
