from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel

DraftStatus = Literal["draft_saved", "applied"]
WorkLocationPreference = Literal["remote", "hybrid", "onsite"]

PROFILE_SOURCE = "gemini-ai"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(CamelModel):
    name: StrictStr | None = None
    email: StrictStr | None = None
    phone: StrictStr | None = None
    location: StrictStr | None = None


class WorkExperience(CamelModel):
    company: StrictStr | None = None
    position: StrictStr | None = None
    duration: StrictStr | None = None
    description: StrictStr | None = None


class Education(CamelModel):
    institution: StrictStr | None = None
    degree: StrictStr | None = None
    duration: StrictStr | None = None


class StructuredProfile(CamelModel):
    """Profile fields extracted from a résumé by the model.

    Every field may be absent or null. String fields are strict: a value of the
    wrong JSON type is rejected rather than converted.
    """

    personal_info: PersonalInfo | None = None
    skills: list[StrictStr] | None = None
    work_experience: list[WorkExperience] | None = None
    education: list[Education] | None = None
    summary: StrictStr | None = None


class JobPreferences(CamelModel):
    target_roles: list[str] = Field(default_factory=list)
    minimum_rate: float | None = None
    rate_currency: str = "USD"
    work_location_preference: WorkLocationPreference = "remote"
    preferred_location: str | None = None


class ApprovedProfile(StructuredProfile):
    job_preferences: JobPreferences | None = None
    verified_at: str | None = None


class ModelResponse(BaseModel):
    content: str
    raw: dict[str, Any] = Field(default_factory=dict)


class ProcessingResult(CamelModel):
    success: bool = True
    user_id: str
    message: str = "Resume processed successfully"


class JobDetails(CamelModel):
    title: str | None = None
    description: str | None = None
    skills: list[str] | None = None


class DraftRequest(CamelModel):
    user_id: str | None = None
    job_details: JobDetails | None = None


class DraftResult(CamelModel):
    success: bool = True
    draft: str
    user_id: str
    job_title: str | None = None


class BudgetSnapshot(CamelModel):
    min: float | None = None
    max: float | None = None
    currency: str = "USD"


class ApplicationDraft(CamelModel):
    job_id: str
    job_title: str = ""
    draft_text: str
    status: DraftStatus = "draft_saved"
    saved_at: str | None = None
    applied_at: str | None = None
    job_budget_snapshot: BudgetSnapshot = Field(default_factory=BudgetSnapshot)
    job_skills_snapshot: list[str] = Field(default_factory=list)


class JobSyncResult(BaseModel):
    fetched: int = 0
    stored: int = 0
    errors: int = 0
