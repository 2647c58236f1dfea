"""Ingest active projects from the Freelancer.com projects API into the job table."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import requests

from gigdraft.db.repositories import JobRepository
from gigdraft.errors import GigdraftError, ValidationError
from gigdraft.types import JobSyncResult

logger = logging.getLogger(__name__)


class FreelancerAPIError(GigdraftError):
    status_code = 502
    code = "upstream-failed"


class FreelancerClient:
    def __init__(self, base_url: str, api_key: str, timeout_sec: int = 30):
        if not base_url or not api_key:
            raise ValidationError("freelancer_api_url and freelancer_api_key must be configured")
        self.base_url = base_url.rstrip("/")
        self.timeout_sec = timeout_sec
        self.session = requests.Session()
        self.session.headers.update({"freelancer-oauth-v1": api_key, "Accept": "application/json"})

    def list_active_projects(self) -> list[dict[str, Any]]:
        payload = self._get("/projects/0.1/projects/active/")
        return (payload.get("result") or {}).get("projects") or []

    def get_project(self, project_id: int | str) -> dict[str, Any] | None:
        payload = self._get(
            f"/projects/0.1/projects/{project_id}/",
            params={"full_description": "true", "job_details": "true"},
        )
        return payload.get("result")

    def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout_sec)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise FreelancerAPIError(f"Freelancer API request failed: {url}", details=str(exc)) from exc


def project_to_job(listing: dict[str, Any], detail: dict[str, Any]) -> dict[str, Any]:
    budget = detail.get("budget") or {}
    currency = (detail.get("currency") or {}).get("code") or "USD"
    submitted = detail.get("time_submitted")
    posted_at = datetime.fromtimestamp(submitted, UTC) if submitted else datetime.now(UTC)
    return {
        "source_id": str(listing["id"]),
        "title": detail.get("title") or "",
        "description": detail.get("description") or "",
        "currency": currency,
        "budget_min": budget.get("minimum"),
        "budget_max": budget.get("maximum"),
        "skills": [job["name"] for job in detail.get("jobs") or [] if job.get("name")],
        "posted_at": posted_at,
        "owner_id": detail.get("owner_id"),
        "type": detail.get("type") or "hourly",
        "status": detail.get("status") or "open",
        "seo_url": listing.get("seo_url"),
        "source": "freelancer_api",
    }


def sync_jobs(client: FreelancerClient, repo: JobRepository, *, replace: bool = True) -> JobSyncResult:
    projects = client.list_active_projects()
    result = JobSyncResult(fetched=len(projects))
    logger.info("Fetched %d active projects", len(projects))
    if not projects:
        return result

    if replace:
        removed = repo.delete_all_jobs()
        logger.info("Removed %d existing jobs", removed)

    for listing in projects:
        project_id = listing.get("id")
        try:
            detail = client.get_project(project_id)
            if not detail:
                logger.warning("No detail data for project %s", project_id)
                result.errors += 1
                continue
            repo.upsert_job(project_to_job(listing, detail))
            result.stored += 1
        except Exception as exc:
            logger.warning("Failed to store project %s: %s", project_id, exc)
            repo.session.rollback()
            result.errors += 1

    logger.info("Job sync complete stored=%d errors=%d", result.stored, result.errors)
    return result
