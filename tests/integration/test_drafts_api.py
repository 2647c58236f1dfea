from __future__ import annotations

from datetime import UTC, datetime

import pytest

from gigdraft.db.repositories import JobRepository

HEADERS = {"X-User-Id": "u1"}


@pytest.fixture
def job_id(context) -> int:
    with context.sessions() as db:
        job = JobRepository(db).upsert_job(
            {
                "source_id": "101",
                "title": "Dashboard rebuild",
                "description": "Rebuild our dashboard",
                "skills": ["React", "AWS"],
                "currency": "USD",
                "budget_min": 100.0,
                "budget_max": 500.0,
                "posted_at": datetime(2025, 1, 1, tzinfo=UTC),
            }
        )
        return job.id


def test_jobs_are_listed_and_fetched(client, job_id) -> None:
    listing = client.get("/api/jobs")
    assert listing.status_code == 200
    assert [item["id"] for item in listing.json()] == [job_id]
    assert listing.json()[0]["budgetMin"] == 100.0

    detail = client.get(f"/api/jobs/{job_id}")
    assert detail.json()["skills"] == ["React", "AWS"]
    assert client.get("/api/jobs/999").status_code == 404


def test_approve_profile_then_generate(client, completion, approved_profile, job_id) -> None:
    response = client.put("/api/profile/approved", json=approved_profile, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["data"]["verifiedAt"]

    completion.content = "Hi there"
    draft = client.post(
        "/generateApplicationDraft",
        json={"data": {"userId": "u1", "jobDetails": {"description": "Rebuild", "skills": ["React"]}}},
    )
    assert draft.status_code == 200
    assert draft.json()["data"]["jobTitle"] is None


def test_draft_save_overwrite_apply_and_delete(client, job_id) -> None:
    first = client.put(f"/api/drafts/{job_id}", json={"draftText": "first"}, headers=HEADERS)
    assert first.status_code == 200
    assert first.json()["data"]["status"] == "draft_saved"
    assert first.json()["data"]["jobBudgetSnapshot"] == {"min": 100.0, "max": 500.0, "currency": "USD"}

    client.put(f"/api/drafts/{job_id}", json={"draftText": "second"}, headers=HEADERS)
    drafts = client.get("/api/drafts", headers=HEADERS).json()["data"]
    assert len(drafts) == 1
    assert drafts[0]["draftText"] == "second"

    applied = client.post(f"/api/drafts/{job_id}/applied", headers=HEADERS)
    assert applied.json()["data"]["status"] == "applied"

    edited = client.put(f"/api/drafts/{job_id}", json={"draftText": "third"}, headers=HEADERS)
    assert edited.json()["data"]["status"] == "applied"
    assert edited.json()["data"]["draftText"] == "third"

    assert client.delete(f"/api/drafts/{job_id}", headers=HEADERS).status_code == 204
    assert client.get("/api/drafts", headers=HEADERS).json()["data"] == []
    assert client.delete(f"/api/drafts/{job_id}", headers=HEADERS).status_code == 404


def test_saving_draft_for_unknown_job_is_404(client) -> None:
    response = client.put("/api/drafts/999", json={"draftText": "x"}, headers=HEADERS)
    assert response.status_code == 404


def test_drafts_require_identity(client) -> None:
    assert client.get("/api/drafts").status_code == 401


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}
