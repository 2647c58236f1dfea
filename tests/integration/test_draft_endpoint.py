from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from gigdraft.api.app import create_app
from gigdraft.errors import GenerationError

JOB = {"title": "Dashboard rebuild", "description": "Rebuild our dashboard in React.", "skills": ["React", "AWS"]}


def _post(client, data):
    return client.post("/generateApplicationDraft", json={"data": data})


def test_preflight_returns_no_content(client) -> None:
    response = client.options("/generateApplicationDraft")
    assert response.status_code == 204
    assert response.content == b""


def test_cors_preflight_allows_any_origin(client) -> None:
    response = client.options(
        "/generateApplicationDraft",
        headers={"Origin": "https://app.example.com", "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 204
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("method", ["get", "put", "delete", "patch"])
def test_other_methods_are_not_allowed(client, method) -> None:
    response = getattr(client, method)("/generateApplicationDraft")
    assert response.status_code == 405
    assert response.json() == {"error": {"message": "Method not allowed"}}


def test_missing_user_id_is_400(client, completion) -> None:
    response = _post(client, {"jobDetails": JOB})
    assert response.status_code == 400
    assert "userId" in response.json()["error"]["message"]
    assert completion.prompts == []


def test_missing_data_envelope_is_400(client) -> None:
    response = client.post("/generateApplicationDraft", json={})
    assert response.status_code == 400


@pytest.mark.parametrize("field", ["description", "skills"])
def test_missing_job_field_is_400(client, field) -> None:
    job = {key: value for key, value in JOB.items() if key != field}
    response = _post(client, {"userId": "u1", "jobDetails": job})
    assert response.status_code == 400
    assert "jobDetails" in response.json()["error"]["message"]


def test_malformed_body_is_400(client) -> None:
    response = client.post(
        "/generateApplicationDraft",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_unknown_user_is_404(client) -> None:
    response = _post(client, {"userId": "ghost", "jobDetails": JOB})
    assert response.status_code == 404
    assert response.json() == {"error": {"message": "User profile not found"}}


def test_unapproved_profile_is_412(client, context) -> None:
    context.documents.merge_user("u1", {"aiProfileData": {"skills": ["React"]}})
    response = _post(client, {"userId": "u1", "jobDetails": JOB})
    assert response.status_code == 412
    assert "verification" in response.json()["error"]["message"]


def test_successful_generation_envelope(client, context, completion, approved_profile) -> None:
    context.documents.merge_user("u1", {"approvedProfileData": approved_profile})
    completion.content = "Hi there, I read your brief..."

    response = client.post(
        "/generateApplicationDraft",
        json={"data": {"userId": "u1", "jobDetails": JOB}},
        headers={"Origin": "https://app.example.com"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json() == {
        "data": {
            "success": True,
            "draft": "Hi there, I read your brief...",
            "userId": "u1",
            "jobTitle": "Dashboard rebuild",
        }
    }
    prompt = completion.prompts[0]
    assert "Rebuild our dashboard in React." in prompt
    assert "[Briefly mention a relevant past project similar to this one]" in prompt


def test_generation_failure_is_500_with_details(client, context, completion, approved_profile) -> None:
    context.documents.merge_user("u1", {"approvedProfileData": approved_profile})
    completion.error = GenerationError("Generative model request failed")

    response = _post(client, {"userId": "u1", "jobDetails": JOB})

    assert response.status_code == 500
    assert response.json() == {
        "error": {
            "message": "Failed to generate application draft",
            "details": "Generative model request failed",
        }
    }


def test_store_failure_is_500_envelope(client, context, completion, monkeypatch) -> None:
    def offline(user_id):
        raise RuntimeError("db offline")

    monkeypatch.setattr(context.documents, "get_user", offline)

    response = _post(client, {"userId": "u1", "jobDetails": JOB})

    assert response.status_code == 500
    assert response.json() == {
        "error": {"message": "Failed to generate application draft", "details": "db offline"}
    }
    assert completion.prompts == []


def test_unhandled_route_error_renders_envelope(context, monkeypatch) -> None:
    def offline(user_id):
        raise RuntimeError("db offline")

    monkeypatch.setattr(context.documents, "get_user", offline)
    client = TestClient(create_app(context), raise_server_exceptions=False)

    response = client.get("/api/profile", headers={"X-User-Id": "u1"})

    assert response.status_code == 500
    assert response.json() == {"error": {"message": "Internal server error"}}
