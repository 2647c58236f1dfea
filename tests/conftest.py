from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from gigdraft.api.app import create_app
from gigdraft.config import Settings
from gigdraft.context import AppContext
from gigdraft.types import ModelResponse


class FakeCompletion:
    def __init__(self, content: str = "", *, error: Exception | None = None):
        self.content = content
        self.error = error
        self.prompts: list[str] = []

    def complete_text(self, prompt: str) -> ModelResponse:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return ModelResponse(content=self.content)


class FakeExtractor:
    def __init__(self, text: str = ""):
        self.text = text
        self.calls = 0

    def extract(self, data: bytes) -> str:
        self.calls += 1
        return self.text


def build_pdf(text: str = "") -> bytes:
    """Single-page PDF with one line of Helvetica text (no text when empty)."""
    content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1") if text else b""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        (
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>"
        ),
        b"<< /Length " + str(len(content)).encode() + b" >>\nstream\n" + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_offset}\n%%EOF\n".encode()
    return bytes(out)


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        app_env="test",
        database_url="sqlite://",
        data_dir=tmp_path,
        storage_dir=tmp_path / "storage",
        gemini_api_key="test-key",
        pdf_extract_timeout_sec=10,
    )


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def context(settings: Settings, completion: FakeCompletion) -> Generator[AppContext, None, None]:
    ctx = AppContext.from_settings(settings)
    ctx.completion = completion
    yield ctx
    ctx.engine.dispose()


@pytest.fixture
def client(context: AppContext) -> TestClient:
    return TestClient(create_app(context))


@pytest.fixture
def approved_profile() -> dict:
    return {
        "personalInfo": {"name": "Dana Reyes", "email": "dana@example.com", "phone": None, "location": "Lisbon"},
        "skills": ["React", "Node.js"],
        "workExperience": [
            {
                "company": "Acme",
                "position": "Frontend Engineer",
                "duration": "2021 - 2024",
                "description": "Built dashboards in React",
            },
            {"company": "Beta", "position": "Developer", "duration": "2019 - 2021", "description": "APIs"},
            {"company": "Gamma", "position": "Intern", "duration": "2018", "description": "QA"},
            {"company": "Delta", "position": "Tutor", "duration": "2017", "description": "Math"},
        ],
        "education": [{"institution": "Uni Lisboa", "degree": "BSc Computer Science", "duration": "2014 - 2017"}],
        "summary": "Full-stack developer focused on web apps.",
        "jobPreferences": {
            "targetRoles": ["Frontend Developer"],
            "minimumRate": 40,
            "rateCurrency": "USD",
            "workLocationPreference": "remote",
            "preferredLocation": None,
        },
    }


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()
