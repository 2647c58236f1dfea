from __future__ import annotations

from pathlib import Path

import pytest

from gigdraft.errors import NotFoundError, ValidationError
from gigdraft.storage.objects import LocalObjectStore


def test_upload_then_download_round_trip(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path)
    store.upload("resumes/u1/resume.pdf", b"%PDF-1.4 data")

    assert store.exists("resumes/u1/resume.pdf")
    assert store.download("resumes/u1/resume.pdf") == b"%PDF-1.4 data"


def test_reupload_supersedes_previous_object(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path)
    store.upload("resumes/u1/resume.pdf", b"first")
    store.upload("resumes/u1/resume.pdf", b"second")

    assert store.download("resumes/u1/resume.pdf") == b"second"


def test_download_missing_object_raises_not_found(tmp_path: Path) -> None:
    store = LocalObjectStore(tmp_path)
    assert not store.exists("resumes/u1/resume.pdf")
    with pytest.raises(NotFoundError):
        store.download("resumes/u1/resume.pdf")


@pytest.mark.parametrize("path", ["", "/etc/passwd", "resumes/../../secret"])
def test_paths_outside_the_root_are_rejected(tmp_path: Path, path: str) -> None:
    store = LocalObjectStore(tmp_path)
    with pytest.raises(ValidationError):
        store.upload(path, b"x")
