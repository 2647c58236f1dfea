from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from gigdraft.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class LocalObjectStore:
    """Binary objects addressed by slash-separated keys under a root directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def upload(self, object_path: str, data: bytes) -> Path:
        target = self._resolve(object_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(target.name + ".part")
        tmp.write_bytes(data)
        tmp.replace(target)
        logger.info("Stored object %s (%d bytes)", object_path, len(data))
        return target

    def download(self, object_path: str) -> bytes:
        target = self._resolve(object_path)
        if not target.is_file():
            raise NotFoundError(f"Object not found: {object_path}")
        return target.read_bytes()

    def exists(self, object_path: str) -> bool:
        return self._resolve(object_path).is_file()

    def _resolve(self, object_path: str) -> Path:
        key = PurePosixPath(object_path)
        if not object_path or key.is_absolute() or ".." in key.parts:
            raise ValidationError(f"Invalid object path: {object_path!r}")
        return self.root.joinpath(*key.parts)
