"""
Local filesystem storage for uploaded documents.

Files are stored under a base directory with generated names; the database
keeps the path relative to that directory.
"""
import hashlib
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    relative_path: str
    size: int
    checksum: str


class DocumentStorage:
    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()

    def _resolve(self, relative_path: str) -> Path:
        path = (self.base_path / relative_path).resolve()
        if self.base_path not in path.parents:
            raise ValueError(f"Path escapes document storage: {relative_path}")
        return path

    def save(self, content: bytes, original_name: str) -> StoredFile:
        ext = Path(original_name or "").suffix.lower()[:16]
        relative = f"{uuid.uuid4().hex[:2]}/{uuid.uuid4().hex}{ext}"
        path = self._resolve(relative)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(content)
        logger.info("Stored document file %s (%s bytes)", relative, len(content))
        return StoredFile(
            relative_path=relative,
            size=len(content),
            checksum=hashlib.sha256(content).hexdigest(),
        )

    def path_for(self, relative_path: str) -> Path:
        return self._resolve(relative_path)

    def exists(self, relative_path: str) -> bool:
        return self._resolve(relative_path).is_file()

    def delete(self, relative_path: str) -> None:
        """Remove a stored file. A missing file is not an error."""
        path = self._resolve(relative_path)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("Document file already missing: %s", relative_path)
