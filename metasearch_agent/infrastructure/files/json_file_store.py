from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ValidationError as PydanticValidationError

from metasearch_agent.application.ports.file_store_port import FileStorePort
from metasearch_agent.domain.errors import FileStoreError
from metasearch_agent.domain.models import UploadedFile


class ExtractedContent(BaseModel):
    """``<id>-extracted.json`` written by the upload step."""

    title: str
    contents: list[str]


class PrecomputedEmbeddings(BaseModel):
    """``<id>-embeddings.json`` written by the upload step."""

    embeddings: list[list[float]]


@dataclass
class JsonFileStore(FileStorePort):
    upload_dir: str = "uploads"

    def load(self, file_id: str) -> UploadedFile:
        if not file_id or Path(file_id).name != file_id:
            raise FileStoreError(file_id, "invalid file id")

        base = Path(self.upload_dir) / file_id
        content = self._read(file_id, Path(f"{base}-extracted.json"), ExtractedContent)
        vectors = self._read(file_id, Path(f"{base}-embeddings.json"), PrecomputedEmbeddings)

        try:
            return UploadedFile(
                file_id=file_id,
                title=content.title,
                chunks=tuple(content.contents),
                embeddings=tuple(tuple(v) for v in vectors.embeddings),
            )
        except ValueError as ex:
            raise FileStoreError(file_id, str(ex)) from ex

    @staticmethod
    def _read(file_id: str, path: Path, model: type[BaseModel]):  # type: ignore[no-untyped-def]
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return model.model_validate(raw)
        except FileNotFoundError as ex:
            raise FileStoreError(file_id, f"missing {path.name}") from ex
        except (OSError, ValueError, PydanticValidationError) as ex:
            raise FileStoreError(file_id, f"corrupt {path.name}: {ex}") from ex
