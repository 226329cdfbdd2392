from __future__ import annotations

from typing import Protocol, runtime_checkable

from metasearch_agent.domain.models import UploadedFile


@runtime_checkable
class FileStorePort(Protocol):
    def load(self, file_id: str) -> UploadedFile:
        """Return the pre-chunked text and per-chunk embeddings of an upload.

        Synchronous: the read is local and fails fast.

        Raises:
            FileStoreError: If the file is missing or its payload is corrupt
        """
        ...
