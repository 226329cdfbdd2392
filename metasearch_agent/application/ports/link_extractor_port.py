from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from metasearch_agent.domain.models import Document


@runtime_checkable
class LinkExtractorPort(Protocol):
    async def extract(self, urls: Sequence[str]) -> list[Document]:
        """Fetch every URL and return its text as one or more chunk documents.

        Chunks of one URL share ``metadata.url`` and come back in page order.

        Raises:
            ExtractionError: If the batch as a whole could not be processed
        """
        ...
