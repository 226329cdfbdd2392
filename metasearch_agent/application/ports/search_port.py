"""Web search port.

Ranked title/url/snippet results from a metasearch backend (SearxNG).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from metasearch_agent.domain.models import SearchResponse


@runtime_checkable
class SearchPort(Protocol):
    async def search(
        self, query: str, language: str = "en", engines: Sequence[str] = ()
    ) -> SearchResponse:
        """Run a web search.

        Args:
            query: Search query text
            language: Result language hint
            engines: Backend engine names; empty means backend defaults

        Returns:
            SearchResponse with results in backend rank order

        Raises:
            SearchError: If the backend is unreachable or answers garbage
        """
        ...
