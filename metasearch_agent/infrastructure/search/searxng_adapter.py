"""SearxNG metasearch adapter.

Queries a SearxNG instance through its JSON API (/search?format=json) and
maps the results to domain SearchResults.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from metasearch_agent.application.ports.search_port import SearchPort
from metasearch_agent.domain.errors import SearchError
from metasearch_agent.domain.models import SearchResponse, SearchResult


class SearxResultModel(BaseModel):
    """One entry of SearxNG's ``results`` array (extra keys ignored)."""

    url: str
    title: str = ""
    content: str | None = None
    img_src: str | None = None
    thumbnail_src: str | None = None


class SearxResponseModel(BaseModel):
    results: list[SearxResultModel] = []
    suggestions: list[str] = []


@dataclass
class SearxNGSearchAdapter(SearchPort):
    base_url: str = "http://localhost:8080"
    timeout_s: float = 15.0
    transport: httpx.AsyncBaseTransport | None = None  # injected in tests

    async def search(
        self, query: str, language: str = "en", engines: Sequence[str] = ()
    ) -> SearchResponse:
        params: dict[str, Any] = {"q": query, "format": "json", "language": language}
        if engines:
            params["engines"] = ",".join(engines)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get("/search", params=params)
                resp.raise_for_status()
                payload = SearxResponseModel.model_validate(resp.json())
        except httpx.HTTPError as ex:
            raise SearchError(f"SearxNG request failed: {ex}") from ex
        except (ValueError, PydanticValidationError) as ex:
            raise SearchError(f"SearxNG returned an invalid payload: {ex}") from ex

        results = [
            SearchResult(
                title=r.title,
                url=r.url,
                content=r.content or None,
                image_url=r.img_src or r.thumbnail_src or None,
            )
            for r in payload.results
        ]
        return SearchResponse(results=results, suggestions=list(payload.suggestions))
