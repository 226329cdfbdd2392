import httpx
import pytest

from metasearch_agent.domain.errors import SearchError
from metasearch_agent.infrastructure.search.searxng_adapter import SearxNGSearchAdapter


def _adapter(handler) -> SearxNGSearchAdapter:
    return SearxNGSearchAdapter(
        base_url="http://searx.test", timeout_s=1.0, transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_search_maps_results_and_sends_params():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "results": [
                    {
                        "url": "https://a.example",
                        "title": "A",
                        "content": "snippet a",
                        "img_src": "https://a.example/i.png",
                        "engine": "bing",
                    },
                    {"url": "https://b.example", "title": "B", "thumbnail_src": "t.png"},
                    {"url": "https://c.example", "content": ""},
                ],
                "suggestions": ["a b"],
            },
        )

    resp = await _adapter(handler).search("solar", engines=["bing", "reddit"])

    params = seen[0].url.params
    assert seen[0].url.path == "/search"
    assert params["q"] == "solar"
    assert params["format"] == "json"
    assert params["language"] == "en"
    assert params["engines"] == "bing,reddit"

    assert [r.url for r in resp.results] == [
        "https://a.example",
        "https://b.example",
        "https://c.example",
    ]
    assert resp.results[0].content == "snippet a"
    assert resp.results[0].image_url == "https://a.example/i.png"
    assert resp.results[1].image_url == "t.png"
    assert resp.results[1].content is None
    assert resp.results[2].content is None
    assert resp.results[2].title == ""
    assert resp.suggestions == ["a b"]


@pytest.mark.asyncio
async def test_no_engines_param_when_none_given():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"results": []})

    resp = await _adapter(handler).search("q")

    assert "engines" not in seen[0].url.params
    assert resp.results == []


@pytest.mark.asyncio
async def test_http_error_becomes_search_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(SearchError):
        await _adapter(handler).search("q")


@pytest.mark.asyncio
async def test_connection_error_becomes_search_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(SearchError):
        await _adapter(handler).search("q")


@pytest.mark.asyncio
async def test_invalid_payload_becomes_search_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(SearchError):
        await _adapter(handler).search("q")


@pytest.mark.asyncio
async def test_result_without_url_is_invalid():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": [{"title": "no url"}]})

    with pytest.raises(SearchError):
        await _adapter(handler).search("q")
