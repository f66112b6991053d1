import json

import httpx
import pytest

from core.http_client_service import CompletionHTTPClient, HTTPClientService


def _make_service(handler) -> HTTPClientService:
    return HTTPClientService(transport=httpx.MockTransport(handler), max_concurrency=2)


@pytest.mark.asyncio
class TestHTTPClientService:
    async def test_successful_post_returns_response_and_increments_request_count(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "ok"})

        service = _make_service(handler)
        response = await service.post_json("http://example.com/api", {"key": "value"})

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert service.request_count == 1
        await service.aclose()

    async def test_statistics_track_total_and_successful_requests(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": True})

        service = _make_service(handler)
        await service.post_json("http://example.com/a", {})
        await service.post_json("http://example.com/b", {})

        statistics = service.get_statistics()
        assert statistics["total_requests"] == 2
        assert statistics["successful_requests"] == 2
        assert statistics["failed_requests"] == 0
        assert statistics["success_rate"] == 100
        await service.aclose()

    async def test_status_error_is_raised_after_a_single_attempt(self) -> None:
        call_count = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal call_count
            call_count += 1
            return httpx.Response(429, json={"error": "rate limited"})

        service = _make_service(handler)
        with pytest.raises(httpx.HTTPStatusError) as exception_info:
            await service.post_json("http://example.com/api", {})

        assert exception_info.value.response.status_code == 429
        assert call_count == 1
        assert service.get_statistics()["failed_requests"] == 1
        await service.aclose()

    async def test_transport_error_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = _make_service(handler)
        with pytest.raises(httpx.ConnectError):
            await service.post_json("http://example.com/api", {})

        statistics = service.get_statistics()
        assert statistics["failed_requests"] == 1
        assert statistics["failure_rate"] == 100
        await service.aclose()

    async def test_empty_statistics_have_zero_rates(self) -> None:
        service = _make_service(lambda request: httpx.Response(200))
        statistics = service.get_statistics()

        assert statistics["success_rate"] == 0
        assert statistics["failure_rate"] == 0
        await service.aclose()


@pytest.mark.asyncio
class TestCompletionHTTPClient:
    async def test_posts_openai_compatible_payload(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"choices": [{"message": {"content": "{}"}}]})

        service = _make_service(handler)
        client = CompletionHTTPClient(service, api_base="http://llm.test/v1/", api_key="secret")
        response = await client.get_completion(
            "model-a",
            [{"role": "user", "content": "hi"}],
            0.2,
            64,
            response_format={"type": "json_object"},
        )

        assert response["choices"][0]["message"]["content"] == "{}"
        (request,) = seen
        assert str(request.url) == "http://llm.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer secret"
        body = json.loads(request.content)
        assert body == {
            "model": "model-a",
            "messages": [{"role": "user", "content": "hi"}],
            "temperature": 0.2,
            "max_tokens": 64,
            "stream": False,
            "response_format": {"type": "json_object"},
        }
        await service.aclose()
