"""Tests for PageFetcher using httpx.MockTransport."""

import httpx

from adsintel.integrations.crawler import PageFetcher

PAGE_HTML = "<html><head><title>Acme</title></head><body><h1>Hello</h1></body></html>"


def make_fetcher(handler, **kwargs) -> PageFetcher:
    return PageFetcher(timeout=5.0, transport=httpx.MockTransport(handler), **kwargs)


class TestFetch:
    async def test_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=PAGE_HTML)

        result = await make_fetcher(handler, user_agent="adsintel-test").fetch(
            "https://acme.example"
        )

        assert result.success is True
        assert result.html == PAGE_HTML
        assert result.status_code == 200
        assert seen[0].headers["User-Agent"] == "adsintel-test"

    async def test_follows_redirects(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "https://acme.example/new"})
            return httpx.Response(200, text=PAGE_HTML)

        result = await make_fetcher(handler).fetch("https://acme.example/old")

        assert result.success is True
        assert result.final_url == "https://acme.example/new"

    async def test_http_error(self) -> None:
        result = await make_fetcher(lambda request: httpx.Response(404)).fetch(
            "https://acme.example/missing"
        )

        assert result.success is False
        assert result.status_code == 404
        assert result.error == "HTTP 404"

    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        fetcher = make_fetcher(handler)
        result = await fetcher.fetch("https://down.example")

        assert result.success is False
        assert "Connection refused" in result.error
        assert fetcher.circuit_breaker.failure_count == 1

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        result = await make_fetcher(handler).fetch("https://slow.example")

        assert result.success is False
        assert result.error == "Request timed out after 5.0s"

    async def test_body_truncated(self) -> None:
        result = await make_fetcher(
            lambda request: httpx.Response(200, text="x" * 500), max_bytes=100
        ).fetch("https://big.example")

        assert result.success is True
        assert len(result.html) == 100
