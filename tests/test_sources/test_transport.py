"""Tests for AiohttpTransport against a local aiohttp test server."""

import asyncio

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from cryptoboard.exceptions import SourceTimeout, SourceUnavailable
from cryptoboard.sources.transport import AiohttpTransport


async def _markets(request: web.Request) -> web.Response:
    return web.json_response([{"id": "bitcoin", "page": request.query.get("page")}])


async def _limited(request: web.Request) -> web.Response:
    return web.json_response({"status": {"error_code": 429}}, status=429)


async def _html(request: web.Request) -> web.Response:
    return web.Response(text="<html>maintenance</html>", content_type="text/html")


async def _bad_bytes(request: web.Request) -> web.Response:
    return web.Response(body=b"\xff\xfe[1, 2]", content_type="application/json")


async def _unknown_charset(request: web.Request) -> web.Response:
    return web.Response(
        body=b"[1, 2]", headers={"Content-Type": "application/json; charset=x-no-such-codec"}
    )


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1.0)
    return web.json_response({})


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/coins/markets", _markets)
    app.router.add_get("/limited", _limited)
    app.router.add_get("/html", _html)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/bad-bytes", _bad_bytes)
    app.router.add_get("/unknown-charset", _unknown_charset)
    test_server = test_utils.TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


@pytest.mark.asyncio
async def test_ok_json_body(server: test_utils.TestServer) -> None:
    transport = AiohttpTransport(timeout_seconds=2)
    try:
        response = await transport.get_json(str(server.make_url("/coins/markets")), {"page": 3})
    finally:
        await transport.close()
    assert response.ok
    assert response.body == [{"id": "bitcoin", "page": "3"}]


@pytest.mark.asyncio
async def test_non_success_status_is_returned(server: test_utils.TestServer) -> None:
    transport = AiohttpTransport(timeout_seconds=2)
    try:
        response = await transport.get_json(str(server.make_url("/limited")))
    finally:
        await transport.close()
    assert not response.ok
    assert response.status == 429


@pytest.mark.asyncio
async def test_non_json_body_is_none(server: test_utils.TestServer) -> None:
    transport = AiohttpTransport(timeout_seconds=2)
    try:
        response = await transport.get_json(str(server.make_url("/html")))
    finally:
        await transport.close()
    assert response.ok
    assert response.body is None


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/bad-bytes", "/unknown-charset"])
async def test_undecodable_body_is_none(server: test_utils.TestServer, path: str) -> None:
    transport = AiohttpTransport(timeout_seconds=2)
    try:
        response = await transport.get_json(str(server.make_url(path)))
    finally:
        await transport.close()
    assert response.ok
    assert response.body is None


@pytest.mark.asyncio
async def test_timeout_raises_source_timeout(server: test_utils.TestServer) -> None:
    transport = AiohttpTransport(timeout_seconds=0.1)
    try:
        with pytest.raises(SourceTimeout):
            await transport.get_json(str(server.make_url("/slow")))
    finally:
        await transport.close()


@pytest.mark.asyncio
async def test_connection_refused_raises_source_unavailable() -> None:
    transport = AiohttpTransport(timeout_seconds=2)
    try:
        with pytest.raises(SourceUnavailable) as exc_info:
            await transport.get_json("http://127.0.0.1:9/coins/markets")
    finally:
        await transport.close()
    assert exc_info.value.source == "127.0.0.1"
