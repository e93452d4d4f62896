"""Tests for the retrying transport."""
from typing import List

import httpx
import pytest

from weather_app.services import ResilientTransport


class Sleeper:
    """Records backoff delays instead of sleeping."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def build_client(handler, sleeper: Sleeper, **kwargs) -> httpx.AsyncClient:
    transport = ResilientTransport(transport=httpx.MockTransport(handler), sleep=sleeper, **kwargs)
    return httpx.AsyncClient(base_url="http://backend", transport=transport)


@pytest.mark.asyncio
async def test_retries_transient_status_with_exponential_backoff() -> None:
    """Test 503, 503, 200 succeeds after two backoffs."""
    statuses = [503, 503, 200]
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(statuses[len(calls) - 1], json=[])

    sleeper = Sleeper()
    async with build_client(handler, sleeper, max_retries=3, backoff_factor=0.5) as client:
        response = await client.get("/weatherforecast")

    assert response.status_code == 200
    assert len(calls) == 3
    assert sleeper.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_returns_last_response_when_retries_exhausted() -> None:
    """Test the final retryable response is returned as-is."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    sleeper = Sleeper()
    async with build_client(handler, sleeper, max_retries=2, backoff_factor=0.1) as client:
        response = await client.get("/weatherforecast")

    assert response.status_code == 500
    assert len(calls) == 3
    assert sleeper.delays == [0.1, 0.2]


@pytest.mark.asyncio
async def test_non_retryable_status_is_returned_immediately() -> None:
    """Test 404 is not retried."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404)

    async with build_client(handler, Sleeper()) as client:
        response = await client.get("/missing")

    assert response.status_code == 404
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_post_is_not_retried() -> None:
    """Test non-idempotent methods go through once."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    async with build_client(handler, Sleeper()) as client:
        response = await client.post("/orders", json={"id": 1})

    assert response.status_code == 503
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_connect_errors_are_retried() -> None:
    """Test a refused connection followed by success."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json=[])

    async with build_client(handler, Sleeper()) as client:
        response = await client.get("/weatherforecast")

    assert response.status_code == 200
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_last_connect_error_is_raised() -> None:
    """Test the error propagates once retries are exhausted."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with build_client(handler, Sleeper(), max_retries=1) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get("/weatherforecast")


def test_negative_retries_rejected() -> None:
    """Test constructor validation."""
    with pytest.raises(ValueError):
        ResilientTransport(max_retries=-1)


@pytest.mark.asyncio
async def test_discarded_responses_are_closed() -> None:
    """Test that responses replaced by a retry are closed."""
    responses: List[httpx.Response] = []

    def handler(request: httpx.Request) -> httpx.Response:
        response = httpx.Response(503 if len(responses) < 2 else 200, stream=httpx.ByteStream(b"[]"))
        responses.append(response)
        return response

    sleeper = Sleeper()
    async with build_client(handler, sleeper) as client:
        response = await client.get("/weatherforecast")

    assert response.status_code == 200
    assert [r.is_closed for r in responses[:2]] == [True, True]
    assert sleeper.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_zero_retries_sends_once() -> None:
    """Test max_retries=0 returns the first response without sleeping."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    sleeper = Sleeper()
    async with build_client(handler, sleeper, max_retries=0) as client:
        response = await client.get("/weatherforecast")

    assert response.status_code == 503
    assert len(calls) == 1
    assert sleeper.delays == []
