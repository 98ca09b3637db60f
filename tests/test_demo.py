from types import SimpleNamespace
from unittest.mock import AsyncMock

import fakeredis.aioredis
import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from airnope.exceptions import EmbeddingError
from airnope.services.guess import Guess
from airnope.web.demo import IPRateLimiter, create_demo_app


@pytest_asyncio.fixture
async def redis():
    r = fakeredis.aioredis.FakeRedis()
    await r.flushall()
    yield r
    await r.flushall()
    await r.aclose()


@pytest.fixture
def detector():
    return SimpleNamespace(
        classify=AsyncMock(return_value=Guess(is_spam=True, score=0.75, scores=(0.75,)))
    )


@pytest_asyncio.fixture
async def client(redis, detector):
    app = create_demo_app(detector, IPRateLimiter(redis, seconds=5))
    async with TestClient(TestServer(app)) as client:
        yield client


def ip(address):
    return {"X-Forwarded-For": address}


@pytest.mark.asyncio
async def test_classify(client, detector):
    response = await client.post("/", json={"message": "claim airdrop"}, headers=ip("10.0.0.1"))
    assert response.status == 200
    assert await response.json() == {"spam": True, "score": 0.75}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    detector.classify.assert_awaited_once_with("claim airdrop")


@pytest.mark.asyncio
async def test_short_circuit_score_is_null(client, detector):
    detector.classify.return_value = Guess(is_spam=False)
    response = await client.post("/", json={"message": "hello"}, headers=ip("10.0.0.2"))
    assert await response.json() == {"spam": False, "score": None}


@pytest.mark.asyncio
async def test_second_request_from_same_ip_is_rejected(client):
    first = await client.post("/", json={"message": "one"}, headers=ip("10.0.0.3"))
    second = await client.post("/", json={"message": "two"}, headers=ip("10.0.0.3"))
    other = await client.post("/", json={"message": "three"}, headers=ip("10.0.0.4"))
    assert first.status == 200
    assert second.status == 429
    assert other.status == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    ["not json", '{"text": "airdrop"}', '{"message": 42}', '["airdrop"]'],
)
async def test_bad_request(client, detector, body):
    response = await client.post("/", data=body, headers=ip("10.0.0.5"))
    assert response.status == 400
    detector.classify.assert_not_called()


@pytest.mark.asyncio
async def test_embedding_error_is_500(client, detector):
    detector.classify.side_effect = EmbeddingError("model unavailable")
    response = await client.post("/", json={"message": "airdrop"}, headers=ip("10.0.0.6"))
    assert response.status == 500


@pytest.mark.asyncio
async def test_cors_preflight(client):
    response = await client.options(
        "/",
        headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
    )
    assert response.status == 204
    assert response.headers["Access-Control-Allow-Origin"] == "*"


@pytest.mark.asyncio
async def test_rate_limiter_window_expires(redis):
    limiter = IPRateLimiter(redis, seconds=5, key_prefix="test")
    assert await limiter.admit("1.2.3.4")
    assert not await limiter.admit("1.2.3.4")
    await redis.delete("test:1.2.3.4")
    assert await limiter.admit("1.2.3.4")
    assert 0 < await redis.ttl("test:1.2.3.4") <= 5
