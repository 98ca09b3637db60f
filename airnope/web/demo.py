# airnope/web/demo.py
"""
Публичное демо-API классификатора.

POST / {"message": "..."} -> {"spam": bool, "score": float | null}

Один запрос с IP раз в demo.rate_limit_seconds (Redis SET NX EX),
иначе 429.
"""
import json
from typing import Awaitable, Callable

from aiohttp import web
from loguru import logger
from redis.asyncio import Redis

from airnope.exceptions import EmbeddingError
from airnope.services.detector import SpamDetector

DEFAULT_IP = "0.0.0.0"

DETECTOR_KEY = web.AppKey("detector", SpamDetector)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "*",
    "Access-Control-Max-Age": "3600",
}


class IPRateLimiter:
    """Допускает не больше одного запроса с IP за окно в seconds секунд."""

    def __init__(self, redis: Redis, seconds: int = 5, key_prefix: str = "demo:ip"):
        self.redis = redis
        self.seconds = seconds
        self.key_prefix = key_prefix

    async def admit(self, ip: str) -> bool:
        if self.seconds <= 0:
            return True
        key = f"{self.key_prefix}:{ip}"
        return bool(await self.redis.set(key, "1", nx=True, ex=self.seconds))


LIMITER_KEY = web.AppKey("limiter", IPRateLimiter)


def client_ip(request: web.Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote or DEFAULT_IP


@web.middleware
async def cors_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    if request.method == "OPTIONS":
        return web.Response(status=204, headers=CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as e:
        e.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


async def classify(request: web.Request) -> web.Response:
    ip = client_ip(request)
    if not await request.app[LIMITER_KEY].admit(ip):
        logger.debug(f"⏳ Demo request from {ip} rejected by rate limit")
        return web.json_response({"error": "Too many requests"}, status=429)

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"⚠️ Invalid demo payload from {ip}: {e}")
        return web.json_response({"error": "Invalid JSON"}, status=400)

    message = payload.get("message") if isinstance(payload, dict) else None
    if not isinstance(message, str):
        return web.json_response({"error": "Field 'message' is required"}, status=400)

    try:
        guess = await request.app[DETECTOR_KEY].classify(message)
    except EmbeddingError as e:
        logger.error(f"❌ Demo classification failed: {e}")
        return web.json_response({"error": "Classification failed"}, status=500)

    return web.json_response({"spam": guess.is_spam, "score": guess.score})


def create_demo_app(detector: SpamDetector, limiter: IPRateLimiter) -> web.Application:
    app = web.Application(middlewares=[cors_middleware])
    app[DETECTOR_KEY] = detector
    app[LIMITER_KEY] = limiter
    app.router.add_post("/", classify)
    app.router.add_route("OPTIONS", "/", classify)
    return app
