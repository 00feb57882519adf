"""
요청 제한 (Sliding Window)
- Redis sorted set에 요청 시각을 기록 (여러 워커가 같은 카운터 공유)
- Redis에 연결하지 못하면 프로세스 내 메모리 카운터 사용
"""
import logging
import time
import uuid
from collections import defaultdict, deque
from dataclasses import dataclass
from functools import lru_cache
from typing import Deque, Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from hoprun.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    count: int
    retry_after: int = 0


class InMemoryWindow:
    """식별자별 요청 시각 큐. 단일 프로세스에서만 유효합니다."""

    def __init__(self):
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def hit(self, identifier: str, limit: int, window_seconds: int) -> RateLimitDecision:
        now = time.time()
        hits = self._hits[identifier]
        while hits and now - hits[0] >= window_seconds:
            hits.popleft()

        if len(hits) >= limit:
            retry_after = int(window_seconds - (now - hits[0]))
            return RateLimitDecision(False, len(hits), max(0, retry_after))

        hits.append(now)
        return RateLimitDecision(True, len(hits))

    def clear(self) -> None:
        self._hits.clear()


class RateLimiter:
    def __init__(self, redis_url: str, password: Optional[str] = None):
        self.redis_url = redis_url
        self.password = password
        self._client: Optional[redis.Redis] = None
        self.fallback = InMemoryWindow()

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> bool:
        if self._client is not None:
            return True

        client = redis.from_url(self.redis_url, password=self.password, decode_responses=True)
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning(f"[RATE] redis unavailable, using in-memory window: {e}")
            await client.aclose()
            return False

        self._client = client
        logger.info("[RATE] redis connected")
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as e:
            logger.warning(f"[RATE] redis ping failed: {e}")
            return False

    async def hit(self, identifier: str, limit: int, window_seconds: Optional[int] = None) -> RateLimitDecision:
        """요청 1건을 기록하고 허용 여부를 반환합니다."""
        window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        if self._client is None:
            return self.fallback.hit(identifier, limit, window_seconds)

        try:
            return await self._redis_hit(identifier, limit, window_seconds)
        except (RedisError, OSError) as e:
            # Redis 장애 시 요청은 통과 (fail-open)
            logger.error(f"[RATE] redis check failed: {e}")
            return RateLimitDecision(True, 0)

    async def _redis_hit(self, identifier: str, limit: int, window_seconds: int) -> RateLimitDecision:
        key = f"rate_limit:{identifier}"
        now = time.time()

        pipe = self._client.pipeline()
        pipe.zremrangebyscore(key, 0, now - window_seconds)
        pipe.zadd(key, {f"{now}:{uuid.uuid4().hex[:8]}": now})
        pipe.zcard(key)
        pipe.expire(key, window_seconds)
        _, _, count, _ = await pipe.execute()

        if count <= limit:
            return RateLimitDecision(True, count)

        oldest = await self._client.zrange(key, 0, 0, withscores=True)
        retry_after = int(window_seconds - (now - oldest[0][1])) if oldest else window_seconds
        return RateLimitDecision(False, count, max(0, retry_after))


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    return RateLimiter(settings.REDIS_URL, settings.REDIS_PASSWORD)
