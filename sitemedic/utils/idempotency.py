import json
import logging
from sitemedic.core.redis import get_redis
from sitemedic.core.config import settings

logger = logging.getLogger(__name__)

async def get_idempotent(key: str):
    if not key:
        return None
    redis = get_redis()
    if redis is None:
        return None
    try:
        v = await redis.get(f"idemp:{key}")
    except Exception as e:
        logger.warning(f"Idempotency lookup failed: {e}")
        return None
    return json.loads(v) if v else None

async def set_idempotent(key: str, value: dict):
    redis = get_redis()
    if not key or redis is None:
        return
    try:
        await redis.set(f"idemp:{key}", json.dumps(value, default=str), ex=settings.IDEMPOTENCY_TTL)
    except Exception as e:
        logger.warning(f"Idempotency write failed: {e}")
