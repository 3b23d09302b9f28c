"""
Redis Configuration
"""

import redis
from lawlens.config.settings import settings

# Created lazily by redis-py; no connection is opened until first command
redis_client = redis.Redis.from_url(
    settings.REDIS_URL,
    decode_responses=True,
    socket_connect_timeout=5,
    socket_timeout=5,
    retry_on_timeout=True
)


def get_redis():
    """Return the shared Redis client"""
    return redis_client
