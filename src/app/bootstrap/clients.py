"""Factories de clientes externos — Redis."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import redis

from config.settings import get_base_settings

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_redis_client() -> Redis:
    """Cria cliente Redis síncrono (singleton).

    Usa REDIS_URL de BaseSettings.

    Returns:
        Cliente Redis configurado

    Raises:
        ValueError: Se REDIS_URL não configurado
    """
    redis_url = get_base_settings().redis_url
    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: Redis = redis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )

    host = client.connection_pool.connection_kwargs.get("host", "unknown")
    logger.info("redis_client_created", extra={"host": host})
    return client
