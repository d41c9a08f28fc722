"""Redis Dedupe Store — deduplicação de webhooks entre instâncias.

Usa SET NX EX (set if not exists, com expiração) para operação atômica.

Contrato de Keys:
    As keys devem ser IDs opacos ou hashes (ex.: ``webhook:<sha256>``).
    NUNCA passar dados sensíveis (PII, telefones, emails) como key.
    Keys são logadas parcialmente em DEBUG; dados sensíveis vazariam.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from app.protocols.dedupe import DedupeStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)

# Prefixo para namespace de dedupe
DEDUPE_PREFIX = "dedupe:"


class RedisDedupeStore(DedupeStoreProtocol):
    """Store de dedupe usando Redis.

    Usa SET NX EX para garantir atomicidade entre instâncias: a primeira
    instância a inserir a chave processa a mudança, as demais descartam.

    Args:
        redis_client: Cliente Redis síncrono
    """

    def __init__(self, redis_client: Redis) -> None:
        self._redis = redis_client

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{DEDUPE_PREFIX}{key}"

    def put_if_absent(self, key: str, ttl: int) -> bool:
        """Insere chave atomicamente.

        - Se chave não existe: cria com TTL e retorna True (novo)
        - Se chave existe: retorna False (duplicado)

        Args:
            key: Chave única (ex.: webhook:<sha256>)
            ttl: TTL em segundos

        Returns:
            True se novo, False se duplicado

        Raises:
            RedisConnectionError: Falha de comunicação com Redis
        """
        redis_key = self._key(key)
        try:
            # SET NX retorna True se criou (novo), None se já existia
            was_set = self._redis.set(redis_key, "1", nx=True, ex=ttl)
        except RedisError as exc:
            raise RedisConnectionError("Falha ao registrar dedupe no Redis") from exc

        if not was_set:
            key_masked = key[:16] + "..." if len(key) > 16 else key
            logger.debug("dedupe_duplicate_detected", extra={"key": key_masked})
            return False
        return True
