"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - redis_dedupe_store: Store de dedupe usando Redis (multi-instância)
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryDedupeStore
from app.infra.stores.redis_dedupe_store import RedisDedupeStore

__all__ = [
    # Memory (dev/test)
    "MemoryDedupeStore",
    # Redis
    "RedisDedupeStore",
]
