"""Stores em memória — desenvolvimento, testes e instância única.

ATENÇÃO: Sem persistência entre reinícios e sem dedupe entre instâncias.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from app.protocols.dedupe import DedupeStoreProtocol

Clock = Callable[[], float]


class MemoryDedupeStore(DedupeStoreProtocol):
    """Store de dedupe em memória protegido por lock.

    Cada registro guarda o instante de expiração (inserção + TTL). Registros
    expirados são varridos a cada escrita; nunca são atualizados.
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._store: dict[str, float] = {}  # key -> expires_at
        self._lock = threading.Lock()
        self._clock = clock

    def _sweep_expired(self, now: float) -> None:
        """Remove entradas expiradas (chamar com lock adquirido)."""
        expired = [k for k, expires_at in self._store.items() if expires_at <= now]
        for k in expired:
            del self._store[k]

    def put_if_absent(self, key: str, ttl: int) -> bool:
        """Insere a chave se ausente ou expirada (atômico sob lock)."""
        with self._lock:
            now = self._clock()
            self._sweep_expired(now)
            if key in self._store:
                return False  # Duplicado
            self._store[key] = now + ttl
            return True  # Novo

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
