"""Protocolos de domínio para stores de dedupe.

Interfaces leves (ABCs) dependidas por Application.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class DedupeStoreProtocol(ABC):
    """Contrato mínimo síncrono para stores de deduplicação.

    Método canônico:
    - put_if_absent(key: str, ttl: int) -> bool
      Insere a chave com TTL se ainda não existir. Retorna True se inseriu
      (primeira vez vista) e False se já existia (duplicado).

    Keys devem ser IDs opacos ou hashes. Nunca passar PII como key.
    O dispatcher chama put_if_absent via ``asyncio.to_thread``; implementações
    devem ser thread-safe.
    """

    @abstractmethod
    def put_if_absent(self, key: str, ttl: int) -> bool:
        """Insere a chave de forma atômica se ausente.

        Args:
            key: Chave única (ex.: hash da mudança de webhook)
            ttl: Janela de retenção em segundos

        Returns:
            True se foi inserida agora (novo); False se já existia (duplicado).
        """
