"""Correlation_id por request para rastrear webhooks nos logs.

A rota de webhook define o id (header ``x-correlation-id`` ou UUID novo) e
o CorrelationIdFilter de config.logging o injeta em cada record. Usa
ContextVar, então cada request/task async enxerga o seu próprio valor.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

CORRELATION_ID_HEADER = "x-correlation-id"

# Valores maiores que isso no header são descartados (evita log injection)
MAX_CORRELATION_ID_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ("" se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID recebido. Se ausente, vazio ou longo demais,
            gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id.strip() if correlation_id else ""
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH:
        value = generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())
