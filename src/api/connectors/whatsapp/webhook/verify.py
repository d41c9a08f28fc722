"""Verificação de webhook exigida pela Meta (GET hub.challenge)."""

from __future__ import annotations

SUBSCRIBE_MODE = "subscribe"


class ChallengeMismatchError(ValueError):
    """Falha na verificação do desafio do webhook."""


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str | None,
) -> str:
    """Valida challenge de webhook e retorna o conteúdo a ser respondido.

    Args:
        hub_mode: Valor de hub.mode
        hub_verify_token: Valor de hub.verify_token
        hub_challenge: Valor de hub.challenge
        expected_token: Token configurado no servidor

    Raises:
        ChallengeMismatchError: Se token configurado ausente, modo diferente
            de ``subscribe`` ou token divergente

    Returns:
        Desafio (string) a ser ecoado
    """
    if not expected_token:
        raise ChallengeMismatchError("missing_verify_token")

    if hub_mode != SUBSCRIBE_MODE or hub_verify_token != expected_token:
        raise ChallengeMismatchError("verification_failed")

    return hub_challenge or ""
