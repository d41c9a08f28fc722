"""Taxonomia e classificação de erros da API Meta/WhatsApp.

Um único tipo imutável (ProviderError) com um ``kind`` fechado substitui a
hierarquia de exceções por status. Chamadores fazem match em ``kind``.

Ordem de classificação:
1. Sem resposta (timeout/conexão) -> NETWORK
2. Status HTTP (401/403 -> AUTH, 429 -> RATE_LIMIT)
3. Apenas para 400: heurística no texto (template antes de destinatário)
4. Qualquer outro 4xx/5xx -> GENERIC
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ProviderErrorKind(StrEnum):
    """Categorias semânticas de falha do provedor."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    INVALID_RECIPIENT = "invalid_recipient"
    TEMPLATE = "template"
    GENERIC = "generic"
    NETWORK = "network"


# Corrigíveis pelo chamador: repetir a requisição não muda o resultado
NON_RETRYABLE_KINDS = frozenset(
    {
        ProviderErrorKind.AUTH,
        ProviderErrorKind.INVALID_RECIPIENT,
        ProviderErrorKind.TEMPLATE,
    }
)

_TEMPLATE_KEYWORDS = ("template",)
_RECIPIENT_KEYWORDS = ("recipient", "phone")

_DEFAULT_MESSAGES = {
    ProviderErrorKind.AUTH: "WhatsApp authentication failed",
    ProviderErrorKind.RATE_LIMIT: "WhatsApp rate limit exceeded",
    ProviderErrorKind.INVALID_RECIPIENT: "Invalid recipient phone number",
    ProviderErrorKind.TEMPLATE: "WhatsApp template error",
    ProviderErrorKind.GENERIC: "Unknown WhatsApp API error",
    ProviderErrorKind.NETWORK: "Network error or timeout",
}


@dataclass(frozen=True, slots=True)
class ProviderError:
    """Resultado imutável de classificação de uma falha do provedor."""

    kind: ProviderErrorKind
    http_status: int | None = None
    provider_code: str | None = None
    message: str = ""

    @property
    def is_retryable(self) -> bool:
        """True para falhas transitórias (rate limit, rede, 5xx etc.)."""
        return self.kind not in NON_RETRYABLE_KINDS


class WhatsAppApiError(Exception):
    """Falha classificada de uma chamada ao provedor."""

    def __init__(self, error: ProviderError) -> None:
        super().__init__(error.message or _DEFAULT_MESSAGES[error.kind])
        self.error = error

    @property
    def kind(self) -> ProviderErrorKind:
        return self.error.kind

    @property
    def is_retryable(self) -> bool:
        return self.error.is_retryable


def parse_meta_error(response_data: Any) -> dict[str, Any] | None:
    """Extrai o objeto ``error`` do corpo de resposta da Meta.

    Args:
        response_data: Corpo JSON já decodificado (qualquer tipo)

    Returns:
        Dict do erro ou None se ausente/mal-formado
    """
    if not isinstance(response_data, dict):
        return None
    error_obj = response_data.get("error")
    if not isinstance(error_obj, dict):
        return None
    return error_obj


def classify_provider_error(
    response_received: bool,
    status_code: int | None = None,
    body: Any = None,
) -> ProviderError:
    """Classifica uma falha do provedor em um ProviderError.

    Função pura: não faz IO nem loga.

    Args:
        response_received: False se não houve resposta (timeout/conexão)
        status_code: Status HTTP da resposta
        body: Corpo JSON decodificado (ou None)

    Returns:
        ProviderError com kind, status, código e mensagem do provedor
    """
    if not response_received:
        return ProviderError(
            kind=ProviderErrorKind.NETWORK,
            message=_DEFAULT_MESSAGES[ProviderErrorKind.NETWORK],
        )

    error_obj = parse_meta_error(body) or {}
    raw_message = error_obj.get("message")
    message = raw_message if isinstance(raw_message, str) and raw_message else ""
    raw_code = error_obj.get("code")
    provider_code = str(raw_code) if raw_code is not None else None

    kind = _kind_for_status(status_code, message)
    return ProviderError(
        kind=kind,
        http_status=status_code,
        provider_code=provider_code,
        message=message or _DEFAULT_MESSAGES[kind],
    )


def _kind_for_status(status_code: int | None, message: str) -> ProviderErrorKind:
    if status_code in (401, 403):
        return ProviderErrorKind.AUTH
    if status_code == 429:
        return ProviderErrorKind.RATE_LIMIT
    if status_code == 400:
        lowered = message.lower()
        if any(word in lowered for word in _TEMPLATE_KEYWORDS):
            return ProviderErrorKind.TEMPLATE
        if any(word in lowered for word in _RECIPIENT_KEYWORDS):
            return ProviderErrorKind.INVALID_RECIPIENT
    return ProviderErrorKind.GENERIC
