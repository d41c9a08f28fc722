"""Helpers de logging para API Meta/WhatsApp (sem PII).

Telefones aparecem apenas como ``****`` + últimos 4 dígitos; o bearer token
nunca é logado; corpos de mensagem não são logados.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .meta_errors import ProviderError

logger = logging.getLogger(__name__)

REDACTED_AUTHORIZATION = "Bearer [REDACTED]"
_SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie"})


def mask_phone_number(phone: str | None) -> str:
    """Mascara telefone mantendo apenas os últimos 4 dígitos."""
    if not phone:
        return ""
    phone = str(phone)
    if len(phone) <= 4:
        return "****"
    return f"****{phone[-4:]}"


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Retorna cópia dos headers com credenciais redigidas."""
    return {
        name: REDACTED_AUTHORIZATION if name.lower() in _SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def sanitize_log_data(data: Any) -> Any:
    """Sanitiza payload/response da Meta para logging.

    Mantém apenas metadados: destinatário mascarado, tipo, nome do template,
    ids de mensagem e wa_id mascarado.
    """
    if not isinstance(data, dict):
        return data

    sanitized: dict[str, Any] = {}
    if "to" in data:
        sanitized["to"] = mask_phone_number(data.get("to"))
    if "type" in data:
        sanitized["type"] = data.get("type")
    template = data.get("template")
    if isinstance(template, dict):
        sanitized["template"] = template.get("name")
    contacts = data.get("contacts")
    if isinstance(contacts, list):
        sanitized["contacts"] = [
            {"wa_id": mask_phone_number(c.get("wa_id"))}
            for c in contacts
            if isinstance(c, dict)
        ]
    messages = data.get("messages")
    if isinstance(messages, list):
        sanitized["message_ids"] = [
            m.get("id") for m in messages if isinstance(m, dict) and "id" in m
        ]
    return sanitized


def log_request(
    method: str,
    endpoint: str,
    headers: dict[str, str],
    payload: dict[str, Any] | None,
    attempt: int,
) -> None:
    """Loga requisição ao provedor sem dados sensíveis."""
    logger.info(
        "whatsapp_api_request",
        extra={
            "method": method,
            "endpoint": endpoint,
            "headers": redact_headers(headers),
            "data": sanitize_log_data(payload),
            "attempt": attempt,
        },
    )


def log_success(
    method: str,
    endpoint: str,
    status_code: int,
    response_data: Any = None,
) -> None:
    """Loga sucesso sem expor dados sensíveis."""
    logger.info(
        "whatsapp_api_response",
        extra={
            "method": method,
            "endpoint": endpoint,
            "status_code": status_code,
            "data": sanitize_log_data(response_data),
        },
    )


def log_meta_error(
    error: ProviderError,
    method: str,
    endpoint: str,
    attempt: int,
) -> None:
    """Loga erro classificado da Meta sem expor dados sensíveis."""
    logger.warning(
        "whatsapp_api_error",
        extra={
            "method": method,
            "endpoint": endpoint,
            "error_kind": str(error.kind),
            "status_code": error.http_status,
            "provider_code": error.provider_code,
            "error_message": error.message,
            "is_retryable": error.is_retryable,
            "attempt": attempt,
        },
    )


def log_retry(
    error: ProviderError,
    endpoint: str,
    attempt: int,
    delay_seconds: float,
) -> None:
    """Loga agendamento de nova tentativa."""
    logger.warning(
        "whatsapp_api_retry_scheduled",
        extra={
            "endpoint": endpoint,
            "error_kind": str(error.kind),
            "attempt": attempt,
            "next_attempt": attempt + 1,
            "backoff_seconds": delay_seconds,
        },
    )
