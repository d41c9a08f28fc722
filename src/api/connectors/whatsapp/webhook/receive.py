"""Parse e validação inicial do webhook (sem PII)."""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import WEBHOOK_OBJECT

from ..signature import verify_meta_signature

if TYPE_CHECKING:
    from collections.abc import Mapping


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidSignatureError(WebhookRequestError):
    """Assinatura inválida do webhook."""


class InvalidPayloadError(WebhookRequestError):
    """Payload do webhook não é JSON ou não tem o formato esperado."""


def parse_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> dict[str, Any]:
    """Valida assinatura e parseia JSON do webhook.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos
        secret: App Secret da Meta

    Raises:
        InvalidSignatureError: Se assinatura for inválida
        InvalidPayloadError: Se o JSON estiver inválido, não for objeto,
            ``object`` não for whatsapp_business_account ou ``entry`` não
            for lista

    Returns:
        Payload dict
    """
    signature_result = verify_meta_signature(raw_body, headers, secret)
    if not signature_result.valid:
        reason = signature_result.error or "invalid_signature"
        raise InvalidSignatureError(reason)

    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidPayloadError("payload_not_object")

    if payload.get("object") != WEBHOOK_OBJECT:
        raise InvalidPayloadError("unexpected_object")

    if not isinstance(payload.get("entry"), list):
        raise InvalidPayloadError("entry_not_list")

    return payload


def iter_changes(payload: dict[str, Any]) -> Iterator[tuple[Any, Any]]:
    """Itera pares (entry, change) sem validar o formato de cada um.

    Entradas sem ``changes`` em lista são emitidas como (entry, None)
    para que o chamador as conte como inválidas.
    """
    for entry in payload.get("entry") or []:
        changes = entry.get("changes") if isinstance(entry, dict) else None
        if not isinstance(changes, list):
            yield entry, None
            continue
        for change in changes:
            yield entry, change
