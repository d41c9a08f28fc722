"""Validação de assinatura HMAC dos webhooks da Meta.

A Meta assina o corpo bruto com o App Secret e envia
``X-Hub-Signature-256: sha256=<hex>``. A verificação precisa do corpo
exatamente como recebido: reserializar o JSON invalida a assinatura.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-hub-signature-256"
SIGNATURE_PREFIX = "sha256="

_SHA256_HEX_RE = re.compile(r"[0-9a-fA-F]{64}")


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação (motivo sem dados sensíveis)."""

    valid: bool
    error: str | None = None


def compute_signature(raw_body: bytes | str, secret: str) -> str:
    """Calcula o header esperado (``sha256=<hex>``) para um corpo."""
    body = raw_body.encode("utf-8") if isinstance(raw_body, str) else raw_body
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def check_signature(
    signature_header: str | None,
    raw_body: bytes | str,
    secret: str | None,
) -> SignatureResult:
    """Verifica a assinatura e informa o motivo da rejeição.

    Nunca levanta exceção: entradas malformadas resultam em ``valid=False``.
    """
    if not secret:
        return SignatureResult(valid=False, error="missing_app_secret")

    if not isinstance(signature_header, str) or not signature_header:
        return SignatureResult(valid=False, error="missing_signature")

    if not signature_header.startswith(SIGNATURE_PREFIX):
        return SignatureResult(valid=False, error="invalid_signature_format")

    received_hex = signature_header[len(SIGNATURE_PREFIX) :]
    if not _SHA256_HEX_RE.fullmatch(received_hex):
        return SignatureResult(valid=False, error="invalid_signature_format")

    if isinstance(raw_body, str):
        body = raw_body.encode("utf-8")
    elif isinstance(raw_body, bytes | bytearray):
        body = bytes(raw_body)
    else:
        return SignatureResult(valid=False, error="invalid_body")

    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    if not hmac.compare_digest(expected, bytes.fromhex(received_hex)):
        return SignatureResult(valid=False, error="invalid_signature")

    return SignatureResult(valid=True)


def verify_signature(
    signature_header: str | None,
    raw_body: bytes | str,
    secret: str | None,
) -> bool:
    """Retorna True se ``signature_header`` autentica ``raw_body``.

    Args:
        signature_header: Valor de X-Hub-Signature-256
        raw_body: Corpo bruto (bytes, ou str codificada em UTF-8)
        secret: App Secret da Meta

    Returns:
        False para header ausente/malformado, hex inválido, tamanho
        divergente, secret vazio ou digest diferente
    """
    return check_signature(signature_header, raw_body, secret).valid


def verify_meta_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    """Extrai o header de assinatura (case-insensitive) e verifica."""
    header = None
    for name, value in headers.items():
        if name.lower() == SIGNATURE_HEADER:
            header = value
            break
    return check_signature(header, raw_body, secret)
