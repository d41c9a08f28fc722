"""Validação de destinatário outbound (E.164)."""

from __future__ import annotations

import re

from api.connectors.whatsapp.meta_errors import (
    ProviderError,
    ProviderErrorKind,
    WhatsAppApiError,
)

E164_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")


def is_valid_recipient(phone_number: str | None) -> bool:
    """Retorna True se o número está em formato E.164."""
    return isinstance(phone_number, str) and E164_PATTERN.fullmatch(phone_number) is not None


def validate_recipient(phone_number: str | None) -> None:
    """Valida destinatário antes de qualquer chamada de rede.

    Raises:
        WhatsAppApiError: kind INVALID_RECIPIENT se fora do formato E.164
    """
    if is_valid_recipient(phone_number):
        return
    raise WhatsAppApiError(
        ProviderError(
            kind=ProviderErrorKind.INVALID_RECIPIENT,
            message=(
                "Invalid phone number format. "
                "Must be in E.164 format (e.g., +14155238886)"
            ),
        )
    )
