"""Validadores de conformidade para mensagens WhatsApp/Meta.

Uso:
    from api.validators.whatsapp import validate_recipient

    validate_recipient("+14155238886")
"""

from api.validators.whatsapp.recipient import (
    E164_PATTERN,
    is_valid_recipient,
    validate_recipient,
)

__all__ = [
    "E164_PATTERN",
    "is_valid_recipient",
    "validate_recipient",
]
