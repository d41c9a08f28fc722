"""Enums e constantes de domínio do canal WhatsApp."""

from __future__ import annotations

from enum import StrEnum

MESSAGING_PRODUCT = "whatsapp"
RECIPIENT_TYPE_INDIVIDUAL = "individual"
WEBHOOK_OBJECT = "whatsapp_business_account"

# Limite documentado pela Meta por phone_number_id. Não é aplicado pelo
# cliente: a fila/camada chamadora é responsável por respeitá-lo.
PROVIDER_RATE_LIMIT_RPS = 80


class MessageKind(StrEnum):
    """Tipos de mensagem outbound suportados pelo gateway."""

    TEXT = "text"
    TEMPLATE = "template"


class DeliveryStatus(StrEnum):
    """Status de entrega reportados por webhook."""

    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"

