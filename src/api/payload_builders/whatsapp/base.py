"""Base comum dos builders de payload da Graph API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from app.constants.whatsapp import MESSAGING_PRODUCT, RECIPIENT_TYPE_INDIVIDUAL

if TYPE_CHECKING:
    from api.connectors.whatsapp.models import OutboundMessageRequest


class PayloadBuilder(Protocol):
    """Contrato dos builders por tipo de mensagem."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]: ...


def build_base_payload(request: OutboundMessageRequest) -> dict[str, Any]:
    """Campos comuns a todo envio de mensagem."""
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "recipient_type": RECIPIENT_TYPE_INDIVIDUAL,
        "to": request.to,
        "type": str(request.kind),
    }
