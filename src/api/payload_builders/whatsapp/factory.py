"""Factory para obter o builder correto por tipo de mensagem."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.payload_builders.whatsapp.base import (
    PayloadBuilder,
    build_base_payload,
)
from api.payload_builders.whatsapp.template import (
    TemplatePayloadBuilder,
)
from api.payload_builders.whatsapp.text import (
    TextPayloadBuilder,
)
from app.constants.whatsapp import MessageKind

if TYPE_CHECKING:
    from api.connectors.whatsapp.models import OutboundMessageRequest

_BUILDERS: dict[MessageKind, PayloadBuilder] = {
    MessageKind.TEXT: TextPayloadBuilder(),
    MessageKind.TEMPLATE: TemplatePayloadBuilder(),
}


def get_payload_builder(kind: MessageKind) -> PayloadBuilder | None:
    """Retorna o builder para o tipo de mensagem.

    Args:
        kind: Tipo de mensagem

    Returns:
        Builder apropriado ou None se não suportado
    """
    return _BUILDERS.get(kind)


def build_full_payload(request: OutboundMessageRequest) -> dict[str, Any]:
    """Constrói payload completo para a API Meta.

    Args:
        request: Requisição de envio

    Returns:
        Payload completo pronto para envio

    Raises:
        ValueError: Se tipo de mensagem não suportado
    """
    builder = get_payload_builder(request.kind)
    if builder is None:
        raise ValueError(f"Tipo de mensagem não suportado: {request.kind}")

    payload = build_base_payload(request)
    payload.update(builder.build(request))
    return payload
