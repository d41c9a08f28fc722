"""Builder para mensagens de template."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from api.connectors.whatsapp.models import OutboundMessageRequest


class TemplatePayloadBuilder:
    """Builder para mensagens de template aprovadas."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        """Constrói payload para mensagem de template.

        Componentes (header/body/button) são repassados como recebidos;
        sem componentes a Meta recebe lista vazia.

        Args:
            request: Requisição com dados de template

        Returns:
            Payload template conforme API Meta
        """
        return {
            "template": {
                "name": request.template_name,
                "language": {"code": request.language_code},
                "components": [dict(c) for c in request.components],
            }
        }
