"""Handlers padrão de webhook: apenas registram eventos (sem PII)."""

from __future__ import annotations

import logging
from typing import Any

from api.connectors.whatsapp.meta_logging import mask_phone_number
from app.constants.whatsapp import DeliveryStatus

logger = logging.getLogger(__name__)


class LoggingStatusHandler:
    """Registra atualizações de status de entrega."""

    async def handle_statuses(
        self,
        phone_number_id: str,
        statuses: list[dict[str, Any]],
    ) -> None:
        for status in statuses:
            errors = status.get("errors") or []
            level = (
                logging.WARNING
                if status.get("status") == DeliveryStatus.FAILED
                else logging.INFO
            )
            logger.log(
                level,
                "whatsapp_status_update",
                extra={
                    "phone_number_id": phone_number_id,
                    "message_id": status.get("id"),
                    "status": status.get("status"),
                    "recipient": mask_phone_number(status.get("recipient_id")),
                    "error_codes": [
                        e.get("code") for e in errors if isinstance(e, dict)
                    ],
                },
            )


class LoggingMessageHandler:
    """Registra mensagens inbound (tipo e id; nunca o conteúdo)."""

    async def handle_messages(
        self,
        phone_number_id: str,
        messages: list[dict[str, Any]],
        contacts: list[dict[str, Any]],
    ) -> None:
        for message in messages:
            logger.info(
                "whatsapp_inbound_message",
                extra={
                    "phone_number_id": phone_number_id,
                    "message_id": message.get("id"),
                    "message_type": message.get("type"),
                    "from": mask_phone_number(message.get("from")),
                    "contacts_count": len(contacts),
                },
            )
