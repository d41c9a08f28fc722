"""Despacho idempotente de webhooks WhatsApp.

Para cada par (entry, change) do envelope:
1. Calcula a chave de dedupe da mudança
2. Registra a chave no store (put_if_absent); duplicadas são descartadas
3. Roteia ``statuses`` e ``messages`` para os handlers colaboradores

Falhas de um handler são logadas e contadas; não interrompem o lote.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from api.connectors.whatsapp.event_id import compute_change_dedupe_key
from api.connectors.whatsapp.webhook.receive import iter_changes
from app.infra.stores import MemoryDedupeStore

if TYPE_CHECKING:
    from app.protocols.dedupe import DedupeStoreProtocol
    from app.protocols.webhook_handlers import (
        InboundMessageHandlerProtocol,
        StatusUpdateHandlerProtocol,
    )

logger = logging.getLogger(__name__)

DEFAULT_DEDUPE_TTL_SECONDS = 3600


@dataclass(slots=True)
class DispatchSummary:
    """Contadores do processamento de um envelope."""

    changes_total: int = 0
    changes_processed: int = 0
    changes_duplicate: int = 0
    changes_invalid: int = 0
    handler_failures: int = 0
    statuses_routed: int = 0
    messages_routed: int = 0

    def to_log_extra(self) -> dict[str, int]:
        return {
            "changes_total": self.changes_total,
            "changes_processed": self.changes_processed,
            "changes_duplicate": self.changes_duplicate,
            "changes_invalid": self.changes_invalid,
            "handler_failures": self.handler_failures,
            "statuses_routed": self.statuses_routed,
            "messages_routed": self.messages_routed,
        }


def _as_list(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _is_well_formed(value: dict[str, Any]) -> bool:
    """Campos opcionais da mudança, quando presentes, têm o tipo esperado."""
    metadata = value.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        return False
    return all(
        value.get(name) is None or isinstance(value.get(name), list)
        for name in ("messages", "statuses", "contacts")
    )


class WebhookDispatcher:
    """Roteia mudanças de webhook garantindo processamento único por janela."""

    def __init__(
        self,
        dedupe_store: DedupeStoreProtocol | None,
        status_handler: StatusUpdateHandlerProtocol,
        message_handler: InboundMessageHandlerProtocol,
        ttl_seconds: int = DEFAULT_DEDUPE_TTL_SECONDS,
    ) -> None:
        """Inicializa dispatcher.

        Args:
            dedupe_store: Store de dedupe (MemoryDedupeStore se None)
            status_handler: Recebe atualizações de status
            message_handler: Recebe mensagens inbound
            ttl_seconds: Janela de retenção das chaves processadas
        """
        self._dedupe = (
            dedupe_store if dedupe_store is not None else MemoryDedupeStore()
        )
        self._status_handler = status_handler
        self._message_handler = message_handler
        self._ttl_seconds = ttl_seconds

    async def dispatch(self, payload: dict[str, Any]) -> DispatchSummary:
        """Processa todas as mudanças de um envelope já validado.

        Raises:
            InfrastructureError: Se o store de dedupe falhar (ex.: Redis)
        """
        summary = DispatchSummary()

        for entry, change in iter_changes(payload):
            summary.changes_total += 1
            entry_id = entry.get("id") if isinstance(entry, dict) else None
            value = change.get("value") if isinstance(change, dict) else None
            if (
                not entry_id
                or not isinstance(value, dict)
                or not _is_well_formed(value)
            ):
                summary.changes_invalid += 1
                logger.warning(
                    "webhook_change_invalid",
                    extra={"has_entry_id": bool(entry_id)},
                )
                continue

            key = compute_change_dedupe_key(str(entry_id), value)
            # Store síncrono (Redis) roda fora do event loop
            is_new = await asyncio.to_thread(
                self._dedupe.put_if_absent, key, self._ttl_seconds
            )
            if not is_new:
                summary.changes_duplicate += 1
                logger.info("webhook_change_duplicate", extra={"dedupe_key": key})
                continue

            summary.changes_processed += 1
            await self._route_change(value, summary)

        logger.info("webhook_dispatch_completed", extra=summary.to_log_extra())
        return summary

    async def _route_change(
        self,
        value: dict[str, Any],
        summary: DispatchSummary,
    ) -> None:
        metadata = value.get("metadata") or {}
        phone_number_id = str(metadata.get("phone_number_id", ""))

        statuses = _as_list(value.get("statuses"))
        if statuses:
            try:
                await self._status_handler.handle_statuses(phone_number_id, statuses)
            except Exception as exc:
                summary.handler_failures += 1
                logger.exception(
                    "webhook_status_handler_failed",
                    extra={
                        "phone_number_id": phone_number_id,
                        "error_type": type(exc).__name__,
                    },
                )
            else:
                summary.statuses_routed += len(statuses)

        messages = _as_list(value.get("messages"))
        if messages:
            contacts = _as_list(value.get("contacts"))
            try:
                await self._message_handler.handle_messages(
                    phone_number_id, messages, contacts
                )
            except Exception as exc:
                summary.handler_failures += 1
                logger.exception(
                    "webhook_message_handler_failed",
                    extra={
                        "phone_number_id": phone_number_id,
                        "error_type": type(exc).__name__,
                    },
                )
            else:
                summary.messages_routed += len(messages)
