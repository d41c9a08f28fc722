"""Protocolos dos colaboradores que recebem eventos de webhook roteados."""

from __future__ import annotations

from typing import Any, Protocol


class StatusUpdateHandlerProtocol(Protocol):
    """Recebe atualizações de status de entrega (sent/delivered/read/failed)."""

    async def handle_statuses(
        self,
        phone_number_id: str,
        statuses: list[dict[str, Any]],
    ) -> None: ...


class InboundMessageHandlerProtocol(Protocol):
    """Recebe mensagens inbound de uma mudança de webhook."""

    async def handle_messages(
        self,
        phone_number_id: str,
        messages: list[dict[str, Any]],
        contacts: list[dict[str, Any]],
    ) -> None: ...
