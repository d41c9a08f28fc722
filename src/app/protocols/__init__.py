"""Protocolos e contratos do core da aplicação."""

from .dedupe import DedupeStoreProtocol
from .webhook_handlers import InboundMessageHandlerProtocol, StatusUpdateHandlerProtocol

__all__ = [
    "DedupeStoreProtocol",
    "InboundMessageHandlerProtocol",
    "StatusUpdateHandlerProtocol",
]
