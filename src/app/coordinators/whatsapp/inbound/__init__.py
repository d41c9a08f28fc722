"""Coordenação inbound do WhatsApp: dedupe e roteamento de webhooks."""

from .dispatcher import DispatchSummary, WebhookDispatcher
from .handlers import LoggingMessageHandler, LoggingStatusHandler

__all__ = [
    "DispatchSummary",
    "LoggingMessageHandler",
    "LoggingStatusHandler",
    "WebhookDispatcher",
]
