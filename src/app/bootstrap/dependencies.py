"""Factories de stores e do dispatcher de webhooks baseadas em settings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_redis_client
from app.coordinators.whatsapp.inbound import (
    LoggingMessageHandler,
    LoggingStatusHandler,
    WebhookDispatcher,
)
from app.infra.stores import MemoryDedupeStore, RedisDedupeStore
from config.settings import get_base_settings, get_dedupe_settings

if TYPE_CHECKING:
    from app.protocols.dedupe import DedupeStoreProtocol
    from app.protocols.webhook_handlers import (
        InboundMessageHandlerProtocol,
        StatusUpdateHandlerProtocol,
    )
    from config.settings import DedupeSettings

logger = logging.getLogger(__name__)


def create_dedupe_store(settings: DedupeSettings | None = None) -> DedupeStoreProtocol:
    """Cria store de dedupe baseado na configuração.

    Raises:
        ValueError: Backend inválido ou REDIS_URL ausente para redis
    """
    dedupe = settings or get_dedupe_settings()
    backend = dedupe.backend

    if backend == "redis":
        store: DedupeStoreProtocol = RedisDedupeStore(create_redis_client())
        logger.info("dedupe_store_created", extra={"backend": "redis"})
        return store

    if backend == "memory":
        environment = get_base_settings().environment
        if environment != "development":
            logger.warning(
                "memory_dedupe_in_non_dev",
                extra={"backend": "memory", "environment": environment},
            )
        store = MemoryDedupeStore()
        logger.info("dedupe_store_created", extra={"backend": "memory"})
        return store

    msg = f"DEDUPE_BACKEND inválido: {backend}"
    raise ValueError(msg)


def create_webhook_dispatcher(
    dedupe_store: DedupeStoreProtocol | None = None,
    status_handler: StatusUpdateHandlerProtocol | None = None,
    message_handler: InboundMessageHandlerProtocol | None = None,
) -> WebhookDispatcher:
    """Monta o dispatcher com store e handlers (logging por padrão)."""
    return WebhookDispatcher(
        dedupe_store=(
            dedupe_store if dedupe_store is not None else create_dedupe_store()
        ),
        status_handler=status_handler or LoggingStatusHandler(),
        message_handler=message_handler or LoggingMessageHandler(),
        ttl_seconds=get_dedupe_settings().ttl_seconds,
    )
