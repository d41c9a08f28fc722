"""Idempotência inbound: chave de dedupe por mudança de webhook."""

from __future__ import annotations

import hashlib
from typing import Any

DEDUPE_KEY_PREFIX = "webhook:"


def _as_items(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _collect_event_ids(change_value: dict[str, Any]) -> list[str]:
    items: set[str] = set()
    for message in _as_items(change_value.get("messages")):
        if isinstance(message, dict) and message.get("id"):
            items.add(f"m:{message['id']}")
    # O mesmo status id reaparece a cada transição (sent -> delivered -> read)
    for status in _as_items(change_value.get("statuses")):
        if isinstance(status, dict) and status.get("id"):
            items.add(f"s:{status['id']}:{status.get('status', '')}")
    return sorted(items)


def compute_change_dedupe_key(entry_id: str, change_value: dict[str, Any]) -> str:
    """Gera chave estável para uma mudança (entry + change.value).

    Depende apenas de identificadores de conteúdo (entry id,
    phone_number_id, ids de mensagens e de status); nunca de timestamp.
    Reentregas do mesmo conteúdo geram a mesma chave.

    Args:
        entry_id: ``entry[].id`` (WABA id)
        change_value: ``entry[].changes[].value``

    Returns:
        ``webhook:<sha256 hex>``
    """
    metadata = change_value.get("metadata")
    phone_number_id = (
        metadata.get("phone_number_id", "") if isinstance(metadata, dict) else ""
    )
    parts = [str(entry_id), str(phone_number_id), *_collect_event_ids(change_value)]
    digest = hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()
    return f"{DEDUPE_KEY_PREFIX}{digest}"
