"""Agregador de settings do Disparo Gateway.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    DedupeBackend,
    DedupeSettings,
    Environment,
    get_base_settings,
    get_dedupe_settings,
)

# Credential vault
from config.settings.crypto import CryptoSettings, get_crypto_settings

# Channel-specific settings
from config.settings.whatsapp import (
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    # Constants
    "GRAPH_API_BASE_URL",
    "GRAPH_API_VERSION",
    # Base
    "BaseSettings",
    # Crypto
    "CryptoSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    # Channels
    "WhatsAppSettings",
    "get_base_settings",
    "get_crypto_settings",
    "get_dedupe_settings",
    "get_whatsapp_settings",
]
