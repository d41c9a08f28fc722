"""Conector WhatsApp - adapter de borda para a Graph API da Meta.

Este módulo é o único ponto de IO para o canal WhatsApp.
Responsabilidades:
- Webhook (receive, verify, signature)
- HTTP client outbound com retry (``http_client``)
- Modelos e erros da Graph API
- Cálculo de chave de dedupe para idempotência

O cliente HTTP não é re-exportado aqui: ele depende de validators e
payload_builders, que por sua vez importam ``meta_errors`` deste pacote.
"""

from .event_id import compute_change_dedupe_key
from .meta_errors import (
    ProviderError,
    ProviderErrorKind,
    WhatsAppApiError,
    classify_provider_error,
    parse_meta_error,
)
from .signature import SignatureResult, verify_meta_signature, verify_signature

__all__ = [
    "ProviderError",
    "ProviderErrorKind",
    "SignatureResult",
    "WhatsAppApiError",
    "classify_provider_error",
    "compute_change_dedupe_key",
    "parse_meta_error",
    "verify_meta_signature",
    "verify_signature",
]
