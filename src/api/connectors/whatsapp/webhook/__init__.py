"""Webhook WhatsApp: verificação, assinatura e parsing seguro."""

from ..signature import SignatureResult, verify_meta_signature, verify_signature
from .receive import (
    InvalidPayloadError,
    InvalidSignatureError,
    WebhookRequestError,
    iter_changes,
    parse_webhook_request,
)
from .verify import ChallengeMismatchError, verify_webhook_challenge

__all__ = [
    "ChallengeMismatchError",
    "InvalidPayloadError",
    "InvalidSignatureError",
    "SignatureResult",
    "WebhookRequestError",
    "iter_changes",
    "parse_webhook_request",
    "verify_meta_signature",
    "verify_signature",
    "verify_webhook_challenge",
]
