"""Modelos do conector WhatsApp (requests e responses da Graph API)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.constants.whatsapp import MessageKind


@dataclass(frozen=True, slots=True)
class OutboundMessageRequest:
    """Requisição de envio de mensagem para um destinatário E.164.

    Campos usados por tipo:
    - TEXT: text, preview_url
    - TEMPLATE: template_name, language_code, components
    """

    to: str
    kind: MessageKind
    text: str | None = None
    preview_url: bool = False
    template_name: str | None = None
    language_code: str | None = None
    components: list[dict[str, Any]] = field(default_factory=list)


def _first_dict(items: Any) -> dict[str, Any]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


@dataclass(frozen=True, slots=True)
class SendMessageResult:
    """Resultado de envio aceito pela Meta."""

    message_id: str
    wa_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> SendMessageResult:
        message = _first_dict(data.get("messages"))
        contact = _first_dict(data.get("contacts"))
        return cls(
            message_id=str(message.get("id", "")),
            wa_id=contact.get("wa_id"),
            raw=data,
        )


@dataclass(frozen=True, slots=True)
class PhoneNumberInfo:
    """Metadados do número de telefone do negócio."""

    id: str
    verified_name: str = ""
    display_phone_number: str = ""
    quality_rating: str = ""

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> PhoneNumberInfo:
        return cls(
            id=str(data.get("id", "")),
            verified_name=data.get("verified_name", ""),
            display_phone_number=data.get("display_phone_number", ""),
            quality_rating=data.get("quality_rating", ""),
        )


@dataclass(frozen=True, slots=True)
class BusinessProfile:
    """Perfil comercial do número (whatsapp_business_profile)."""

    about: str | None = None
    address: str | None = None
    description: str | None = None
    email: str | None = None
    profile_picture_url: str | None = None
    websites: list[str] = field(default_factory=list)
    vertical: str | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> BusinessProfile:
        return cls(
            about=data.get("about"),
            address=data.get("address"),
            description=data.get("description"),
            email=data.get("email"),
            profile_picture_url=data.get("profile_picture_url"),
            websites=list(data.get("websites") or []),
            vertical=data.get("vertical"),
        )


@dataclass(frozen=True, slots=True)
class WhatsAppAccount:
    """Conta WhatsApp de um tenant, com access token cifrado em repouso."""

    tenant_id: str
    phone_number_id: str
    business_account_id: str
    encrypted_access_token: str = field(repr=False)
