"""Testes para api.payload_builders.whatsapp.

Cobre: base, text, template e factory.
"""

from __future__ import annotations

import pytest

from api.connectors.whatsapp.models import OutboundMessageRequest
from api.payload_builders.whatsapp.base import build_base_payload
from api.payload_builders.whatsapp.factory import (
    build_full_payload,
    get_payload_builder,
)
from api.payload_builders.whatsapp.template import TemplatePayloadBuilder
from api.payload_builders.whatsapp.text import TextPayloadBuilder
from app.constants.whatsapp import MessageKind


class TestBasePayload:
    def test_common_fields(self) -> None:
        request = OutboundMessageRequest(to="+5511999998888", kind=MessageKind.TEXT)

        assert build_base_payload(request) == {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": "+5511999998888",
            "type": "text",
        }


class TestTextBuilder:
    def test_body_and_preview(self) -> None:
        request = OutboundMessageRequest(
            to="+5511999998888",
            kind=MessageKind.TEXT,
            text="Olá",
            preview_url=True,
        )

        assert TextPayloadBuilder().build(request) == {
            "text": {"preview_url": True, "body": "Olá"}
        }

    def test_preview_defaults_to_false(self) -> None:
        request = OutboundMessageRequest(
            to="+5511999998888", kind=MessageKind.TEXT, text="x"
        )

        assert TextPayloadBuilder().build(request)["text"]["preview_url"] is False


class TestTemplateBuilder:
    def test_components_are_passed_through(self) -> None:
        components = [
            {"type": "header", "parameters": [{"type": "text", "text": "Pedido"}]},
            {"type": "body", "parameters": [{"type": "text", "text": "123"}]},
        ]
        request = OutboundMessageRequest(
            to="+5511999998888",
            kind=MessageKind.TEMPLATE,
            template_name="order_update",
            language_code="pt_BR",
            components=components,
        )

        payload = TemplatePayloadBuilder().build(request)

        assert payload == {
            "template": {
                "name": "order_update",
                "language": {"code": "pt_BR"},
                "components": components,
            }
        }

    def test_components_are_copied(self) -> None:
        component = {"type": "body", "parameters": []}
        request = OutboundMessageRequest(
            to="+5511999998888",
            kind=MessageKind.TEMPLATE,
            template_name="t",
            language_code="en_US",
            components=[component],
        )

        payload = TemplatePayloadBuilder().build(request)
        payload["template"]["components"][0]["type"] = "header"

        assert component["type"] == "body"


class TestFactory:
    @pytest.mark.parametrize(
        ("kind", "builder_type"),
        [
            (MessageKind.TEXT, TextPayloadBuilder),
            (MessageKind.TEMPLATE, TemplatePayloadBuilder),
        ],
    )
    def test_builder_per_kind(self, kind: MessageKind, builder_type: type) -> None:
        assert isinstance(get_payload_builder(kind), builder_type)

    def test_full_payload_merges_base_and_body(self) -> None:
        request = OutboundMessageRequest(
            to="+14155238886",
            kind=MessageKind.TEMPLATE,
            template_name="hello_world",
            language_code="en_US",
        )

        payload = build_full_payload(request)

        assert payload["messaging_product"] == "whatsapp"
        assert payload["type"] == "template"
        assert payload["template"]["components"] == []

    def test_unsupported_kind_raises(self) -> None:
        request = OutboundMessageRequest(to="+14155238886", kind="image")  # type: ignore[arg-type]

        assert get_payload_builder("image") is None  # type: ignore[arg-type]
        with pytest.raises(ValueError, match="não suportado"):
            build_full_payload(request)
