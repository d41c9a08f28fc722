"""Testes do cliente outbound WhatsApp (retry, classificação, payload)."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from api.connectors.whatsapp.http_client import (
    WhatsAppClientConfig,
    WhatsAppHttpClient,
    create_whatsapp_client_for_account,
)
from api.connectors.whatsapp.meta_errors import ProviderErrorKind, WhatsAppApiError
from api.connectors.whatsapp.models import WhatsAppAccount
from app.infra.crypto import CredentialVault, DecryptionError
from config.settings import WhatsAppSettings

PHONE_NUMBER_ID = "106540352242922"
TOKEN = "EAAG-test-token"
RECIPIENT = "+14155238886"

SEND_OK = {
    "messaging_product": "whatsapp",
    "contacts": [{"input": RECIPIENT, "wa_id": "14155238886"}],
    "messages": [{"id": "wamid.abc"}],
}


class SleepRecorder:
    """Substitui asyncio.sleep registrando as esperas pedidas."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class ScriptedTransport:
    """Responde requisições em sequência e guarda o que recebeu."""

    def __init__(self, *steps: httpx.Response | Exception) -> None:
        self._steps = list(steps)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self._steps.pop(0) if len(self._steps) > 1 else self._steps[0]
        if isinstance(step, Exception):
            raise step
        return step


def _error(status_code: int, message: str = "", code: int | None = None) -> httpx.Response:
    error: dict[str, object] = {"message": message, "type": "OAuthException"}
    if code is not None:
        error["code"] = code
    return httpx.Response(status_code, json={"error": error})


def _client(
    transport: Callable[[httpx.Request], httpx.Response],
    sleep: SleepRecorder,
    config: WhatsAppClientConfig | None = None,
    token: str = TOKEN,
) -> WhatsAppHttpClient:
    return WhatsAppHttpClient(
        token,
        PHONE_NUMBER_ID,
        config,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
        sleep=sleep,
    )


class TestSendTemplate:
    """Envio de template com retry."""

    @pytest.mark.asyncio
    async def test_rate_limited_twice_then_succeeds(self) -> None:
        transport = ScriptedTransport(
            _error(429, "Too many calls", 80007),
            _error(429, "Too many calls", 80007),
            httpx.Response(200, json=SEND_OK),
        )
        sleep = SleepRecorder()

        result = await _client(transport, sleep).send_template(
            RECIPIENT, "hello_world", "en_US"
        )

        assert result.message_id == "wamid.abc"
        assert result.wa_id == "14155238886"
        assert sleep.calls == [1.0, 2.0]
        assert len(transport.requests) == 3
        bodies = {request.content for request in transport.requests}
        assert len(bodies) == 1

    @pytest.mark.asyncio
    async def test_template_payload_shape(self) -> None:
        transport = ScriptedTransport(httpx.Response(200, json=SEND_OK))
        components = [{"type": "body", "parameters": [{"type": "text", "text": "Ana"}]}]

        await _client(transport, SleepRecorder()).send_template(
            RECIPIENT, "order_update", "pt_BR", components
        )

        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == (
            f"https://graph.facebook.com/v18.0/{PHONE_NUMBER_ID}/messages"
        )
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert json.loads(request.content) == {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": RECIPIENT,
            "type": "template",
            "template": {
                "name": "order_update",
                "language": {"code": "pt_BR"},
                "components": components,
            },
        }

    @pytest.mark.asyncio
    async def test_template_components_default_to_empty_list(self) -> None:
        transport = ScriptedTransport(httpx.Response(200, json=SEND_OK))

        await _client(transport, SleepRecorder()).send_template(
            RECIPIENT, "hello_world", "en_US"
        )

        body = json.loads(transport.requests[0].content)
        assert body["template"]["components"] == []

    @pytest.mark.asyncio
    async def test_template_error_is_not_retried(self) -> None:
        transport = ScriptedTransport(
            _error(400, "Template name does not exist in the translation", 132001)
        )
        sleep = SleepRecorder()

        with pytest.raises(WhatsAppApiError) as exc_info:
            await _client(transport, sleep).send_template(RECIPIENT, "nope", "en_US")

        assert exc_info.value.kind is ProviderErrorKind.TEMPLATE
        assert exc_info.value.error.provider_code == "132001"
        assert len(transport.requests) == 1
        assert sleep.calls == []


class TestSendText:
    @pytest.mark.asyncio
    async def test_text_payload_shape(self) -> None:
        transport = ScriptedTransport(httpx.Response(200, json=SEND_OK))

        result = await _client(transport, SleepRecorder()).send_text(
            RECIPIENT, "Olá!", preview_url=True
        )

        assert result.message_id == "wamid.abc"
        body = json.loads(transport.requests[0].content)
        assert body["type"] == "text"
        assert body["text"] == {"preview_url": True, "body": "Olá!"}

    @pytest.mark.asyncio
    async def test_auth_error_sends_exactly_one_request(self) -> None:
        transport = ScriptedTransport(_error(401, "Invalid OAuth access token", 190))
        sleep = SleepRecorder()

        with pytest.raises(WhatsAppApiError) as exc_info:
            await _client(transport, sleep).send_text(RECIPIENT, "oi")

        assert exc_info.value.kind is ProviderErrorKind.AUTH
        assert len(transport.requests) == 1
        assert sleep.calls == []

    @pytest.mark.asyncio
    async def test_provider_invalid_recipient_is_not_retried(self) -> None:
        transport = ScriptedTransport(
            _error(400, "Recipient phone number not in allowed list", 131030)
        )

        with pytest.raises(WhatsAppApiError) as exc_info:
            await _client(transport, SleepRecorder()).send_text(RECIPIENT, "oi")

        assert exc_info.value.kind is ProviderErrorKind.INVALID_RECIPIENT
        assert len(transport.requests) == 1

    @pytest.mark.parametrize(
        "recipient",
        ["abc", "+0123456789", "5511-99999-8888", "", "+1234567890123456"],
    )
    @pytest.mark.asyncio
    async def test_invalid_recipient_makes_no_request(self, recipient: str) -> None:
        transport = ScriptedTransport(httpx.Response(200, json=SEND_OK))

        with pytest.raises(WhatsAppApiError) as exc_info:
            await _client(transport, SleepRecorder()).send_text(recipient, "oi")

        assert exc_info.value.kind is ProviderErrorKind.INVALID_RECIPIENT
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_server_errors_exhaust_all_attempts(self) -> None:
        transport = ScriptedTransport(_error(500, "Service temporarily unavailable", 2))
        sleep = SleepRecorder()

        with pytest.raises(WhatsAppApiError) as exc_info:
            await _client(transport, sleep).send_text(RECIPIENT, "oi")

        assert exc_info.value.kind is ProviderErrorKind.GENERIC
        assert exc_info.value.error.http_status == 500
        assert len(transport.requests) == 5
        assert sleep.calls == [1.0, 2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_network_error_is_retried(self) -> None:
        transport = ScriptedTransport(
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
            httpx.Response(200, json=SEND_OK),
        )
        sleep = SleepRecorder()

        result = await _client(transport, sleep).send_text(RECIPIENT, "oi")

        assert result.message_id == "wamid.abc"
        assert sleep.calls == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_network_error_after_exhaustion(self) -> None:
        transport = ScriptedTransport(httpx.ConnectError("connection refused"))
        config = WhatsAppClientConfig(max_attempts=2)

        with pytest.raises(WhatsAppApiError) as exc_info:
            await _client(transport, SleepRecorder(), config).send_text(RECIPIENT, "oi")

        assert exc_info.value.kind is ProviderErrorKind.NETWORK
        assert len(transport.requests) == 2

    @pytest.mark.parametrize(
        "exc",
        [httpx.DecodingError("bad gzip"), httpx.TooManyRedirects("loop")],
    )
    @pytest.mark.asyncio
    async def test_non_transport_request_error_is_classified(
        self, exc: httpx.RequestError
    ) -> None:
        transport = ScriptedTransport(exc)
        config = WhatsAppClientConfig(max_attempts=2)

        with pytest.raises(WhatsAppApiError) as exc_info:
            await _client(transport, SleepRecorder(), config).send_text(RECIPIENT, "oi")

        assert exc_info.value.kind is ProviderErrorKind.NETWORK
        assert len(transport.requests) == 2

    @pytest.mark.parametrize(
        "body",
        [
            {"messages": ["wamid.x"], "contacts": [None]},
            {"messages": "wamid.x"},
            {},
        ],
    )
    @pytest.mark.asyncio
    async def test_unexpected_success_body_does_not_raise(
        self, body: dict[str, object]
    ) -> None:
        transport = ScriptedTransport(httpx.Response(200, json=body))

        result = await _client(transport, SleepRecorder()).send_text(RECIPIENT, "oi")

        assert result.message_id == ""
        assert result.wa_id is None

    @pytest.mark.asyncio
    async def test_last_delay_is_reused_when_sequence_is_short(self) -> None:
        transport = ScriptedTransport(_error(503))
        sleep = SleepRecorder()
        config = WhatsAppClientConfig(max_attempts=4, retry_delays=(0.5,))

        with pytest.raises(WhatsAppApiError):
            await _client(transport, sleep, config).send_text(RECIPIENT, "oi")

        assert sleep.calls == [0.5, 0.5, 0.5]

    @pytest.mark.asyncio
    async def test_token_never_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level("DEBUG")
        transport = ScriptedTransport(_error(429), httpx.Response(200, json=SEND_OK))

        await _client(transport, SleepRecorder()).send_text(RECIPIENT, "corpo secreto")

        dumped = " ".join(repr(record.__dict__) for record in caplog.records)
        assert TOKEN not in dumped
        assert "corpo secreto" not in dumped
        assert "4155238886" not in dumped


class TestAccountQueries:
    @pytest.mark.asyncio
    async def test_get_phone_number_info(self) -> None:
        transport = ScriptedTransport(
            httpx.Response(
                200,
                json={
                    "id": PHONE_NUMBER_ID,
                    "verified_name": "Loja Exemplo",
                    "display_phone_number": "+55 11 3000-0000",
                    "quality_rating": "GREEN",
                },
            )
        )

        info = await _client(transport, SleepRecorder()).get_phone_number_info()

        request = transport.requests[0]
        assert request.method == "GET"
        assert request.url.path == f"/v18.0/{PHONE_NUMBER_ID}"
        assert request.url.params["fields"] == (
            "verified_name,display_phone_number,quality_rating"
        )
        assert info.verified_name == "Loja Exemplo"
        assert info.quality_rating == "GREEN"

    @pytest.mark.asyncio
    async def test_get_business_profile_returns_first_entry(self) -> None:
        transport = ScriptedTransport(
            httpx.Response(
                200,
                json={
                    "data": [
                        {
                            "about": "Atendimento 24h",
                            "email": "contato@example.com",
                            "websites": ["https://example.com"],
                            "vertical": "RETAIL",
                        }
                    ]
                },
            )
        )

        profile = await _client(transport, SleepRecorder()).get_business_profile()

        assert transport.requests[0].url.path.endswith("/whatsapp_business_profile")
        assert profile.about == "Atendimento 24h"
        assert profile.websites == ["https://example.com"]
        assert profile.vertical == "RETAIL"

    @pytest.mark.asyncio
    async def test_get_business_profile_empty_data(self) -> None:
        transport = ScriptedTransport(httpx.Response(200, json={"data": []}))

        profile = await _client(transport, SleepRecorder()).get_business_profile()

        assert profile.about is None
        assert profile.websites == []

    @pytest.mark.asyncio
    async def test_check_connectivity_true(self) -> None:
        transport = ScriptedTransport(httpx.Response(200, json={"id": PHONE_NUMBER_ID}))

        assert await _client(transport, SleepRecorder()).check_connectivity() is True

    @pytest.mark.asyncio
    async def test_check_connectivity_false_on_auth_error(self) -> None:
        transport = ScriptedTransport(_error(401, "Invalid OAuth access token", 190))

        assert await _client(transport, SleepRecorder()).check_connectivity() is False

    @pytest.mark.asyncio
    async def test_check_connectivity_false_on_decoding_error(self) -> None:
        transport = ScriptedTransport(httpx.DecodingError("bad gzip"))

        assert await _client(transport, SleepRecorder()).check_connectivity() is False


class TestConstruction:
    @pytest.mark.parametrize("token", ["", "   "])
    def test_empty_access_token_raises(self, token: str) -> None:
        with pytest.raises(ValueError, match="access_token"):
            WhatsAppHttpClient(token, PHONE_NUMBER_ID)

    def test_empty_phone_number_id_raises(self) -> None:
        with pytest.raises(ValueError, match="phone_number_id"):
            WhatsAppHttpClient(TOKEN, "")

    def test_config_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            WhatsAppClientConfig(max_attempts=0)

    def test_config_from_settings(self) -> None:
        settings = WhatsAppSettings(
            api_version="v19.0",
            api_base_url="https://graph.example.test/",
            request_timeout_seconds=10.0,
            retry_attempts=3,
            retry_delays=(0.1, 0.2),
        )

        config = WhatsAppClientConfig.from_settings(settings)

        assert config.api_endpoint == "https://graph.example.test/v19.0"
        assert config.max_attempts == 3
        assert config.retry_delays == (0.1, 0.2)
        assert config.timeout_seconds == 10.0


class TestAccountFactory:
    @pytest.mark.asyncio
    async def test_decrypts_token_for_account(self) -> None:
        vault = CredentialVault("a" * 64)
        account = WhatsAppAccount(
            tenant_id="tenant-1",
            phone_number_id="999000",
            business_account_id="waba-1",
            encrypted_access_token=vault.encrypt("EAAG-tenant-token"),
        )
        transport = ScriptedTransport(httpx.Response(200, json=SEND_OK))

        client = create_whatsapp_client_for_account(
            account,
            vault,
            WhatsAppSettings(),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(transport)),
            sleep=SleepRecorder(),
        )
        await client.send_text(RECIPIENT, "oi")

        request = transport.requests[0]
        assert request.headers["Authorization"] == "Bearer EAAG-tenant-token"
        assert request.url.path == "/v18.0/999000/messages"

    def test_corrupted_token_propagates_decryption_error(self) -> None:
        vault = CredentialVault("a" * 64)
        account = WhatsAppAccount(
            tenant_id="tenant-1",
            phone_number_id="999000",
            business_account_id="waba-1",
            encrypted_access_token="not:an:envelope",
        )

        with pytest.raises(DecryptionError):
            create_whatsapp_client_for_account(account, vault, WhatsAppSettings())

    def test_account_repr_hides_token(self) -> None:
        account = WhatsAppAccount(
            tenant_id="t",
            phone_number_id="1",
            business_account_id="w",
            encrypted_access_token="aa:bb:cc",
        )

        assert "aa:bb:cc" not in repr(account)
