"""Cliente HTTP especializado para WhatsApp Cloud API (Graph API).

Responsabilidades:
- Validação de destinatário (E.164) antes de qualquer IO
- Montagem do payload via payload_builders
- Retry explícito com esperas configuradas e sleep injetável
- Classificação de falhas em ProviderError (meta_errors)
- Logging estruturado sem PII (telefone mascarado, token redigido)

Rate limiting (80 req/s por número) é responsabilidade do chamador.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from api.connectors.whatsapp.meta_errors import (
    WhatsAppApiError,
    classify_provider_error,
)
from api.connectors.whatsapp.meta_logging import (
    log_meta_error,
    log_request,
    log_retry,
    log_success,
)
from api.connectors.whatsapp.models import (
    BusinessProfile,
    OutboundMessageRequest,
    PhoneNumberInfo,
    SendMessageResult,
)
from api.payload_builders.whatsapp import build_full_payload
from api.validators.whatsapp import validate_recipient
from app.constants.whatsapp import MessageKind
from config.settings.whatsapp import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAYS,
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
)

if TYPE_CHECKING:
    from api.connectors.whatsapp.models import WhatsAppAccount
    from app.infra.crypto import CredentialVault
    from config.settings import WhatsAppSettings

logger: logging.Logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]

PHONE_NUMBER_FIELDS = "verified_name,display_phone_number,quality_rating"
BUSINESS_PROFILE_FIELDS = (
    "about,address,description,email,profile_picture_url,websites,vertical"
)


@dataclass(frozen=True, slots=True)
class WhatsAppClientConfig:
    """Configuração do cliente WhatsApp.

    Attributes:
        api_base_url: URL base da Graph API
        api_version: Versão da Graph API
        timeout_seconds: Timeout fixo por requisição
        max_attempts: Total de tentativas (primeira inclusa)
        retry_delays: Espera antes da tentativa N+1; a última é reutilizada
    """

    api_base_url: str = GRAPH_API_BASE_URL
    api_version: str = GRAPH_API_VERSION
    timeout_seconds: float = 30.0
    max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delays: tuple[float, ...] = DEFAULT_RETRY_DELAYS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts deve ser >= 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds deve ser > 0")

    @property
    def api_endpoint(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}"

    def delay_for(self, attempt: int) -> float:
        """Retorna a espera após a tentativa ``attempt`` (base 0)."""
        if not self.retry_delays:
            return 0.0
        return self.retry_delays[min(attempt, len(self.retry_delays) - 1)]

    @classmethod
    def from_settings(cls, settings: WhatsAppSettings) -> WhatsAppClientConfig:
        return cls(
            api_base_url=settings.api_base_url,
            api_version=settings.api_version,
            timeout_seconds=settings.request_timeout_seconds,
            max_attempts=settings.retry_attempts,
            retry_delays=tuple(settings.retry_delays),
        )


class WhatsAppHttpClient:
    """Cliente outbound para uma conta (phone_number_id) da Meta.

    Não mantém estado mutável entre requisições além da configuração;
    chamadas concorrentes são seguras. As tentativas de uma chamada são
    sequenciais.
    """

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        config: WhatsAppClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Inicializa cliente WhatsApp.

        Args:
            access_token: Bearer token da conta
            phone_number_id: ID do número remetente
            config: Configuração (defaults da Graph API se None)
            http_client: AsyncClient injetável (testes usam MockTransport)
            sleep: Corrotina de espera entre tentativas

        Raises:
            ValueError: Se access_token ou phone_number_id estiverem vazios
        """
        if not access_token or not access_token.strip():
            logger.error(
                "whatsapp_client_missing_access_token",
                extra={"phone_number_id": phone_number_id},
            )
            raise ValueError(
                "access_token é obrigatório. "
                "Verifique se WHATSAPP_ACCESS_TOKEN está configurado."
            )
        if not phone_number_id:
            raise ValueError("phone_number_id é obrigatório")

        self._access_token = access_token
        self.phone_number_id = phone_number_id
        self._config = config or WhatsAppClientConfig()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self._config.timeout_seconds
        )
        self._sleep = sleep

    @property
    def config(self) -> WhatsAppClientConfig:
        return self._config

    @property
    def messages_url(self) -> str:
        return f"{self._config.api_endpoint}/{self.phone_number_id}/messages"

    async def send_text(
        self,
        to: str,
        body: str,
        preview_url: bool = False,
    ) -> SendMessageResult:
        """Envia mensagem de texto livre."""
        return await self.send(
            OutboundMessageRequest(
                to=to,
                kind=MessageKind.TEXT,
                text=body,
                preview_url=preview_url,
            )
        )

    async def send_template(
        self,
        to: str,
        template_name: str,
        language_code: str,
        components: list[dict[str, Any]] | None = None,
    ) -> SendMessageResult:
        """Envia mensagem de template aprovado."""
        return await self.send(
            OutboundMessageRequest(
                to=to,
                kind=MessageKind.TEMPLATE,
                template_name=template_name,
                language_code=language_code,
                components=list(components or []),
            )
        )

    async def send(self, request: OutboundMessageRequest) -> SendMessageResult:
        """Valida, monta e envia uma mensagem.

        Raises:
            WhatsAppApiError: INVALID_RECIPIENT antes de qualquer IO, ou o
                último erro classificado após as tentativas
        """
        validate_recipient(request.to)
        payload = build_full_payload(request)
        data = await self._request("POST", self.messages_url, payload=payload)
        return SendMessageResult.from_response(data)

    async def get_phone_number_info(self) -> PhoneNumberInfo:
        """Consulta metadados do número remetente."""
        url = f"{self._config.api_endpoint}/{self.phone_number_id}"
        data = await self._request("GET", url, params={"fields": PHONE_NUMBER_FIELDS})
        return PhoneNumberInfo.from_response(data)

    async def get_business_profile(self) -> BusinessProfile:
        """Consulta o perfil comercial do número remetente."""
        url = (
            f"{self._config.api_endpoint}/{self.phone_number_id}"
            "/whatsapp_business_profile"
        )
        data = await self._request(
            "GET", url, params={"fields": BUSINESS_PROFILE_FIELDS}
        )
        profiles = data.get("data")
        first = profiles[0] if isinstance(profiles, list) and profiles else {}
        return BusinessProfile.from_response(first if isinstance(first, dict) else {})

    async def check_connectivity(self) -> bool:
        """Retorna True se a Graph API responde para este número."""
        try:
            await self.get_phone_number_info()
        except WhatsAppApiError as exc:
            logger.warning(
                "whatsapp_connectivity_check_failed",
                extra={
                    "phone_number_id": self.phone_number_id,
                    "error_kind": str(exc.kind),
                },
            )
            return False
        return True

    async def aclose(self) -> None:
        """Fecha o AsyncClient se ele foi criado por este cliente."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> WhatsAppHttpClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._access_token}",
        }

    async def _request(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Executa a chamada com retry; o corpo reenviado é sempre o mesmo."""
        headers = self._headers()
        for attempt in range(self._config.max_attempts):
            log_request(method, url, headers, payload, attempt + 1)
            try:
                response = await self._http.request(
                    method,
                    url,
                    json=payload,
                    params=params,
                    headers=headers,
                    timeout=self._config.timeout_seconds,
                )
            except httpx.RequestError:
                error = classify_provider_error(response_received=False)
            else:
                body = _decode_json(response)
                if response.is_success:
                    log_success(method, url, response.status_code, body)
                    return body if isinstance(body, dict) else {}
                error = classify_provider_error(True, response.status_code, body)

            log_meta_error(error, method, url, attempt + 1)
            if not error.is_retryable or attempt + 1 >= self._config.max_attempts:
                raise WhatsAppApiError(error)

            delay = self._config.delay_for(attempt)
            log_retry(error, url, attempt + 1, delay)
            await self._sleep(delay)

        raise RuntimeError("whatsapp_retry_loop_exhausted")


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def create_whatsapp_client_for_account(
    account: WhatsAppAccount,
    vault: CredentialVault,
    settings: WhatsAppSettings | None = None,
    **client_kwargs: Any,
) -> WhatsAppHttpClient:
    """Factory multi-tenant: decifra o token da conta e monta o cliente.

    Args:
        account: Conta com access token cifrado (envelope do cofre)
        vault: Cofre de credenciais
        settings: WhatsAppSettings opcional. Se None, carrega do ambiente.
        **client_kwargs: Repassados ao WhatsAppHttpClient (http_client, sleep)

    Raises:
        DecryptionError: Se o envelope estiver corrompido ou a chave errada
    """
    from config.settings import get_whatsapp_settings

    whatsapp = settings or get_whatsapp_settings()
    access_token = vault.decrypt(account.encrypted_access_token)
    return WhatsAppHttpClient(
        access_token,
        account.phone_number_id,
        WhatsAppClientConfig.from_settings(whatsapp),
        **client_kwargs,
    )


def create_whatsapp_http_client(
    settings: WhatsAppSettings | None = None,
    **client_kwargs: Any,
) -> WhatsAppHttpClient:
    """Factory para a conta padrão (WHATSAPP_ACCESS_TOKEN/PHONE_NUMBER_ID).

    Args:
        settings: WhatsAppSettings opcional. Se None, carrega do ambiente.

    Returns:
        Cliente HTTP configurado para WhatsApp.
    """
    # Import local para evitar dependência circular
    from config.settings import get_whatsapp_settings

    whatsapp = settings or get_whatsapp_settings()
    return WhatsAppHttpClient(
        whatsapp.access_token,
        whatsapp.phone_number_id,
        WhatsAppClientConfig.from_settings(whatsapp),
        **client_kwargs,
    )
