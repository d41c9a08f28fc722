"""Settings específicas de WhatsApp.

Configurações do canal WhatsApp via Graph API.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Constantes do Graph API
GRAPH_API_VERSION: str = "v18.0"
GRAPH_API_BASE_URL: str = "https://graph.facebook.com"

DEFAULT_RETRY_ATTEMPTS: int = 5
DEFAULT_RETRY_DELAYS: tuple[float, ...] = (1.0, 2.0, 4.0, 8.0, 16.0)
DEFAULT_RATE_LIMIT_RPS: int = 80


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp.

    Attributes:
        verify_token: Token para verificação de webhook (hub.verify_token)
        app_secret: Secret do app Meta para validação HMAC de payloads
        access_token: Token de acesso da conta padrão
        phone_number_id: ID do número de telefone da conta padrão
        business_account_id: ID da conta de negócios (WABA)
        api_version: Versão da Graph API (ex: v18.0)
        api_base_url: URL base da Graph API
        request_timeout_seconds: Timeout fixo por requisição
        retry_attempts: Total de tentativas por chamada
        retry_delays: Esperas (s) entre tentativas, crescentes
        rate_limit_rps: Teto documentado de req/s por número (não aplicado)
    """

    # Credenciais (carregadas de env ou Secret Manager)
    verify_token: str = ""
    app_secret: str = ""
    access_token: str = ""
    phone_number_id: str = ""
    business_account_id: str = ""

    # API
    api_version: str = GRAPH_API_VERSION
    api_base_url: str = GRAPH_API_BASE_URL

    # Timeouts e retries
    request_timeout_seconds: float = 30.0
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delays: tuple[float, ...] = DEFAULT_RETRY_DELAYS

    rate_limit_rps: int = DEFAULT_RATE_LIMIT_RPS

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.phone_number_id:
            errors.append("WHATSAPP_PHONE_NUMBER_ID não configurado")

        if not self.business_account_id:
            errors.append("WHATSAPP_BUSINESS_ACCOUNT_ID não configurado")

        if not self.access_token:
            errors.append("WHATSAPP_ACCESS_TOKEN não configurado")

        if not self.verify_token:
            errors.append("WHATSAPP_VERIFY_TOKEN não configurado")

        if not self.app_secret:
            errors.append("WHATSAPP_APP_SECRET não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("WHATSAPP_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.retry_attempts < 1:
            errors.append("WHATSAPP_RETRY_ATTEMPTS deve ser >= 1")

        if len(self.retry_delays) < self.retry_attempts - 1:
            errors.append(
                "WHATSAPP_RETRY_DELAYS deve ter ao menos RETRY_ATTEMPTS - 1 valores"
            )

        if list(self.retry_delays) != sorted(self.retry_delays):
            errors.append("WHATSAPP_RETRY_DELAYS deve ser crescente")

        return errors


def _parse_delays(raw: str | None) -> tuple[float, ...]:
    """Converte "1,2,4" em (1.0, 2.0, 4.0)."""
    if not raw:
        return DEFAULT_RETRY_DELAYS
    return tuple(float(part) for part in raw.split(",") if part.strip())


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        verify_token=os.getenv("WHATSAPP_VERIFY_TOKEN")
        or os.getenv("WHATSAPP_WEBHOOK_VERIFY_TOKEN", ""),
        app_secret=os.getenv("WHATSAPP_APP_SECRET", ""),
        access_token=os.getenv("WHATSAPP_ACCESS_TOKEN", ""),
        phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID", ""),
        business_account_id=os.getenv("WHATSAPP_BUSINESS_ACCOUNT_ID", ""),
        api_version=os.getenv("WHATSAPP_API_VERSION", GRAPH_API_VERSION),
        api_base_url=os.getenv("WHATSAPP_API_BASE_URL", GRAPH_API_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("WHATSAPP_REQUEST_TIMEOUT_SECONDS", "30")
        ),
        retry_attempts=int(
            os.getenv("WHATSAPP_RETRY_ATTEMPTS", str(DEFAULT_RETRY_ATTEMPTS))
        ),
        retry_delays=_parse_delays(os.getenv("WHATSAPP_RETRY_DELAYS")),
        rate_limit_rps=int(
            os.getenv("WHATSAPP_RATE_LIMIT_RPS", str(DEFAULT_RATE_LIMIT_RPS))
        ),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
