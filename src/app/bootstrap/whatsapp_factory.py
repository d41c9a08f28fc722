"""Factory de wiring para WhatsApp outbound e cofre de credenciais."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.connectors.whatsapp.http_client import (
    create_whatsapp_client_for_account,
    create_whatsapp_http_client,
)
from app.infra.crypto import CredentialVault
from config.settings import get_crypto_settings, get_whatsapp_settings

if TYPE_CHECKING:
    from api.connectors.whatsapp.http_client import WhatsAppHttpClient
    from api.connectors.whatsapp.models import WhatsAppAccount
    from config.settings import CryptoSettings


def create_credential_vault(settings: CryptoSettings | None = None) -> CredentialVault:
    """Cria cofre a partir de ENCRYPTION_KEY/CREDENTIAL_KDF_*.

    Raises:
        CredentialVaultConfigError: Se ENCRYPTION_KEY não configurado
    """
    crypto = settings or get_crypto_settings()
    return CredentialVault(
        crypto.encryption_key,
        kdf_salt=crypto.kdf_salt,
        kdf_iterations=crypto.kdf_iterations,
    )


def create_default_whatsapp_client(**client_kwargs: Any) -> WhatsAppHttpClient:
    """Cria cliente da conta padrão (WHATSAPP_ACCESS_TOKEN).

    Raises:
        ValueError: Se token ou phone_number_id não configurados
    """
    return create_whatsapp_http_client(get_whatsapp_settings(), **client_kwargs)


def create_account_whatsapp_client(
    account: WhatsAppAccount,
    vault: CredentialVault | None = None,
    **client_kwargs: Any,
) -> WhatsAppHttpClient:
    """Cria cliente para a conta de um tenant (token cifrado em repouso).

    Sem ``vault`` explícito usa o cofre singleton do bootstrap.
    """
    from app.bootstrap import get_credential_vault

    return create_whatsapp_client_for_account(
        account,
        vault if vault is not None else get_credential_vault(),
        get_whatsapp_settings(),
        **client_kwargs,
    )
