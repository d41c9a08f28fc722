"""Testes do composition root (validação de settings e wiring)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from api.connectors.whatsapp.models import WhatsAppAccount
from app import bootstrap
from app.bootstrap import dependencies, whatsapp_factory
from app.coordinators.whatsapp.inbound import WebhookDispatcher
from app.infra.crypto import CredentialVault, CredentialVaultConfigError
from app.infra.stores import MemoryDedupeStore, RedisDedupeStore
from config.settings import CryptoSettings, DedupeSettings

pytestmark = pytest.mark.usefixtures("clear_settings_cache")

_REQUIRED_ENV = {
    "WHATSAPP_VERIFY_TOKEN": "verify",
    "WHATSAPP_APP_SECRET": "secret",
    "WHATSAPP_ACCESS_TOKEN": "token",
    "WHATSAPP_PHONE_NUMBER_ID": "PN1",
    "WHATSAPP_BUSINESS_ACCOUNT_ID": "WABA1",
    "ENCRYPTION_KEY": "a" * 64,
    "DEDUPE_BACKEND": "redis",
    "REDIS_URL": "redis://localhost:6379/0",
}


def _set_env(monkeypatch: pytest.MonkeyPatch, **env: str) -> None:
    for name, value in env.items():
        monkeypatch.setenv(name, value)


class TestValidateRuntimeSettings:
    def test_production_with_missing_settings_raises(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in _REQUIRED_ENV:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("ENVIRONMENT", "production")

        with pytest.raises(RuntimeError, match="Configuração inválida para production"):
            bootstrap.validate_runtime_settings()

    def test_development_only_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in _REQUIRED_ENV:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("ENVIRONMENT", "development")

        bootstrap.validate_runtime_settings()

        assert bootstrap.collect_settings_errors()

    def test_complete_production_config_passes(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _set_env(monkeypatch, ENVIRONMENT="production", **_REQUIRED_ENV)

        assert bootstrap.collect_settings_errors() == []
        bootstrap.validate_runtime_settings()

    def test_errors_are_prefixed_by_section(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _set_env(monkeypatch, **_REQUIRED_ENV)
        monkeypatch.delenv("ENCRYPTION_KEY")

        assert bootstrap.collect_settings_errors() == [
            "crypto: ENCRYPTION_KEY não configurado"
        ]


class TestDedupeStoreFactory:
    def test_memory_backend(self) -> None:
        store = dependencies.create_dedupe_store(DedupeSettings(backend="memory"))

        assert isinstance(store, MemoryDedupeStore)

    def test_redis_backend_uses_shared_client(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        redis_client = MagicMock()
        monkeypatch.setattr(dependencies, "create_redis_client", lambda: redis_client)

        store = dependencies.create_dedupe_store(DedupeSettings(backend="redis"))

        assert isinstance(store, RedisDedupeStore)
        redis_client.set.return_value = True
        assert store.put_if_absent("k", 10) is True
        redis_client.set.assert_called_once_with("dedupe:k", "1", nx=True, ex=10)

    def test_invalid_backend(self) -> None:
        with pytest.raises(ValueError, match="DEDUPE_BACKEND inválido"):
            dependencies.create_dedupe_store(DedupeSettings(backend="disk"))  # type: ignore[arg-type]


class TestWebhookDispatcherFactory:
    @pytest.mark.asyncio
    async def test_uses_injected_empty_store(self) -> None:
        store = MemoryDedupeStore()
        dispatcher = dependencies.create_webhook_dispatcher(dedupe_store=store)
        payload = {
            "object": "whatsapp_business_account",
            "entry": [
                {
                    "id": "WABA1",
                    "changes": [
                        {
                            "value": {
                                "metadata": {"phone_number_id": "PN1"},
                                "messages": [{"id": "wamid.1", "type": "text"}],
                            }
                        }
                    ],
                }
            ],
        }

        await dispatcher.dispatch(payload)

        assert isinstance(dispatcher, WebhookDispatcher)
        assert len(store) == 1

    def test_singleton_getter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEDUPE_BACKEND", "memory")
        bootstrap.get_webhook_dispatcher.cache_clear()
        try:
            assert bootstrap.get_webhook_dispatcher() is bootstrap.get_webhook_dispatcher()
        finally:
            bootstrap.get_webhook_dispatcher.cache_clear()


class TestWhatsAppFactory:
    def test_credential_vault_from_settings(self) -> None:
        vault = whatsapp_factory.create_credential_vault(
            CryptoSettings(encryption_key="passphrase", kdf_salt="salt")
        )
        other = CredentialVault("passphrase", kdf_salt="salt")

        assert other.decrypt(vault.encrypt("EAAG")) == "EAAG"

    def test_credential_vault_without_key(self) -> None:
        with pytest.raises(CredentialVaultConfigError):
            whatsapp_factory.create_credential_vault(CryptoSettings())

    def test_default_client_requires_token(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("WHATSAPP_ACCESS_TOKEN", raising=False)
        monkeypatch.setenv("WHATSAPP_PHONE_NUMBER_ID", "PN1")

        with pytest.raises(ValueError, match="access_token"):
            whatsapp_factory.create_default_whatsapp_client()

    def test_account_client_decrypts_token(self) -> None:
        vault = CredentialVault("b" * 64)
        account = WhatsAppAccount(
            tenant_id="t1",
            phone_number_id="PN7",
            business_account_id="WABA7",
            encrypted_access_token=vault.encrypt("EAAG-t1"),
        )

        client = whatsapp_factory.create_account_whatsapp_client(account, vault)

        assert client.phone_number_id == "PN7"
        assert client.messages_url.endswith("/PN7/messages")

    def test_account_client_falls_back_to_singleton_vault(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENCRYPTION_KEY", "c" * 64)
        bootstrap.get_credential_vault.cache_clear()
        try:
            vault = bootstrap.get_credential_vault()
            account = WhatsAppAccount(
                tenant_id="t2",
                phone_number_id="PN8",
                business_account_id="WABA8",
                encrypted_access_token=vault.encrypt("EAAG-t2"),
            )

            client = whatsapp_factory.create_account_whatsapp_client(account)

            assert client.phone_number_id == "PN8"
            assert bootstrap.get_credential_vault() is vault
        finally:
            bootstrap.get_credential_vault.cache_clear()
