"""Settings do cofre de credenciais.

A chave mestra (ENCRYPTION_KEY) protege os access tokens por conta
armazenados como envelope ``iv:ciphertext:tag``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from app.infra.crypto.constants import DEFAULT_KDF_SALT, KDF_ITERATIONS


@dataclass(frozen=True)
class CryptoSettings:
    """Configurações de criptografia de credenciais.

    Attributes:
        encryption_key: Hex de 64 chars ou passphrase (derivada via PBKDF2)
        kdf_salt: Salt fixo da derivação; gerado uma vez por deployment
        kdf_iterations: Iterações do PBKDF2-HMAC-SHA512
    """

    encryption_key: str = ""
    kdf_salt: str = DEFAULT_KDF_SALT
    kdf_iterations: int = KDF_ITERATIONS

    def validate(self) -> list[str]:
        """Valida configurações de criptografia.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not self.encryption_key:
            errors.append("ENCRYPTION_KEY não configurado")

        if not self.kdf_salt:
            errors.append("CREDENTIAL_KDF_SALT não pode ser vazio")

        if self.kdf_iterations < KDF_ITERATIONS:
            errors.append(f"CREDENTIAL_KDF_ITERATIONS deve ser >= {KDF_ITERATIONS}")

        return errors


def _load_from_env() -> CryptoSettings:
    """Carrega CryptoSettings de variáveis de ambiente."""
    return CryptoSettings(
        encryption_key=os.getenv("ENCRYPTION_KEY", ""),
        kdf_salt=os.getenv("CREDENTIAL_KDF_SALT", DEFAULT_KDF_SALT),
        kdf_iterations=int(
            os.getenv("CREDENTIAL_KDF_ITERATIONS", str(KDF_ITERATIONS))
        ),
    )


@lru_cache(maxsize=1)
def get_crypto_settings() -> CryptoSettings:
    """Retorna instância cacheada de CryptoSettings."""
    return _load_from_env()
