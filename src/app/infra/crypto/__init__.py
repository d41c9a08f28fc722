"""Criptografia de credenciais em repouso.

Localizado em app/infra/ para que bootstrap e coordinators usem o cofre
sem depender da camada api/.
"""

from .constants import IV_SIZE, KEY_SIZE, TAG_SIZE
from .credential_vault import CredentialVault, derive_key, generate_encryption_key
from .errors import CredentialVaultConfigError, CredentialVaultError, DecryptionError

__all__ = [
    "IV_SIZE",
    "KEY_SIZE",
    "TAG_SIZE",
    "CredentialVault",
    "CredentialVaultConfigError",
    "CredentialVaultError",
    "DecryptionError",
    "derive_key",
    "generate_encryption_key",
]
