"""Cofre de credenciais — AES-256-GCM para segredos em repouso.

Formato persistido: ``<ivHex>:<ciphertextHex>:<tagHex>``.

A chave vem de ENCRYPTION_KEY: se já for hex de 64 caracteres é usada
diretamente, senão é derivada com PBKDF2-HMAC-SHA512. O salt da derivação
é configurado (CREDENTIAL_KDF_SALT) porque o envelope não o carrega.
"""

from __future__ import annotations

import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from app.infra.crypto.constants import (
    DEFAULT_KDF_SALT,
    ENVELOPE_FIELDS,
    ENVELOPE_SEPARATOR,
    HEX_KEY_LENGTH,
    IV_SIZE,
    KDF_ITERATIONS,
    KEY_SIZE,
    TAG_SIZE,
)
from app.infra.crypto.errors import CredentialVaultConfigError, DecryptionError

_HEX_KEY_RE = re.compile(rf"[0-9a-fA-F]{{{HEX_KEY_LENGTH}}}")
_HEX_FIELD_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


def derive_key(
    secret: str,
    salt: str = DEFAULT_KDF_SALT,
    iterations: int = KDF_ITERATIONS,
) -> bytes:
    """Resolve a chave AES-256 a partir do segredo configurado.

    Args:
        secret: ENCRYPTION_KEY (hex de 64 chars ou passphrase)
        salt: Salt da derivação (ignorado para chave hex)
        iterations: Iterações do PBKDF2

    Returns:
        Chave de 32 bytes

    Raises:
        CredentialVaultConfigError: Se o segredo estiver vazio
    """
    if not secret:
        raise CredentialVaultConfigError("ENCRYPTION_KEY não configurado")

    if _HEX_KEY_RE.fullmatch(secret):
        return bytes.fromhex(secret)

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=KEY_SIZE,
        salt=salt.encode("utf-8"),
        iterations=iterations,
    )
    return kdf.derive(secret.encode("utf-8"))


def generate_encryption_key() -> str:
    """Gera uma ENCRYPTION_KEY aleatória (32 bytes, hex)."""
    return os.urandom(KEY_SIZE).hex()


class CredentialVault:
    """Cifra e decifra credenciais de provedor (ex.: access tokens)."""

    def __init__(
        self,
        secret: str,
        *,
        kdf_salt: str = DEFAULT_KDF_SALT,
        kdf_iterations: int = KDF_ITERATIONS,
    ) -> None:
        self._aesgcm = AESGCM(derive_key(secret, kdf_salt, kdf_iterations))

    def encrypt(self, plaintext: str) -> str:
        """Cifra texto com IV aleatório e retorna o envelope hex.

        Duas chamadas com o mesmo texto produzem envelopes diferentes.
        """
        iv = os.urandom(IV_SIZE)
        sealed = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
        return ENVELOPE_SEPARATOR.join((iv.hex(), ciphertext.hex(), tag.hex()))

    def decrypt(self, envelope: str) -> str:
        """Decifra um envelope ``iv:ciphertext:tag``.

        Raises:
            DecryptionError: Envelope malformado, tag inválida ou chave errada
        """
        iv, ciphertext, tag = _split_envelope(envelope)
        try:
            plaintext = self._aesgcm.decrypt(iv, ciphertext + tag, None)
        except InvalidTag as exc:
            raise DecryptionError("authentication_failed") from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("invalid_plaintext_encoding") from exc


def _split_envelope(envelope: str) -> tuple[bytes, bytes, bytes]:
    if not isinstance(envelope, str):
        raise DecryptionError("envelope_not_string")

    parts = envelope.split(ENVELOPE_SEPARATOR)
    if len(parts) != ENVELOPE_FIELDS:
        raise DecryptionError("invalid_envelope_format")

    if not all(_HEX_FIELD_RE.fullmatch(part) for part in parts):
        raise DecryptionError("invalid_envelope_hex")

    iv, ciphertext, tag = (bytes.fromhex(part) for part in parts)

    if len(iv) != IV_SIZE or len(tag) != TAG_SIZE:
        raise DecryptionError("invalid_envelope_lengths")

    return iv, ciphertext, tag
