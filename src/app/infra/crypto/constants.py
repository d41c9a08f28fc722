"""Constantes criptográficas do cofre de credenciais."""

KEY_SIZE = 32  # AES-256
IV_SIZE = 16  # 128 bits, formato legado dos envelopes persistidos
TAG_SIZE = 16  # 128 bits
HEX_KEY_LENGTH = KEY_SIZE * 2

KDF_ITERATIONS = 100_000
DEFAULT_KDF_SALT = "disparo-gateway/credential-vault/v1"

ENVELOPE_SEPARATOR = ":"
ENVELOPE_FIELDS = 3
