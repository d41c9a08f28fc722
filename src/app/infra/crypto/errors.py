"""Erros do cofre de credenciais.

DecryptionError é sempre fatal para o chamador: nunca deve ser engolido
nem substituído por um valor padrão.
"""


class CredentialVaultError(Exception):
    """Erro base do cofre de credenciais."""


class CredentialVaultConfigError(CredentialVaultError):
    """Segredo de criptografia ausente ou inválido."""


class DecryptionError(CredentialVaultError):
    """Envelope malformado, adulterado ou cifrado com outra chave."""
