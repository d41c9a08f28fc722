"""Validators por canal — validação de requests antes de chamadas externas.

Estrutura:
- whatsapp/: destinatário E.164 para a WhatsApp Cloud API
"""

__all__: list[str] = []
