"""Payload builders por canal — construção de payloads para APIs externas.

Estrutura:
- whatsapp/: WhatsApp Cloud API (texto e template)
"""

__all__: list[str] = []
