"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhooks, health, status do provedor)
- Validação inicial de request (headers, query params)
- Delegação para connectors/coordinators
- Respostas HTTP apropriadas

Estrutura:
- routes/whatsapp/: webhook e status WhatsApp
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
