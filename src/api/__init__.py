"""API — camada de borda e adapter da Graph API.

Responsabilidades:
- Receber webhooks da Meta
- Validar assinaturas e payloads
- Construir payloads para a Graph API
- Validar destinatários antes de chamadas externas

Subpastas:
- connectors/: adapter HTTP do WhatsApp (outbound, webhook, erros)
- payload_builders/: construção de payloads para a Graph API
- validators/: validação de destinatário
- routes/: endpoints HTTP (webhook, status, health)

NÃO PODE conter: dedupe, roteamento de eventos, wiring de dependências.
"""
