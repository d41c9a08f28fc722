"""App — núcleo do gateway: wiring, coordenação e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: despacho idempotente de webhooks
- infra/: implementações concretas de IO (stores, cofre de credenciais)
- protocols/: contratos/interfaces
- observability/: correlation_id para logs estruturados
- constants/: constantes da aplicação

Padrão: app executa; api adapta; config configura; utils apoia.
"""
