"""Formatters de logging estruturado.

Define formatters para logs JSON com campos obrigatórios:
- correlation_id
- service
- timestamp (asctime)
- level
- logger (name)
- message
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem de emissão dos campos obrigatórios
LOG_FIELD_ORDER = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

# Campos obrigatórios em todo log estruturado
REQUIRED_LOG_FIELDS = frozenset(LOG_FIELD_ORDER)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Returns:
        JsonFormatter configurado para logs estruturados.

    Exemplo de output:
        {
            "asctime": "2026-02-02 10:30:00,123",
            "level": "INFO",
            "logger": "api.connectors.whatsapp.meta_logging",
            "message": "whatsapp_api_response",
            "correlation_id": "abc-123",
            "service": "disparo_gateway",
            "status_code": 200
        }
    """
    format_string = " ".join(f"%({field})s" for field in LOG_FIELD_ORDER)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        json_ensure_ascii=False,
    )
