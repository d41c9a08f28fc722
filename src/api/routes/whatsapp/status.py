"""Status da conexão com a Graph API para a conta padrão."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.connectors.whatsapp.meta_errors import WhatsAppApiError
from app.bootstrap.whatsapp_factory import create_default_whatsapp_client

logger = logging.getLogger(__name__)

router = APIRouter()


class WhatsAppStatusResponse(BaseModel):
    """Resposta do status do provedor."""

    connected: bool
    phone_number: str | None = None
    verified_name: str | None = None
    quality_rating: str | None = None
    error: str | None = None


def _unavailable(error: str) -> JSONResponse:
    body = WhatsAppStatusResponse(connected=False, error=error)
    return JSONResponse(
        content=body.model_dump(),
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@router.get("/whatsapp/status", response_model=WhatsAppStatusResponse)
async def whatsapp_status() -> WhatsAppStatusResponse | JSONResponse:
    """Verifica conectividade e retorna metadados do número remetente.

    Returns:
        200 com metadados, ou 503 se não configurado ou sem conexão.
    """
    try:
        client = create_default_whatsapp_client()
    except ValueError:
        logger.warning("whatsapp_status_not_configured")
        return _unavailable("not_configured")

    async with client:
        if not await client.check_connectivity():
            return _unavailable("not_connected")
        try:
            info = await client.get_phone_number_info()
        except WhatsAppApiError as exc:
            logger.warning(
                "whatsapp_status_lookup_failed",
                extra={"error_kind": str(exc.kind)},
            )
            return _unavailable(str(exc.kind))

    return WhatsAppStatusResponse(
        connected=True,
        phone_number=info.display_phone_number,
        verified_name=info.verified_name,
        quality_rating=info.quality_rating,
    )
