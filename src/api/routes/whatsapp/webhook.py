"""Endpoints de webhook do WhatsApp.

Endpoints:
- GET /webhook/whatsapp: verificação de webhook (Meta challenge)
- POST /webhook/whatsapp: recebimento de eventos (statuses e messages)

Fluxo:
1. GET: Meta envia challenge, respondemos com hub.challenge
2. POST: validamos assinatura e formato, despachamos com dedupe

Segurança:
- Validação HMAC obrigatória em POST
- POST responde sempre 200: a Meta reenvia qualquer outra resposta, e
  rejeições ficam registradas em log
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from api.connectors.whatsapp.webhook.receive import (
    InvalidPayloadError,
    InvalidSignatureError,
    parse_webhook_request,
)
from api.connectors.whatsapp.webhook.verify import (
    ChallengeMismatchError,
    verify_webhook_challenge,
)
from api.routes.whatsapp.security import apply_security_headers
from app.bootstrap import get_webhook_dispatcher
from app.observability import (
    CORRELATION_ID_HEADER,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from config.settings import get_whatsapp_settings

logger = logging.getLogger(__name__)

router = APIRouter()

WEBHOOK_PATH = "/webhook/whatsapp"

_CHALLENGE_PARAMS = ("hub.mode", "hub.verify_token", "hub.challenge")


def _text_response(content: str, status_code: int) -> Response:
    return apply_security_headers(
        Response(content=content, media_type="text/plain", status_code=status_code)
    )


def _ack(result: str) -> JSONResponse:
    return apply_security_headers(
        JSONResponse(
            content={"status": result, "correlation_id": get_correlation_id()},
            status_code=status.HTTP_200_OK,
        )
    )


@router.get(WEBHOOK_PATH)
async def verify_webhook(request: Request) -> Response:
    """Verificação de webhook — responde ao challenge da Meta.

    Query params esperados:
    - hub.mode: deve ser "subscribe"
    - hub.verify_token: deve corresponder ao configurado
    - hub.challenge: valor a retornar

    Returns:
        Texto do challenge, 400 se faltar parâmetro ou 403 se divergir.
    """
    params = request.query_params
    if any(params.get(name) is None for name in _CHALLENGE_PARAMS):
        logger.warning(
            "webhook_verification_missing_params",
            extra={"channel": "whatsapp"},
        )
        return _text_response("Bad Request", status.HTTP_400_BAD_REQUEST)

    settings = get_whatsapp_settings()
    hub_mode = params.get("hub.mode")

    try:
        challenge = verify_webhook_challenge(
            hub_mode=hub_mode,
            hub_verify_token=params.get("hub.verify_token"),
            hub_challenge=params.get("hub.challenge"),
            expected_token=settings.verify_token,
        )
    except ChallengeMismatchError as exc:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "whatsapp", "error": str(exc)},
        )
        return _text_response("Forbidden", status.HTTP_403_FORBIDDEN)

    logger.info(
        "webhook_verified",
        extra={"channel": "whatsapp", "hub_mode": hub_mode},
    )
    # Meta espera o challenge como texto puro
    return _text_response(challenge, status.HTTP_200_OK)


@router.post(WEBHOOK_PATH)
async def receive_webhook(request: Request) -> JSONResponse:
    """Recebimento de eventos do WhatsApp.

    Validações:
    1. Assinatura HMAC (X-Hub-Signature-256) sobre o corpo bruto
    2. JSON válido com object=whatsapp_business_account e entry em lista

    Returns:
        200 com ``{"status": "received"|"ignored", "correlation_id"}``.
    """
    # Configura correlation_id para rastreamento
    token = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))

    try:
        settings = get_whatsapp_settings()

        # Lê body bruto para validação de assinatura
        raw_body = await request.body()

        try:
            payload = parse_webhook_request(
                raw_body=raw_body,
                headers=dict(request.headers),
                secret=settings.app_secret or None,
            )
        except InvalidSignatureError as exc:
            logger.warning(
                "webhook_signature_invalid",
                extra={"channel": "whatsapp", "error": str(exc)},
            )
            return _ack("ignored")
        except InvalidPayloadError as exc:
            logger.warning(
                "webhook_payload_invalid",
                extra={"channel": "whatsapp", "error": str(exc)},
            )
            return _ack("ignored")

        logger.info(
            "webhook_received",
            extra={
                "channel": "whatsapp",
                "payload_size": len(raw_body),
                "entries": len(payload["entry"]),
            },
        )

        try:
            await get_webhook_dispatcher().dispatch(payload)
        except Exception as exc:
            # Store de dedupe indisponível ou wiring inválido
            logger.exception(
                "webhook_processing_failed",
                extra={"channel": "whatsapp", "error_type": type(exc).__name__},
            )

        return _ack("received")

    finally:
        reset_correlation_id(token)
