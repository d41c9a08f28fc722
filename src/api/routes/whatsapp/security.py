"""Headers de segurança aplicados às respostas de webhook."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import Response

WEBHOOK_SECURITY_HEADERS: dict[str, str] = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Content-Security-Policy": "default-src 'none'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}


def apply_security_headers(response: Response) -> Response:
    """Aplica headers no-cache/nosniff/frame-deny e retorna a resposta."""
    for name, value in WEBHOOK_SECURITY_HEADERS.items():
        response.headers[name] = value
    return response
