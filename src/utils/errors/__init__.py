"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InfrastructureError,
    RedisConnectionError,
)

__all__ = [
    "InfrastructureError",
    "RedisConnectionError",
]
