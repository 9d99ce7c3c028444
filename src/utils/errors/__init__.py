"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    FlowError,
    InfrastructureError,
    ProposalLookupError,
    ProposalNotFoundError,
    RedisConnectionError,
    UnknownBankCodeError,
)

__all__ = [
    "FlowError",
    "InfrastructureError",
    "ProposalLookupError",
    "ProposalNotFoundError",
    "RedisConnectionError",
    "UnknownBankCodeError",
]
