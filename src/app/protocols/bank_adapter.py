"""Protocolo de integração com bancos (submissão e consulta de propostas)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.flow import BankResponse, BankStatus
    from app.domain.proposal import Proposal


class BankAdapterProtocol(ABC):
    """Contrato uniforme para um banco externo.

    submit_proposal nunca levanta exceção por recusa de negócio:
    a recusa volta como BankResponse(success=False, error=...).
    """

    @property
    @abstractmethod
    def bank_code(self) -> str:
        """Código do banco (ex: 'bradesco')."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Nome legível do banco."""

    @abstractmethod
    async def submit_proposal(self, proposal: Proposal) -> BankResponse:
        """Envia a proposta ao banco."""

    @abstractmethod
    async def get_proposal_status(self, external_id: str) -> BankStatus:
        """Consulta o status de uma proposta já submetida."""
