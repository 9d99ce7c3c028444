"""Protocolo do serviço externo de consulta de propostas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.proposal import Proposal


class ProposalLookupProtocol(Protocol):
    """Fornece a proposta por id.

    Levanta ProposalNotFoundError (utils.errors) quando inexistente.
    """

    async def get_proposal(self, proposal_id: int) -> Proposal: ...
