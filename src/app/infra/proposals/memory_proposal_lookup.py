"""Lookup de propostas em memória.

Simula o serviço externo de propostas: qualquer id existe e recebe
a proposta modelo, a menos que uma proposta específica tenha sido
registrada (ou o id tenha sido marcado como inexistente).
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from app.domain.proposal import Client, Proposal, ProposalStatus
from utils.errors import ProposalNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable

TEMPLATE_PROPOSAL = Proposal(
    id=0,
    requested_amount=10000.0,
    status=ProposalStatus.OPEN.value,
    client=Client(
        id=1,
        name="João da Silva",
        email="joao@example.com",
        cpf="123.456.789-00",
    ),
)


class MemoryProposalLookup:
    """ProposalLookup em memória (dev/test).

    Args:
        proposals: Propostas específicas por id
        missing_ids: Ids que devem levantar ProposalNotFoundError
        template: Proposta modelo para os demais ids (None desativa)
    """

    def __init__(
        self,
        proposals: Iterable[Proposal] = (),
        missing_ids: Iterable[int] = (),
        template: Proposal | None = TEMPLATE_PROPOSAL,
    ) -> None:
        self._proposals: dict[int, Proposal] = {p.id: p for p in proposals}
        self._missing: set[int] = set(missing_ids)
        self._template = template

    def add(self, proposal: Proposal) -> None:
        self._proposals[proposal.id] = proposal
        self._missing.discard(proposal.id)

    async def get_proposal(self, proposal_id: int) -> Proposal:
        if proposal_id in self._missing:
            raise ProposalNotFoundError(proposal_id)

        proposal = self._proposals.get(proposal_id)
        if proposal is not None:
            return proposal

        if self._template is None:
            raise ProposalNotFoundError(proposal_id)
        return replace(self._template, id=proposal_id)
