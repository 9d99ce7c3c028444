"""Proposals: implementações do ProposalLookup."""

from __future__ import annotations

from app.infra.proposals.memory_proposal_lookup import (
    TEMPLATE_PROPOSAL,
    MemoryProposalLookup,
)

__all__ = [
    "TEMPLATE_PROPOSAL",
    "MemoryProposalLookup",
]
