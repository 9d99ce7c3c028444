"""Protocolos e contratos do core do fluxo de autorização."""

from .bank_adapter import BankAdapterProtocol
from .flow_store import DEFAULT_FLOW_TTL_SECONDS, FlowStoreProtocol
from .proposal_lookup import ProposalLookupProtocol

__all__ = [
    "DEFAULT_FLOW_TTL_SECONDS",
    "BankAdapterProtocol",
    "FlowStoreProtocol",
    "ProposalLookupProtocol",
]
