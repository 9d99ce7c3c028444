"""Exceções do fluxo de autorização.

Falhas de negócio (inelegibilidade, recusa do banco) nunca viram exceção:
são representadas como dados no FlowState. Aqui ficam apenas falhas de
infraestrutura e erros de requisição.
"""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class ProposalLookupError(InfrastructureError):
    """Falha ao consultar o serviço externo de propostas."""


class ProposalNotFoundError(ProposalLookupError):
    """Proposta inexistente no serviço externo."""

    def __init__(self, proposal_id: int) -> None:
        super().__init__(f"Proposta {proposal_id} não encontrada")
        self.proposal_id = proposal_id


class FlowError(Exception):
    """Base para erros de requisição do fluxo."""


class UnknownBankCodeError(FlowError):
    """Código de banco desconhecido com política de rejeição ativa."""

    def __init__(self, bank_code: str, supported: list[str]) -> None:
        super().__init__(
            f"Banco não suportado: {bank_code!r}. Suportados: {', '.join(supported)}"
        )
        self.bank_code = bank_code
        self.supported = supported
