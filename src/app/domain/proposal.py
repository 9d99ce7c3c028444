"""Modelo de proposta de crédito (entrada somente-leitura do fluxo).

Fornecida pelo serviço externo de propostas; imutável durante a
execução de um fluxo.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

DEFAULT_PRODUCT_NAME = "Crédito Pessoal"


class ProposalStatus(StrEnum):
    """Status de negócio exposto no resumo (currentStatus)."""

    OPEN = "open"
    IN_ANALYSIS = "in_analysis"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class Client:
    """Cliente titular da proposta.

    Atributos:
        id: Identificador do cliente
        name: Nome (PII, nunca logar)
        email: Email (opcional, PII)
        cpf: CPF (opcional, PII)
    """

    id: int
    name: str
    email: str | None = None
    cpf: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "cpf": self.cpf}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Client:
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            email=data.get("email"),
            cpf=data.get("cpf"),
        )


@dataclass(frozen=True, slots=True)
class Proposal:
    """Proposta de crédito em análise.

    Atributos:
        id: Identificador da proposta
        requested_amount: Valor solicitado em reais (>= 0)
        status: Status livre vindo do serviço de propostas
        client: Cliente titular
        product_name: Produto de crédito
    """

    id: int
    requested_amount: float
    status: str
    client: Client
    product_name: str = DEFAULT_PRODUCT_NAME

    def __post_init__(self) -> None:
        if self.requested_amount < 0:
            raise ValueError(
                f"requested_amount não pode ser negativo, recebido: {self.requested_amount}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "requested_amount": self.requested_amount,
            "status": self.status,
            "client": self.client.to_dict(),
            "product_name": self.product_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Proposal:
        return cls(
            id=int(data["id"]),
            requested_amount=float(data.get("requested_amount", 0)),
            status=data.get("status", ProposalStatus.OPEN.value),
            client=Client.from_dict(data.get("client", {})),
            product_name=data.get("product_name", DEFAULT_PRODUCT_NAME),
        )
