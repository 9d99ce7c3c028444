"""Adapter simulado do Bradesco (banco padrão do registry)."""

from __future__ import annotations

from app.infra.banks.base import SimulatedBankAdapter


class BradescoAdapter(SimulatedBankAdapter):
    BANK_CODE = "bradesco"
    LABEL = "Bradesco"
    ID_PREFIX = "BRD"
    STATUS = "APPROVED"
    STATUS_MESSAGE = "Proposta aprovada via mock"
