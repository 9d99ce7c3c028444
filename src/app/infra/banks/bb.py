"""Adapter simulado do Banco do Brasil."""

from __future__ import annotations

from app.infra.banks.base import SimulatedBankAdapter


class BancoDoBrasilAdapter(SimulatedBankAdapter):
    BANK_CODE = "bb"
    LABEL = "Banco do Brasil"
    ID_PREFIX = "BB"
    STATUS = "IN_ANALYSIS"
    STATUS_MESSAGE = "Proposta em análise via mock"
