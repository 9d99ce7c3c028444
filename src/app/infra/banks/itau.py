"""Adapter simulado do Itaú."""

from __future__ import annotations

from app.infra.banks.base import SimulatedBankAdapter


class ItauAdapter(SimulatedBankAdapter):
    BANK_CODE = "itau"
    LABEL = "Itaú"
    ID_PREFIX = "ITAU"
    STATUS = "PENDING"
    STATUS_MESSAGE = "Proposta pendente via mock"
