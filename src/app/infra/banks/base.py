"""Base dos adapters simulados de banco.

Cada banco difere apenas em constantes (prefixo do id externo e
vocabulário de status). A submissão espera uma latência fixa que
representa rede/processamento do banco e sempre aceita a proposta.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, ClassVar

from app.domain.flow import BankResponse, BankStatus
from app.protocols.bank_adapter import BankAdapterProtocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.domain.proposal import Proposal

logger = logging.getLogger(__name__)

DEFAULT_LATENCY_SECONDS = 1.5


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class SimulatedBankAdapter(BankAdapterProtocol):
    """Adapter simulado; subclasses definem apenas as constantes.

    Args:
        latency_seconds: Latência simulada da submissão
        clock_ms: Fonte de timestamp em ms para o id externo
    """

    BANK_CODE: ClassVar[str]
    LABEL: ClassVar[str]
    ID_PREFIX: ClassVar[str]
    STATUS: ClassVar[str]
    STATUS_MESSAGE: ClassVar[str]

    def __init__(
        self,
        latency_seconds: float = DEFAULT_LATENCY_SECONDS,
        clock_ms: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._latency_seconds = latency_seconds
        self._clock_ms = clock_ms

    @property
    def bank_code(self) -> str:
        return self.BANK_CODE

    @property
    def label(self) -> str:
        return self.LABEL

    @property
    def latency_seconds(self) -> float:
        return self._latency_seconds

    async def submit_proposal(self, proposal: Proposal) -> BankResponse:
        submitted_at = self._clock_ms()
        logger.info(
            "bank_submission_started",
            extra={"bank_code": self.BANK_CODE, "proposal_id": proposal.id, "simulated": True},
        )
        await asyncio.sleep(self._latency_seconds)
        return BankResponse.accepted(f"{self.ID_PREFIX}_{submitted_at}")

    async def get_proposal_status(self, external_id: str) -> BankStatus:
        return BankStatus(status=self.STATUS, details={"message": self.STATUS_MESSAGE})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bank_code={self.BANK_CODE!r})"
