"""Contexto de requisição nos logs do fluxo de autorização.

O middleware HTTP abre um escopo de correlation_id (header
X-Correlation-ID ou id novo); este filter copia esse id e o SERVICE_NAME
configurado para cada record. Assim os eventos de uma mesma chamada
ficam agrupáveis sem que o serviço repita os campos.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class CorrelationIdFilter(logging.Filter):
    """Preenche `service` e `correlation_id` antes da formatação.

    Args:
        service_name: Valor de BaseSettings.service_name no startup.
        correlation_id_getter: Leitor do escopo ativo (get_correlation_id).
            Fora de uma requisição, e sem getter, o campo fica vazio.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Nunca descarta. Um correlation_id já presente no `extra` (métricas
        emitidas fora do escopo HTTP) tem prioridade sobre o do contexto.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True
