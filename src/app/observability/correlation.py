"""correlation_id por requisição, guardado em ContextVar.

O middleware HTTP abre um `correlation_scope` com o header recebido;
logs e métricas emitidos dentro do escopo (inclusive em tasks criadas
nele) leem o mesmo id via `get_correlation_id()`.

Header inválido (vazio, longo demais ou com caracteres fora de
[A-Za-z0-9._-]) é descartado e um novo id é gerado.
"""

from __future__ import annotations

import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

MAX_CORRELATION_ID_LENGTH = 128
_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._-]+$")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """correlation_id ativo ("" fora de um escopo)."""
    return _correlation_id.get()


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def normalize_correlation_id(raw: str | None) -> str | None:
    """Valor do header pronto para uso, ou None se não aproveitável."""
    if raw is None:
        return None
    value = raw.strip()
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH:
        return None
    if not _VALID_CORRELATION_ID.match(value):
        return None
    return value


@contextmanager
def correlation_scope(raw: str | None = None) -> Iterator[str]:
    """Ativa um correlation_id até o fim do bloco e devolve o id ativo."""
    value = normalize_correlation_id(raw) or generate_correlation_id()
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
