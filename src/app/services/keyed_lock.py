"""Locks asyncio por chave (uma seção crítica por proposta).

Além da exclusão mútua, cada chave ativa carrega um epoch que pode ser
invalidado sem tomar o lock. Quem segura o lock compara o epoch antes
de gravar e descarta a escrita se alguém invalidou no meio do caminho.
Entradas são removidas quando não há mais ninguém segurando ou
esperando a chave.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Hashable


class _LockEntry:
    __slots__ = ("epoch", "lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0
        self.epoch = 0


class KeyedLock:
    """Conjunto de asyncio.Lock criados sob demanda por chave."""

    def __init__(self) -> None:
        self._entries: dict[Hashable, _LockEntry] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        entry = self._entries.get(key)
        if entry is None:
            entry = _LockEntry()
            self._entries[key] = entry

        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]

    def epoch(self, key: Hashable) -> int:
        """Epoch atual da chave (0 quando ninguém a segura)."""
        entry = self._entries.get(key)
        return entry.epoch if entry is not None else 0

    def invalidate(self, key: Hashable) -> None:
        """Invalida escritas pendentes de quem segura ou espera a chave."""
        entry = self._entries.get(key)
        if entry is not None:
            entry.epoch += 1

    def is_locked(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)
