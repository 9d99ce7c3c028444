"""Redis FlowStore: backend compartilhado entre instâncias.

Cada FlowState é gravado como JSON com TTL (SETEX) sob o namespace
`authorization_flow:`.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from app.domain.flow import FlowState
from app.protocols.flow_store import DEFAULT_FLOW_TTL_SECONDS, FlowStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

FLOW_PREFIX = "authorization_flow:"


class RedisFlowStore(FlowStoreProtocol):
    """FlowStore usando Redis assíncrono.

    Args:
        redis_client: Cliente redis.asyncio
    """

    def __init__(self, redis_client: AsyncRedis[bytes]) -> None:
        self._redis = redis_client

    def _key(self, proposal_id: int) -> str:
        return f"{FLOW_PREFIX}{proposal_id}"

    async def save_async(
        self,
        state: FlowState,
        ttl_seconds: int = DEFAULT_FLOW_TTL_SECONDS,
    ) -> None:
        data = json.dumps(state.to_dict())
        try:
            await self._redis.setex(self._key(state.proposal_id), ttl_seconds, data)
        except RedisError as exc:
            raise RedisConnectionError(f"Falha ao gravar FlowState: {exc}") from exc
        logger.debug(
            "flow_state_saved",
            extra={"proposal_id": state.proposal_id, "step": state.step.value, "ttl": ttl_seconds},
        )

    async def load_async(self, proposal_id: int) -> FlowState | None:
        try:
            data = await self._redis.get(self._key(proposal_id))
        except RedisError as exc:
            raise RedisConnectionError(f"Falha ao ler FlowState: {exc}") from exc
        if data is None:
            return None
        try:
            return FlowState.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning(
                "flow_state_load_error",
                extra={"proposal_id": proposal_id, "error": str(e)},
            )
            return None

    async def delete_async(self, proposal_id: int) -> bool:
        try:
            result = await self._redis.delete(self._key(proposal_id))
        except RedisError as exc:
            raise RedisConnectionError(f"Falha ao remover FlowState: {exc}") from exc
        return bool(result)

    async def exists_async(self, proposal_id: int) -> bool:
        try:
            return bool(await self._redis.exists(self._key(proposal_id)))
        except RedisError as exc:
            raise RedisConnectionError(f"Falha ao consultar FlowState: {exc}") from exc

    async def ping_async(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError:
            return False
