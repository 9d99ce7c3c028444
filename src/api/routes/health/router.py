"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.bootstrap import get_flow_store
from app.protocols.flow_store import FlowStoreProtocol
from config.settings import get_base_settings

logger = logging.getLogger(__name__)

router = APIRouter()

PING_TIMEOUT_SECONDS = 2.0


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(
    flow_store: FlowStoreProtocol = Depends(get_flow_store),
) -> JSONResponse:
    """Readiness: FlowStore precisa responder."""
    store_check = await _check_flow_store(flow_store)
    ready = store_check.status == "ok"

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "flow_store": {**store_check.as_dict(), "store": type(flow_store).__name__},
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_flow_store(flow_store: FlowStoreProtocol) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        reachable = await asyncio.wait_for(flow_store.ping_async(), timeout=PING_TIMEOUT_SECONDS)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_flow_store_check_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    if not reachable:
        return DependencyCheck(status="failed", error="unreachable")
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
