"""Endpoints de integração bancária (catálogo de bancos)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.bootstrap import get_adapter_registry
from app.infra.banks import AdapterRegistry

router = APIRouter()


class SupportedBanksResponse(BaseModel):
    banks: list[str]


@router.get("/supported-banks", response_model=SupportedBanksResponse)
async def supported_banks(
    registry: AdapterRegistry = Depends(get_adapter_registry),
) -> SupportedBanksResponse:
    """Códigos de banco aceitos em bankCode."""
    return SupportedBanksResponse(banks=registry.supported_banks())
