"""Agregador de rotas: registra todos os routers da API.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.authorization_flow.router import router as authorization_flow_router
from api.routes.bank_integration.router import router as bank_integration_router
from api.routes.health.router import router as health_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(
        authorization_flow_router,
        prefix="/authorization-flow",
        tags=["authorization-flow"],
    )
    api_router.include_router(
        bank_integration_router,
        prefix="/bank-integration",
        tags=["bank-integration"],
    )

    return api_router
