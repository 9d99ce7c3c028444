"""Entrypoint do serviço de fluxo de autorização.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router
from app.bootstrap import get_flow_store, initialize_app, validate_runtime_settings
from app.observability import correlation_scope
from config.logging import get_logger
from config.settings import get_base_settings, get_flow_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

CORRELATION_HEADER = "x-correlation-id"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria o FlowStore (e o cliente Redis quando configurado)

    Shutdown:
    - Fecha o cliente Redis
    """
    logger.info("app_starting", extra={"environment": get_base_settings().environment})
    validate_runtime_settings()
    app.state.redis_client = None

    if get_flow_settings().store_backend == "redis":
        from app.bootstrap.clients import create_async_redis_client

        app.state.redis_client = create_async_redis_client()
    get_flow_store()

    yield

    logger.info("app_shutting_down")
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()


async def correlation_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga x-correlation-id (ou gera um novo) para os logs da requisição."""
    with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
        response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="Fluxo de Autorização",
        description="Validação de crédito e submissão de propostas a bancos",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # TODO: restringir origins quando o domínio do painel estiver definido
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.middleware("http")(correlation_id_middleware)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured")

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("app_dev_server_starting")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
