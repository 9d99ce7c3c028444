"""Endpoints do fluxo de autorização de propostas.

Endpoints:
- POST /authorization-flow/start/{proposal_id}: valida e submete ao banco
- GET /authorization-flow/{proposal_id}/summary: polling do resumo
- DELETE /authorization-flow/{proposal_id}/cancel: cancela o fluxo
- POST /authorization-flow/{proposal_id}/advance: avança via status do banco

Falhas de negócio voltam como dados (200). Proposta inexistente → 404;
banco desconhecido com política reject → 400.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.authorization_flow.schemas import (
    CancelResponse,
    FlowSummaryResponse,
    StartAuthorizationRequest,
)
from app.bootstrap import get_authorization_flow_service
from app.services.authorization_flow import AuthorizationFlowService
from utils.errors import ProposalNotFoundError, UnknownBankCodeError

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(exc: ProposalNotFoundError) -> HTTPException:
    logger.warning("proposal_not_found", extra={"proposal_id": exc.proposal_id})
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post(
    "/start/{proposal_id}",
    response_model=FlowSummaryResponse,
    response_model_exclude_none=True,
)
async def start_flow(
    proposal_id: int,
    body: StartAuthorizationRequest,
    service: AuthorizationFlowService = Depends(get_authorization_flow_service),
) -> FlowSummaryResponse:
    try:
        summary = await service.start(proposal_id, body.bank_code)
    except ProposalNotFoundError as exc:
        raise _not_found(exc) from exc
    except UnknownBankCodeError as exc:
        logger.warning(
            "unknown_bank_code_rejected",
            extra={"proposal_id": proposal_id, "bank_code": exc.bank_code},
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return FlowSummaryResponse.from_summary(summary)


@router.get(
    "/{proposal_id}/summary",
    response_model=FlowSummaryResponse,
    response_model_exclude_none=True,
)
async def get_flow_summary(
    proposal_id: int,
    service: AuthorizationFlowService = Depends(get_authorization_flow_service),
) -> FlowSummaryResponse:
    try:
        summary = await service.get_summary(proposal_id)
    except ProposalNotFoundError as exc:
        raise _not_found(exc) from exc
    return FlowSummaryResponse.from_summary(summary)


@router.delete("/{proposal_id}/cancel", response_model=CancelResponse)
async def cancel_flow(
    proposal_id: int,
    service: AuthorizationFlowService = Depends(get_authorization_flow_service),
) -> CancelResponse:
    result = await service.cancel(proposal_id)
    return CancelResponse(message=result["message"])


@router.post(
    "/{proposal_id}/advance",
    response_model=FlowSummaryResponse,
    response_model_exclude_none=True,
)
async def advance_flow(
    proposal_id: int,
    service: AuthorizationFlowService = Depends(get_authorization_flow_service),
) -> FlowSummaryResponse:
    try:
        summary = await service.advance(proposal_id)
    except ProposalNotFoundError as exc:
        raise _not_found(exc) from exc
    return FlowSummaryResponse.from_summary(summary)
