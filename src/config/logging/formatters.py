"""Saída dos logs do fluxo de autorização.

Em produção cada evento (flow_started, bank_submission_completed, métricas
de latência) sai como uma linha JSON; os campos do `extra` (proposal_id,
bank_code, transitions) entram ao lado da base fixa em REQUIRED_LOG_FIELDS.
Em desenvolvimento e nos testes o formato é texto, com service e
correlation_id no prefixo da linha.
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = frozenset(
    {
        "asctime",
        "levelname",
        "name",
        "message",
        "correlation_id",
        "service",
    }
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

TEXT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(service)s:%(correlation_id)s] %(name)s: %(message)s"


def create_json_formatter() -> JsonFormatter:
    """Formatter JSON de uma linha por evento, com level/logger renomeados.

    Exemplo (fim do start de uma proposta):
        {
            "asctime": "2026-10-19T10:30:00",
            "level": "INFO",
            "logger": "app.services.authorization_flow",
            "message": "flow_start_finished",
            "correlation_id": "3f2a9c",
            "service": "fluxo-autorizacao",
            "proposal_id": 42,
            "step": "awaiting_response"
        }
    """
    format_string = " ".join(f"%({field})s" for field in sorted(REQUIRED_LOG_FIELDS))

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )


def create_text_formatter() -> logging.Formatter:
    """Linha legível: `<hora> <nível> [<service>:<correlation_id>] <logger>: <evento>`."""
    return logging.Formatter(TEXT_LOG_FORMAT)
