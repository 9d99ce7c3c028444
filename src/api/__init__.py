"""API: camada de borda HTTP.

Responsabilidades:
- Receber requests e validar payloads (schemas Pydantic)
- Delegar ao orquestrador do fluxo (app/services)
- Traduzir exceções de domínio em status HTTP

Subpastas:
- routes/: endpoints HTTP (fluxo de autorização, bancos, health)

NÃO PODE conter: FSM, regras de validação de crédito, acesso direto a stores.
"""
