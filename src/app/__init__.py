"""App: orquestração do fluxo de autorização e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos de proposta e do fluxo
- services/: validação de crédito, orquestrador, locks por proposta
- infra/: implementações concretas de IO (stores, bancos, propostas)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; fsm governa; config configura; utils apoia.
"""
