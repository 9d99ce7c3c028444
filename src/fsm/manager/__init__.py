"""
Exports públicos do módulo fsm/manager.
"""

from fsm.manager.machine import (
    FlowStateMachine,
    create_fsm,
)

__all__ = [
    "FlowStateMachine",
    "create_fsm",
]
