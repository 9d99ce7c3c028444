"""
Exports públicos do módulo fsm/states.
"""

from fsm.states.flow import (
    ENTRY_STEPS,
    TERMINAL_STEPS,
    UNKNOWN_STEP,
    FlowStep,
    is_terminal,
    is_valid_step,
)

__all__ = [
    "ENTRY_STEPS",
    "TERMINAL_STEPS",
    "UNKNOWN_STEP",
    "FlowStep",
    "is_terminal",
    "is_valid_step",
]
