"""Agregador de settings do fluxo de autorização.

Re-exporta settings e getters cacheados de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.flow import (
    KNOWN_BANK_CODES,
    FlowSettings,
    FlowStoreBackend,
    ProgressMode,
    UnknownBankPolicyName,
    get_flow_settings,
)

__all__ = [
    "KNOWN_BANK_CODES",
    "BaseSettings",
    "Environment",
    "FlowSettings",
    "FlowStoreBackend",
    "ProgressMode",
    "UnknownBankPolicyName",
    "get_base_settings",
    "get_flow_settings",
]
