"""Agregador de settings do asset_migrator.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)

# Pipeline de migração
from config.settings.migration import (
    MAX_BATCH_SIZE,
    MAX_CONCURRENCY_LIMIT,
    MigrationSettings,
    get_migration_settings,
)

# APIs externas
from config.settings.roblox import (
    RobloxSettings,
    get_roblox_settings,
)

__all__ = [
    # Constants
    "MAX_BATCH_SIZE",
    "MAX_CONCURRENCY_LIMIT",
    # Base
    "BaseSettings",
    "Environment",
    # Migration
    "MigrationSettings",
    # Roblox
    "RobloxSettings",
    "get_base_settings",
    "get_migration_settings",
    "get_roblox_settings",
]
