"""Configuração do pytest para o projeto asset_migrator."""

import sys
from pathlib import Path

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

import pytest  # noqa: E402

from config.settings import (  # noqa: E402
    get_base_settings,
    get_migration_settings,
    get_roblox_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Getters cacheados relêem o ambiente a cada teste."""
    for getter in (get_base_settings, get_migration_settings, get_roblox_settings):
        getter.cache_clear()
    yield
    for getter in (get_base_settings, get_migration_settings, get_roblox_settings):
        getter.cache_clear()
