"""Connectors - adapters de borda para APIs externas.

Estrutura:
- roblox/: asset delivery (lote), criador do asset, experiências, publicação
"""

__all__: list[str] = []
