from .graph_build import GraphBuildWorker
from .vault_load import VaultLoadWorker

__all__ = [
    "GraphBuildWorker",
    "VaultLoadWorker",
]
