from bom_tree.backend import BOMTreeBackend
from bom_tree.config import BOMTreeSettings

__all__ = ["BOMTreeBackend", "BOMTreeSettings"]
