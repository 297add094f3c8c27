from .engine import PositionEngine
from .settlement import LossPolicy, compute_pnl

__all__ = ["PositionEngine", "LossPolicy", "compute_pnl"]
