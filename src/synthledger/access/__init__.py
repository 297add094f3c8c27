"""Ownership, pause gate and reference price."""

from .control import require_not_paused, require_owner
from .price import require_price

__all__ = ["require_not_paused", "require_owner", "require_price"]
