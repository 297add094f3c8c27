from __future__ import annotations

from ..errors import InvalidPrice
from ..model import MAX_UINT256, LedgerState


def require_price(price: int) -> int:
    if isinstance(price, bool) or not isinstance(price, int):
        raise InvalidPrice(f"price must be an integer, got {price!r}")
    if price <= 0 or price > MAX_UINT256:
        raise InvalidPrice(f"price out of range: {price}")
    return price


def set_price(state: LedgerState, new_price: int) -> int:
    """Replace the reference price; return the previous one."""
    require_price(new_price)
    old = state.price
    state.price = new_price
    return old
