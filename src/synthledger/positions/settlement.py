"""Settlement arithmetic for leveraged positions.

All values are plain Python ints in token base units, so nothing overflows;
the bounded domain (prices and amounts up to 2**256 - 1) is enforced at the
transaction entry points instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from ..errors import InsufficientCollateralForLoss, InvalidPrice


class LossPolicy(str, Enum):
    """What a losing close does when the loss exceeds the account balance."""

    CLAMP = "clamp"
    REVERT = "revert"


def compute_pnl(quantity: int, is_long: bool, entry_price: int, exit_price: int) -> int:
    """Signed pnl of closing `quantity` opened at `entry_price` at `exit_price`.

    pnl = quantity * direction * (exit - entry) / entry, with the magnitude
    truncated toward zero. Long and short results are exact negations.
    """
    if entry_price <= 0:
        raise InvalidPrice(f"entry price must be positive, got {entry_price}")
    move = exit_price - entry_price
    magnitude = (quantity * abs(move)) // entry_price
    if move < 0:
        magnitude = -magnitude
    return magnitude if is_long else -magnitude


def apply_loss_policy(balance: int, pnl: int, policy: LossPolicy) -> Tuple[int, int]:
    """Return (applied delta, balance after) for `pnl` against `balance`."""
    if pnl >= 0 or -pnl <= balance:
        return pnl, balance + pnl
    if policy == LossPolicy.REVERT:
        raise InsufficientCollateralForLoss(
            f"loss {-pnl} exceeds collateral balance {balance}"
        )
    return -balance, 0
