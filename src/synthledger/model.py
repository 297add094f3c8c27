from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, NamedTuple

from .errors import InvalidAmount

MAX_UINT256 = 2**256 - 1


@dataclass(frozen=True)
class Position:
    quantity: int
    is_long: bool
    entry_price: int
    is_open: bool

    @classmethod
    def closed(cls) -> "Position":
        return cls(quantity=0, is_long=False, entry_price=0, is_open=False)


class LeveragedPosition(NamedTuple):
    quantity: int
    is_long: bool
    entry_price: int


@dataclass
class Settlement:
    account: str
    ts: int
    quantity: int
    is_long: bool
    entry_price: int
    exit_price: int
    pnl: int
    applied: int
    balance_before: int
    balance_after: int


@dataclass
class LedgerState:
    """Everything a transaction may mutate, owned by one SyntheticAsset."""

    owner: str
    price: int
    paused: bool = False
    balances: Dict[str, int] = field(default_factory=dict)
    positions: Dict[str, Position] = field(default_factory=dict)
    tokens_in: int = 0
    tokens_out: int = 0
    realized_pnl: int = 0
    settlements: List[Settlement] = field(default_factory=list)

    def checkpoint(self) -> "LedgerState":
        # Positions are frozen and settlements are append-only, so shallow
        # container copies are enough to roll back.
        return replace(
            self,
            balances=dict(self.balances),
            positions=dict(self.positions),
            settlements=list(self.settlements),
        )

    def restore(self, snapshot: "LedgerState") -> None:
        self.owner = snapshot.owner
        self.price = snapshot.price
        self.paused = snapshot.paused
        self.balances = snapshot.balances
        self.positions = snapshot.positions
        self.tokens_in = snapshot.tokens_in
        self.tokens_out = snapshot.tokens_out
        self.realized_pnl = snapshot.realized_pnl
        self.settlements = snapshot.settlements


def require_amount(amount: int, what: str = "amount") -> int:
    """Reject anything but an integer in (0, 2**256 - 1]."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{what} must be an integer, got {amount!r}")
    if amount <= 0 or amount > MAX_UINT256:
        raise InvalidAmount(f"{what} out of range: {amount}")
    return amount
