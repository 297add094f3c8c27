from __future__ import annotations

import time
from typing import TYPE_CHECKING, Optional

from ..errors import InvalidAmount, NoOpenPosition, PositionAlreadyOpen
from ..model import LedgerState, Position, Settlement, require_amount
from .settlement import LossPolicy, compute_pnl

if TYPE_CHECKING:
    from ..ledger.collateral import CollateralLedger


class PositionEngine:
    """Single-slot leveraged position per account.

    Per account the only legal transitions are Closed -> open -> Open and
    Open -> close -> Closed. Closing settles the signed pnl straight into the
    collateral ledger.
    """

    def __init__(self, state: LedgerState, collateral: CollateralLedger,
                 loss_policy: LossPolicy = LossPolicy.CLAMP):
        self.state = state
        self.collateral = collateral
        self.loss_policy = LossPolicy(loss_policy)

    def position_of(self, account: str) -> Position:
        return self.state.positions.get(account, Position.closed())

    def is_open(self, account: str) -> bool:
        return self.position_of(account).is_open

    def open(self, account: str, quantity: int, is_long: bool) -> Position:
        require_amount(quantity, "quantity")
        if self.is_open(account):
            raise PositionAlreadyOpen(f"{account} already has an open position")
        # Only a non-zero balance is required; the quantity is not sized
        # against it.
        if self.collateral.balance_of(account) == 0:
            raise InvalidAmount(f"{account} has no collateral")
        pos = Position(quantity=quantity, is_long=bool(is_long), entry_price=self.state.price, is_open=True)
        self.state.positions[account] = pos
        return pos

    def close(self, account: str, ts: Optional[int] = None) -> Settlement:
        pos = self.position_of(account)
        if not pos.is_open:
            raise NoOpenPosition(f"{account} has no open position")
        exit_price = self.state.price
        pnl = compute_pnl(pos.quantity, pos.is_long, pos.entry_price, exit_price)
        before = self.collateral.balance_of(account)
        applied = self.collateral.apply_pnl(account, pnl, self.loss_policy)
        self.state.positions[account] = Position.closed()
        settlement = Settlement(
            account=account,
            ts=ts if ts is not None else int(time.time() * 1000),
            quantity=pos.quantity,
            is_long=pos.is_long,
            entry_price=pos.entry_price,
            exit_price=exit_price,
            pnl=pnl,
            applied=applied,
            balance_before=before,
            balance_after=before + applied,
        )
        self.state.settlements.append(settlement)
        return settlement
