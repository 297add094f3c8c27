"""
SyntheticAsset: margin-trading ledger over a reference stablecoin.

What it does:
- Holds collateral per account (deposit/withdraw against the token).
- Lets each account hold one leveraged long or short position stamped with the
  owner-pushed reference price, and settles the signed pnl into collateral on
  close.
- Gates every mutating operation behind the pause flag and the owner-only ones
  behind the owner identity.

Every mutating method is one transaction: the ledger state is checkpointed on
entry and restored if anything raises, so a failed call leaves no trace. Events
and metrics are recorded only once the transaction commits. Token transfers
cannot be undone, so a mutating call made while another transaction is in
flight (a token callback) is refused with ReentrantCall before it does anything.
"""
from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .access.control import (
    require_not_paused,
    require_owner,
    set_paused,
    transfer_owner,
)
from .access.price import require_price, set_price
from .errors import ReentrantCall
from .events.bus import EventPublisher
from .events.schema import (
    BaseEvent,
    CollateralDeposited,
    CollateralWithdrawn,
    EventEnvelope,
    OwnershipTransferred,
    Paused,
    PositionClosed,
    PositionOpened,
    PriceUpdated,
    Unpaused,
)
from .ledger.collateral import CollateralLedger
from .metrics.ledger import record_committed, record_paused, record_price, record_reverted
from .model import LedgerState, LeveragedPosition, Settlement
from .positions.engine import PositionEngine
from .positions.settlement import LossPolicy
from .token import CollateralToken, new_address

DEFAULT_PRICE = 1000

log = logging.getLogger("synthledger.asset")


def _now_ms() -> int:
    return int(time.time() * 1000)


class SyntheticAsset:
    def __init__(
        self,
        token: CollateralToken,
        deployer: str,
        initial_price: int = DEFAULT_PRICE,
        loss_policy: LossPolicy = LossPolicy.CLAMP,
        address: Optional[str] = None,
        publisher: Optional[EventPublisher] = None,
    ):
        require_price(initial_price)
        self.address = address or new_address()
        self.token = token
        self.state = LedgerState(owner=deployer, price=initial_price)
        self.collateral = CollateralLedger(self.state, token, self.address)
        self.positions = PositionEngine(self.state, self.collateral, loss_policy)
        self.publisher = publisher or EventPublisher()
        self.events: List[EventEnvelope] = []
        self._in_flight: Optional[str] = None
        self._sequence = 0
        record_paused(self.address, False)
        record_price(self.address, initial_price)

    # ---- transactions ----

    @contextmanager
    def _transaction(self, op: str, sender: str) -> Iterator[List[BaseEvent]]:
        if self._in_flight is not None:
            record_reverted(op, ReentrantCall.code)
            self._log("reverted", op, sender, reason=ReentrantCall.code)
            raise ReentrantCall(f"{op} called while {self._in_flight} is in flight")
        snapshot = self.state.checkpoint()
        pending: List[BaseEvent] = []
        self._in_flight = op
        try:
            yield pending
        except Exception as e:
            self.state.restore(snapshot)
            reason = getattr(e, "code", type(e).__name__)
            record_reverted(op, reason)
            self._log("reverted", op, sender, reason=reason)
            raise
        finally:
            self._in_flight = None
        for evt in pending:
            self._emit(op, sender, evt)
        self._log("committed", op, sender)

    def _emit(self, op: str, sender: str, evt: BaseEvent) -> None:
        self._sequence += 1
        env = EventEnvelope(correlation_id=f"{op}:{sender}", sequence=self._sequence, event=evt)
        self.events.append(env)
        record_committed(evt)
        self.publisher.publish(env)

    def _log(self, status: str, op: str, sender: str, **extra: Any) -> None:
        payload: Dict[str, Any] = {
            "status": status,
            "op": op,
            "asset": self.address,
            "sender": sender,
            "ts": _now_ms(),
        }
        payload.update(extra)
        log.info(json.dumps(payload, separators=(",", ":")))

    # ---- collateral ----

    def deposit_collateral(self, sender: str, amount: int) -> int:
        with self._transaction("deposit", sender) as pending:
            require_not_paused(self.state)
            balance = self.collateral.deposit(sender, amount)
            pending.append(CollateralDeposited(ts=_now_ms(), asset=self.address, account=sender,
                                               amount=amount, balance=balance))
        return balance

    def withdraw_collateral(self, sender: str, amount: int) -> int:
        with self._transaction("withdraw", sender) as pending:
            require_not_paused(self.state)
            balance = self.collateral.withdraw(sender, amount)
            pending.append(CollateralWithdrawn(ts=_now_ms(), asset=self.address, account=sender,
                                               amount=amount, balance=balance))
        return balance

    # ---- positions ----

    def open_position(self, sender: str, quantity: int, is_long: bool) -> LeveragedPosition:
        with self._transaction("open", sender) as pending:
            require_not_paused(self.state)
            pos = self.positions.open(sender, quantity, is_long)
            pending.append(PositionOpened(ts=_now_ms(), asset=self.address, account=sender,
                                          quantity=pos.quantity, is_long=pos.is_long,
                                          entry_price=pos.entry_price))
        return LeveragedPosition(pos.quantity, pos.is_long, pos.entry_price)

    def close_position(self, sender: str) -> Settlement:
        with self._transaction("close", sender) as pending:
            require_not_paused(self.state)
            s = self.positions.close(sender, ts=_now_ms())
            pending.append(PositionClosed(ts=s.ts, asset=self.address, account=sender,
                                          quantity=s.quantity, is_long=s.is_long,
                                          entry_price=s.entry_price, exit_price=s.exit_price,
                                          pnl=s.pnl, applied=s.applied, balance=s.balance_after))
        return s

    # ---- owner operations ----

    def update_synthetic_asset_price(self, sender: str, new_price: int) -> None:
        with self._transaction("update_price", sender) as pending:
            require_not_paused(self.state)
            require_owner(self.state, sender)
            old = set_price(self.state, new_price)
            pending.append(PriceUpdated(ts=_now_ms(), asset=self.address, account=sender,
                                        old_price=old, new_price=new_price))

    def pause(self, sender: str) -> None:
        with self._transaction("pause", sender) as pending:
            require_owner(self.state, sender)
            set_paused(self.state, True)
            pending.append(Paused(ts=_now_ms(), asset=self.address, account=sender))

    def unpause(self, sender: str) -> None:
        with self._transaction("unpause", sender) as pending:
            require_owner(self.state, sender)
            set_paused(self.state, False)
            pending.append(Unpaused(ts=_now_ms(), asset=self.address, account=sender))

    def transfer_ownership(self, sender: str, new_owner: str) -> None:
        with self._transaction("transfer_ownership", sender) as pending:
            require_owner(self.state, sender)
            previous = transfer_owner(self.state, new_owner)
            pending.append(OwnershipTransferred(ts=_now_ms(), asset=self.address, account=sender,
                                                previous_owner=previous, new_owner=new_owner))

    # ---- reads ----

    def get_synthetic_asset_price(self) -> int:
        return self.state.price

    def get_user_collateral_balance(self, account: str) -> int:
        return self.collateral.balance_of(account)

    def get_user_position_open_info(self, account: str) -> bool:
        return self.positions.is_open(account)

    def get_user_leveraged_positions(self, account: str) -> LeveragedPosition:
        pos = self.positions.position_of(account)
        return LeveragedPosition(pos.quantity, pos.is_long, pos.entry_price)

    def owner(self) -> str:
        return self.state.owner

    def paused(self) -> bool:
        return self.state.paused

    def settlements(self, account: Optional[str] = None) -> List[Settlement]:
        if account is None:
            return list(self.state.settlements)
        return [s for s in self.state.settlements if s.account == account]

    def accounting(self) -> Dict[str, int]:
        """Token flows versus ledger balances.

        total_balances always equals tokens_in - tokens_out + realized_pnl;
        token_balance falls short of total_balances when gains were credited
        that no deposit funds.
        """
        return {
            "tokens_in": self.state.tokens_in,
            "tokens_out": self.state.tokens_out,
            "realized_pnl": self.state.realized_pnl,
            "total_balances": self.collateral.total(),
            "token_balance": self.token.balance_of(self.address),
        }
