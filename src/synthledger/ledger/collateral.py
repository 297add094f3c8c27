from __future__ import annotations

import logging

from ..errors import InvalidAmount, TransferFailed
from ..model import LedgerState, require_amount
from ..token import CollateralToken
from ..positions.settlement import LossPolicy, apply_loss_policy

log = logging.getLogger("synthledger.ledger")


class CollateralLedger:
    """Free collateral per account, backed by tokens held at `address`.

    Balances are read from `state` on every call; the state object may be
    rolled back underneath this ledger by the enclosing transaction.
    """

    def __init__(self, state: LedgerState, token: CollateralToken, address: str):
        self.state = state
        self.token = token
        self.address = address

    def balance_of(self, account: str) -> int:
        return self.state.balances.get(account, 0)

    def total(self) -> int:
        return sum(self.state.balances.values())

    def deposit(self, account: str, amount: int) -> int:
        require_amount(amount)
        self._pull(account, amount)
        balance = self.balance_of(account) + amount
        self.state.balances[account] = balance
        self.state.tokens_in += amount
        return balance

    def withdraw(self, account: str, amount: int) -> int:
        require_amount(amount)
        balance = self.balance_of(account)
        if amount > balance:
            raise InvalidAmount(f"withdrawal {amount} exceeds balance {balance}")
        # Debit before the token push.
        self.state.balances[account] = balance - amount
        self.state.tokens_out += amount
        self._push(account, amount)
        return balance - amount

    def apply_pnl(self, account: str, pnl: int, policy: LossPolicy) -> int:
        """Settle a signed pnl into the account; return the delta applied."""
        applied, after = apply_loss_policy(self.balance_of(account), pnl, policy)
        if applied != pnl:
            log.warning("loss clamped for %s: pnl=%d applied=%d", account, pnl, applied)
        self.state.balances[account] = after
        self.state.realized_pnl += applied
        return applied

    def _pull(self, account: str, amount: int) -> None:
        try:
            ok = self.token.transfer_from(self.address, account, self.address, amount)
        except Exception as e:
            raise TransferFailed(f"pull of {amount} from {account} raised: {e}") from e
        if not ok:
            raise TransferFailed(f"pull of {amount} from {account} rejected by token")

    def _push(self, account: str, amount: int) -> None:
        try:
            ok = self.token.transfer(self.address, account, amount)
        except Exception as e:
            raise TransferFailed(f"push of {amount} to {account} raised: {e}") from e
        if not ok:
            raise TransferFailed(f"push of {amount} to {account} rejected by token")
