from __future__ import annotations

from typing import Dict, Protocol, Tuple
import uuid

STABLE_DECIMALS = 6


def new_address() -> str:
    """Return a fresh 0x-prefixed 20-byte account identity."""
    return "0x" + uuid.uuid4().hex + uuid.uuid4().hex[:8]


class CollateralToken(Protocol):
    """The fungible-token surface the collateral ledger depends on."""

    def transfer_from(self, spender: str, from_account: str, to: str, amount: int) -> bool: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def balance_of(self, account: str) -> int: ...

    def allowance(self, owner: str, spender: str) -> int: ...

    def decimals(self) -> int: ...


class StableToken:
    """In-memory stablecoin with faucet minting.

    Transfers report failure by returning False, never by raising.
    """

    def __init__(self, name: str = "USD Coin", symbol: str = "USDC", decimals: int = STABLE_DECIMALS):
        self.name = name
        self.symbol = symbol
        self._decimals = int(decimals)
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply = 0

    def decimals(self) -> int:
        return self._decimals

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        self._balances[account] = self.balance_of(account) + amount
        self._total_supply += amount

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0:
            return False
        self._allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        return self._move(sender, to, amount)

    def transfer_from(self, spender: str, from_account: str, to: str, amount: int) -> bool:
        allowed = self.allowance(from_account, spender)
        if amount > allowed:
            return False
        if not self._move(from_account, to, amount):
            return False
        self._allowances[(from_account, spender)] = allowed - amount
        return True

    def _move(self, sender: str, to: str, amount: int) -> bool:
        if amount < 0 or self.balance_of(sender) < amount:
            return False
        self._balances[sender] = self.balance_of(sender) - amount
        self._balances[to] = self.balance_of(to) + amount
        return True
