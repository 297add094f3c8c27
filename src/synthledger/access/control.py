"""Ownership and pause gate for the ledger.

The halt state lives on the `LedgerState` of one SyntheticAsset rather than in
module globals, so independent ledgers never share a pause flag. Each helper
is a plain precondition evaluated once at a transaction entry point.
"""
from __future__ import annotations

from ..errors import ContractNotPaused, ContractPaused, InvalidOwner, NotOwner
from ..model import LedgerState


def require_owner(state: LedgerState, sender: str) -> None:
    """Raise NotOwner unless `sender` is the current owner."""
    if sender != state.owner:
        raise NotOwner(f"{sender} is not the owner")


def require_not_paused(state: LedgerState) -> None:
    """Raise ContractPaused if the halt flag is set."""
    if state.paused:
        raise ContractPaused("ledger is paused")


def set_paused(state: LedgerState, active: bool) -> None:
    """Flip the halt flag."""
    if active and state.paused:
        raise ContractPaused("ledger is already paused")
    if not active and not state.paused:
        raise ContractNotPaused("ledger is not paused")
    state.paused = bool(active)


def transfer_owner(state: LedgerState, new_owner: str) -> str:
    if not new_owner:
        raise InvalidOwner("new owner must be a non-empty identity")
    previous = state.owner
    state.owner = new_owner
    return previous
