from __future__ import annotations

from typing import Literal, Optional, Union
from pydantic import BaseModel


# ---- Base + envelope ----

class BaseEvent(BaseModel):
    event_type: str
    ts: int
    asset: str
    account: Optional[str] = None


class EventEnvelope(BaseModel):
    schema_version: str = "v1"
    correlation_id: str
    sequence: int = 0
    event: BaseEvent


# ---- Event types ----
# Amounts and prices are unbounded integers in token base units, so they are
# serialized as plain ints (JSON numbers), never floats.

class CollateralDeposited(BaseEvent):
    event_type: Literal["collateral_deposited"] = "collateral_deposited"
    amount: int
    balance: int


class CollateralWithdrawn(BaseEvent):
    event_type: Literal["collateral_withdrawn"] = "collateral_withdrawn"
    amount: int
    balance: int


class PositionOpened(BaseEvent):
    event_type: Literal["position_opened"] = "position_opened"
    quantity: int
    is_long: bool
    entry_price: int


class PositionClosed(BaseEvent):
    event_type: Literal["position_closed"] = "position_closed"
    quantity: int
    is_long: bool
    entry_price: int
    exit_price: int
    pnl: int
    applied: int
    balance: int


class PriceUpdated(BaseEvent):
    event_type: Literal["price_updated"] = "price_updated"
    old_price: int
    new_price: int


class Paused(BaseEvent):
    event_type: Literal["paused"] = "paused"


class Unpaused(BaseEvent):
    event_type: Literal["unpaused"] = "unpaused"


class OwnershipTransferred(BaseEvent):
    event_type: Literal["ownership_transferred"] = "ownership_transferred"
    previous_owner: str
    new_owner: str


AnyEvent = Union[
    CollateralDeposited,
    CollateralWithdrawn,
    PositionOpened,
    PositionClosed,
    PriceUpdated,
    Paused,
    Unpaused,
    OwnershipTransferred,
]
