from __future__ import annotations

from typing import Optional
import os
from prometheus_client import Counter, Gauge, REGISTRY

_collateral_deposited: Optional[Counter] = None
_collateral_withdrawn: Optional[Counter] = None
_positions_opened: Optional[Counter] = None
_positions_closed: Optional[Counter] = None
_settlement_gain: Optional[Counter] = None
_settlement_loss: Optional[Counter] = None
_tx_reverted: Optional[Counter] = None
_price_gauge: Optional[Gauge] = None
_paused_gauge: Optional[Gauge] = None


class _NoOp:
    def labels(self, *args, **kwargs):
        return self
    def inc(self, *args, **kwargs):
        return None
    def set(self, *args, **kwargs):
        return None


def _find_collector(name: str):
    coll = getattr(REGISTRY, "_names_to_collectors", {}).get(name)
    if coll is not None:
        return coll
    for coll in list(getattr(REGISTRY, "_collector_to_names", {}).keys()):  # type: ignore[attr-defined]
        if getattr(coll, "_name", None) == name:
            return coll
    return None


def _safe_counter(name: str, doc: str, labelnames):
    if os.getenv("DISABLE_PROMETHEUS", "0") == "1":
        return _NoOp()
    try:
        return Counter(name, doc, labelnames)
    except ValueError:
        # Already registered, e.g. the package imported under two names
        return _find_collector(name) or _NoOp()


def _safe_gauge_labels(name: str, doc: str, labelnames):
    if os.getenv("DISABLE_PROMETHEUS", "0") == "1":
        return _NoOp()
    try:
        return Gauge(name, doc, labelnames)
    except ValueError:
        coll = _find_collector(name)
        if isinstance(coll, Gauge):
            return coll
        return _NoOp()


def get_collateral_deposited_total():
    global _collateral_deposited
    if _collateral_deposited is None:
        _collateral_deposited = _safe_counter(
            "collateral_deposited_total", "Collateral deposited in token units", []
        )
    return _collateral_deposited


def get_collateral_withdrawn_total():
    global _collateral_withdrawn
    if _collateral_withdrawn is None:
        _collateral_withdrawn = _safe_counter(
            "collateral_withdrawn_total", "Collateral withdrawn in token units", []
        )
    return _collateral_withdrawn


def get_positions_opened_total():
    global _positions_opened
    if _positions_opened is None:
        _positions_opened = _safe_counter("positions_opened_total", "Positions opened", ["side"])
    return _positions_opened


def get_positions_closed_total():
    global _positions_closed
    if _positions_closed is None:
        _positions_closed = _safe_counter("positions_closed_total", "Positions closed", ["side"])
    return _positions_closed


def get_settlement_gain_total():
    """Counter: realized gains applied to collateral on close."""
    global _settlement_gain
    if _settlement_gain is None:
        _settlement_gain = _safe_counter("settlement_gain_total", "Realized settlement gains", [])
    return _settlement_gain


def get_settlement_loss_total():
    """Counter: realized losses (absolute value) applied to collateral on close.

    Kept separate from gains because counters cannot be decremented.
    """
    global _settlement_loss
    if _settlement_loss is None:
        _settlement_loss = _safe_counter("settlement_loss_total", "Realized settlement losses", [])
    return _settlement_loss


def get_transactions_reverted_total():
    global _tx_reverted
    if _tx_reverted is None:
        _tx_reverted = _safe_counter(
            "transactions_reverted_total", "Transactions rolled back", ["op", "reason"]
        )
    return _tx_reverted


def get_price_gauge():
    global _price_gauge
    if _price_gauge is None:
        _price_gauge = _safe_gauge_labels("synthetic_asset_price", "Reference price", ["asset"])
    return _price_gauge


def get_paused_gauge():
    global _paused_gauge
    if _paused_gauge is None:
        _paused_gauge = _safe_gauge_labels("contract_paused", "1 when the ledger is paused", ["asset"])
    return _paused_gauge


def record_reverted(op: str, reason: str) -> None:
    try:
        get_transactions_reverted_total().labels(op, reason).inc()
    except Exception:
        pass


def record_settlement(applied: int) -> None:
    try:
        if applied > 0:
            get_settlement_gain_total().inc(applied)
        elif applied < 0:
            get_settlement_loss_total().inc(-applied)
    except Exception:
        pass


def record_price(asset: str, price: int) -> None:
    try:
        get_price_gauge().labels(asset).set(price)
    except Exception:
        pass


def record_paused(asset: str, active: bool) -> None:
    try:
        get_paused_gauge().labels(asset).set(1 if active else 0)
    except Exception:
        pass


def record_committed(evt) -> None:
    """Apply the metric side of one committed ledger event."""
    kind = evt.event_type
    try:
        if kind == "collateral_deposited":
            get_collateral_deposited_total().inc(evt.amount)
        elif kind == "collateral_withdrawn":
            get_collateral_withdrawn_total().inc(evt.amount)
        elif kind == "position_opened":
            get_positions_opened_total().labels("long" if evt.is_long else "short").inc()
        elif kind == "position_closed":
            get_positions_closed_total().labels("long" if evt.is_long else "short").inc()
            record_settlement(evt.applied)
        elif kind == "price_updated":
            record_price(evt.asset, evt.new_price)
        elif kind in ("paused", "unpaused"):
            record_paused(evt.asset, kind == "paused")
    except Exception:
        pass
