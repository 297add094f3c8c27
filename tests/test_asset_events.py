import pytest

from src.synthledger.asset import SyntheticAsset
from src.synthledger.errors import InvalidAmount, ReentrantCall
from src.synthledger.events.bus import to_json
from src.synthledger.events.schema import (
    CollateralDeposited,
    EventEnvelope,
    PositionClosed,
    PositionOpened,
    PriceUpdated,
)
from src.synthledger.token import StableToken

UNIT = 10**18


class _Capture:
    def __init__(self):
        self.published = []

    def publish(self, env):
        self.published.append(env)


def _asset():
    capture = _Capture()
    token = StableToken()
    asset = SyntheticAsset(token, "0xowner", publisher=capture)
    token.mint("0xa", 10 * UNIT)
    token.approve("0xa", asset.address, 10 * UNIT)
    return asset, capture.published


def test_events_emitted_in_order():
    asset, published = _asset()
    asset.deposit_collateral("0xa", 10 * UNIT)
    asset.open_position("0xa", 5 * UNIT, True)
    asset.update_synthetic_asset_price("0xowner", 1200)
    asset.close_position("0xa")

    types = [env.event.event_type for env in published]
    assert types == ["collateral_deposited", "position_opened", "price_updated", "position_closed"]
    assert [env.sequence for env in published] == [1, 2, 3, 4]
    assert published == asset.events

    closed = published[-1].event
    assert isinstance(closed, PositionClosed)
    assert closed.pnl == UNIT
    assert closed.balance == 11 * UNIT
    assert published[0].correlation_id == "deposit:0xa"


def test_reverted_transaction_emits_nothing():
    asset, published = _asset()
    with pytest.raises(InvalidAmount):
        asset.withdraw_collateral("0xa", UNIT)
    assert published == []
    assert asset.events == []


def test_envelope_json_keeps_big_integers_exact():
    evt = CollateralDeposited(ts=1, asset="0xasset", account="0xa", amount=2**200, balance=2**200)
    line = to_json(EventEnvelope(correlation_id="c1", event=evt))
    assert '"event_type":"collateral_deposited"' in line
    assert str(2**200) in line


def test_event_models():
    opened = PositionOpened(ts=1, asset="0xasset", account="0xa", quantity=5, is_long=False, entry_price=1000)
    price = PriceUpdated(ts=2, asset="0xasset", account="0xowner", old_price=1000, new_price=800)
    assert opened.event_type == "position_opened"
    assert price.new_price == 800


def test_refused_reentrant_call_emits_nothing():
    class _CallbackToken(StableToken):
        asset = None

        def transfer(self, sender, to, amount):
            ok = super().transfer(sender, to, amount)
            if self.asset is not None:
                asset, self.asset = self.asset, None
                with pytest.raises(ReentrantCall):
                    asset.deposit_collateral(to, amount)
            return ok

    capture = _Capture()
    token = _CallbackToken()
    asset = SyntheticAsset(token, "0xowner", publisher=capture)
    token.mint("0xa", 2 * UNIT)
    token.approve("0xa", asset.address, 2 * UNIT)
    asset.deposit_collateral("0xa", UNIT)
    token.asset = asset
    asset.withdraw_collateral("0xa", UNIT)

    types = [env.event.event_type for env in capture.published]
    assert types == ["collateral_deposited", "collateral_withdrawn"]
