import pytest

from src.synthledger.asset import SyntheticAsset
from src.synthledger.errors import InvalidAmount, NoOpenPosition, PositionAlreadyOpen
from src.synthledger.token import StableToken, new_address

UNIT = 10**18
TOKEN_MINT = 10 * UNIT
QUANT = 5 * UNIT


def _funded(deposit: bool = True):
    token = StableToken()
    owner = new_address()
    asset = SyntheticAsset(token, owner)
    trader = new_address()
    token.mint(trader, TOKEN_MINT)
    token.approve(trader, asset.address, TOKEN_MINT)
    if deposit:
        asset.deposit_collateral(trader, TOKEN_MINT)
    return asset, owner, trader


def test_open_long_records_position():
    asset, _, trader = _funded()
    asset.open_position(trader, QUANT, True)
    assert asset.get_user_position_open_info(trader) is True
    pos = asset.get_user_leveraged_positions(trader)
    assert pos[0] == QUANT
    assert pos.is_long is True
    assert pos.entry_price == 1000
    # opening moves no collateral
    assert asset.get_user_collateral_balance(trader) == TOKEN_MINT


def test_close_clears_position():
    asset, _, trader = _funded()
    asset.open_position(trader, QUANT, True)
    asset.close_position(trader)
    assert asset.get_user_position_open_info(trader) is False
    assert asset.get_user_leveraged_positions(trader)[0] == 0
    # unchanged price, no pnl
    assert asset.get_user_collateral_balance(trader) == TOKEN_MINT


def test_second_open_fails():
    asset, _, trader = _funded()
    asset.open_position(trader, QUANT, True)
    with pytest.raises(PositionAlreadyOpen):
        asset.open_position(trader, QUANT, False)
    assert asset.get_user_leveraged_positions(trader).is_long is True


def test_close_without_position_fails():
    asset, _, trader = _funded()
    with pytest.raises(NoOpenPosition):
        asset.close_position(trader)


def test_close_twice_fails():
    asset, owner, trader = _funded()
    asset.open_position(trader, QUANT, True)
    asset.update_synthetic_asset_price(owner, 1200)
    asset.close_position(trader)
    with pytest.raises(NoOpenPosition):
        asset.close_position(trader)
    assert asset.get_user_collateral_balance(trader) == 11 * UNIT


def test_open_requires_collateral():
    asset, _, trader = _funded(deposit=False)
    with pytest.raises(InvalidAmount):
        asset.open_position(trader, QUANT, True)


def test_open_is_not_sized_against_collateral():
    asset, _, trader = _funded()
    asset.open_position(trader, 1000 * TOKEN_MINT, True)
    assert asset.get_user_position_open_info(trader) is True


@pytest.mark.parametrize("quantity", [0, -5, 2**256])
def test_open_rejects_invalid_quantity(quantity):
    asset, _, trader = _funded()
    with pytest.raises(InvalidAmount):
        asset.open_position(trader, quantity, True)
    assert asset.get_user_position_open_info(trader) is False


@pytest.mark.parametrize(
    "is_long,exit_price,expected",
    [
        (True, 1200, 11 * UNIT),
        (True, 800, 9 * UNIT),
        (False, 800, 11 * UNIT),
        (False, 1200, 9 * UNIT),
    ],
)
def test_reference_scenarios(is_long, exit_price, expected):
    asset, owner, trader = _funded()
    asset.open_position(trader, QUANT, is_long)
    asset.update_synthetic_asset_price(owner, exit_price)
    settlement = asset.close_position(trader)
    assert asset.get_user_position_open_info(trader) is False
    assert asset.get_user_leveraged_positions(trader)[0] == 0
    assert asset.get_user_collateral_balance(trader) == expected
    assert settlement.applied == expected - TOKEN_MINT
    assert settlement.entry_price == 1000
    assert settlement.exit_price == exit_price


def test_price_round_trip_settles_to_zero():
    asset, owner, trader = _funded()
    asset.open_position(trader, QUANT, False)
    asset.update_synthetic_asset_price(owner, 1375)
    asset.update_synthetic_asset_price(owner, 1000)
    settlement = asset.close_position(trader)
    assert settlement.pnl == 0
    assert asset.get_user_collateral_balance(trader) == TOKEN_MINT


def test_entry_price_stamped_at_open():
    asset, owner, trader = _funded()
    asset.update_synthetic_asset_price(owner, 2000)
    asset.open_position(trader, QUANT, True)
    asset.update_synthetic_asset_price(owner, 3000)
    assert asset.get_user_leveraged_positions(trader).entry_price == 2000
    asset.close_position(trader)
    # 5 * 1000 / 2000 = 2.5
    assert asset.get_user_collateral_balance(trader) == TOKEN_MINT + 5 * UNIT // 2


def test_reopen_after_close():
    asset, owner, trader = _funded()
    asset.open_position(trader, QUANT, True)
    asset.close_position(trader)
    asset.open_position(trader, QUANT, False)
    assert asset.get_user_leveraged_positions(trader) == (QUANT, False, 1000)


def test_settlement_journal_per_account():
    asset, owner, trader = _funded()
    asset.open_position(trader, QUANT, True)
    asset.update_synthetic_asset_price(owner, 1200)
    asset.close_position(trader)
    assert len(asset.settlements()) == 1
    assert asset.settlements(trader)[0].pnl == UNIT
    assert asset.settlements("0xother") == []
