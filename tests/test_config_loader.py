import pytest
from pydantic import ValidationError

from src.synthledger.config.loader import Settings, load_settings
from src.synthledger.deploy import deploy
from src.synthledger.positions.settlement import LossPolicy


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("SYNTHLEDGER_INITIAL_PRICE", raising=False)
    monkeypatch.delenv("SYNTHLEDGER_LOSS_POLICY", raising=False)
    s = load_settings(str(tmp_path / "nope.yaml"))
    assert s.initial_price == 1000
    assert s.loss_policy == LossPolicy.CLAMP
    assert s.token.decimals == 6


def test_yaml_and_env_overrides(tmp_path, monkeypatch):
    p = tmp_path / "config.yaml"
    p.write_text("initial_price: 2000\nloss_policy: clamp\ntoken:\n  symbol: TUSD\n")
    monkeypatch.setenv("SYNTHLEDGER_LOSS_POLICY", "REVERT")
    monkeypatch.delenv("SYNTHLEDGER_INITIAL_PRICE", raising=False)
    s = load_settings(str(p))
    assert s.initial_price == 2000
    assert s.loss_policy == LossPolicy.REVERT
    assert s.token.symbol == "TUSD"

    monkeypatch.setenv("SYNTHLEDGER_INITIAL_PRICE", "1500")
    assert load_settings(str(p)).initial_price == 1500


def test_invalid_settings_rejected():
    with pytest.raises(ValidationError):
        Settings(initial_price=0)
    with pytest.raises(ValidationError):
        Settings(loss_policy="liquidate")


def test_deploy_uses_settings():
    d = deploy(Settings(initial_price=1750, loss_policy="revert"), deployer="0xdeployer")
    assert d.asset.get_synthetic_asset_price() == 1750
    assert d.asset.positions.loss_policy == LossPolicy.REVERT
    assert d.asset.owner() == "0xdeployer"
    assert d.asset.token is d.token


def test_deploy_wires_event_settings():
    d = deploy(Settings(events={"redis_enabled": True, "stream": "ledger.events.test"}))
    assert d.asset.publisher.redis_enabled is True
    assert d.asset.publisher.stream == "ledger.events.test"
    assert deploy().asset.publisher.redis_enabled is False
