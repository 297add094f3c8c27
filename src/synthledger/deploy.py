from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .asset import SyntheticAsset
from .config.loader import Settings
from .events.bus import EventPublisher
from .token import StableToken, new_address


@dataclass
class Deployment:
    token: StableToken
    asset: SyntheticAsset
    deployer: str


def deploy(settings: Optional[Settings] = None, deployer: Optional[str] = None) -> Deployment:
    """Create the collateral token and a SyntheticAsset wired to it."""
    settings = settings or Settings()
    deployer = deployer or new_address()
    token = StableToken(
        name=settings.token.name,
        symbol=settings.token.symbol,
        decimals=settings.token.decimals,
    )
    asset = SyntheticAsset(
        token,
        deployer,
        initial_price=settings.initial_price,
        loss_policy=settings.loss_policy,
        publisher=EventPublisher.from_config(settings.events),
    )
    return Deployment(token=token, asset=asset, deployer=deployer)
