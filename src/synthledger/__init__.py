"""synthledger: collateral ledger and leveraged position engine over a stablecoin."""

from .asset import SyntheticAsset
from .positions.settlement import LossPolicy, compute_pnl
from .token import StableToken

__all__ = ["SyntheticAsset", "LossPolicy", "compute_pnl", "StableToken"]
