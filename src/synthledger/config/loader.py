"""
Configuration loader for synthledger.

What it does:
- Reads static settings from `config/config.yaml` (missing file means defaults).
- Applies environment overrides with the `SYNTHLEDGER_` prefix, e.g.
  `SYNTHLEDGER_INITIAL_PRICE=1500` or `SYNTHLEDGER_LOSS_POLICY=revert`.
- Validates the resulting configuration using Pydantic models.

Where it is used:
- `synthledger.deploy.deploy` and the `synthledger.main` entrypoint.
"""

import os
import pathlib
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field, field_validator

from ..positions.settlement import LossPolicy

ENV_PREFIX = "SYNTHLEDGER_"


class TokenConfig(BaseModel):
    """Parameters of the collateral stablecoin deployed alongside the ledger."""
    name: str = "USD Coin"
    symbol: str = "USDC"
    decimals: int = Field(6, ge=0, le=36)


class MetricsConfig(BaseModel):
    port: int = 8000


class EventsConfig(BaseModel):
    redis_enabled: bool = False
    stream: str = "synthledger.events"
    dlq: str = "synthledger.dlq"
    redis_url: str = "redis://localhost:6379/0"


class Settings(BaseModel):
    """Runtime settings assembled from YAML + environment variables."""
    initial_price: int = 1000
    loss_policy: LossPolicy = LossPolicy.CLAMP
    token: TokenConfig = Field(default_factory=TokenConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)

    @field_validator("initial_price")
    @classmethod
    def price_positive(cls, v):
        if v <= 0:
            raise ValueError(f"initial_price must be positive, got {v}")
        return v


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    price = os.getenv(f"{ENV_PREFIX}INITIAL_PRICE")
    if price:
        overrides["initial_price"] = int(price)
    policy = os.getenv(f"{ENV_PREFIX}LOSS_POLICY")
    if policy:
        overrides["loss_policy"] = policy.lower()
    return overrides


def load_settings(path: str = "config/config.yaml") -> Settings:
    """Load YAML config, apply env overrides, and return Settings."""
    config: Dict[str, Any] = {}
    p = pathlib.Path(path)
    if p.exists():
        with open(p, "r") as f:
            config = yaml.safe_load(f) or {}
    config.update(_env_overrides())
    return Settings(**config)
