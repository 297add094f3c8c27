"""Parquet export of the settlement journal and collateral balances."""

from __future__ import annotations

import os
from dataclasses import asdict
from typing import Dict

import pandas as pd

from ..asset import SyntheticAsset

SETTLEMENT_COLUMNS = [
    "account", "ts", "quantity", "is_long", "entry_price", "exit_price",
    "pnl", "applied", "balance_before", "balance_after",
]


def settlements_frame(asset: SyntheticAsset) -> pd.DataFrame:
    rows = [asdict(s) for s in asset.settlements()]
    df = pd.DataFrame(rows, columns=SETTLEMENT_COLUMNS)
    # Amounts can exceed int64, keep them as exact decimal strings.
    for col in ("quantity", "entry_price", "exit_price", "pnl", "applied", "balance_before", "balance_after"):
        df[col] = df[col].astype(str)
    return df


def balances_frame(asset: SyntheticAsset) -> pd.DataFrame:
    rows = [
        {
            "account": acct,
            "balance": str(bal),
            "position_open": asset.get_user_position_open_info(acct),
        }
        for acct, bal in sorted(asset.state.balances.items())
    ]
    return pd.DataFrame(rows, columns=["account", "balance", "position_open"])


def write_parquet(asset: SyntheticAsset, base_dir: str = "data") -> Dict[str, str]:
    os.makedirs(base_dir, exist_ok=True)
    paths = {
        "settlements": os.path.join(base_dir, "settlements.parquet"),
        "balances": os.path.join(base_dir, "balances.parquet"),
    }
    settlements_frame(asset).to_parquet(paths["settlements"])
    balances_frame(asset).to_parquet(paths["balances"])
    return paths
