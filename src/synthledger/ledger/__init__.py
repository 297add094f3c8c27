"""Ledger package.

Public API:
- CollateralLedger: free collateral per account, token pulls and pushes.
"""

from .collateral import CollateralLedger  # re-export
