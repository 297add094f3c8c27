"""Failure taxonomy for the synthetic asset ledger.

Every precondition violation raises one of these. The `code` attribute is the
stable identity callers and tests assert on; the message is for humans.
"""

from __future__ import annotations


class SyntheticAssetError(Exception):
    """Base class for all ledger failures."""

    code = "SyntheticAssetError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)


class InvalidAmount(SyntheticAssetError):
    code = "InvalidAmount"


class PositionAlreadyOpen(SyntheticAssetError):
    code = "PositionAlreadyOpen"


class NoOpenPosition(SyntheticAssetError):
    code = "NoOpenPosition"


class InvalidPrice(SyntheticAssetError):
    code = "InvalidPrice"


class NotOwner(SyntheticAssetError):
    code = "NotOwner"


class ContractPaused(SyntheticAssetError):
    code = "ContractPaused"


class ContractNotPaused(SyntheticAssetError):
    code = "ContractNotPaused"


class InvalidOwner(SyntheticAssetError):
    code = "InvalidOwner"


class InsufficientCollateralForLoss(SyntheticAssetError):
    code = "InsufficientCollateralForLoss"


class TransferFailed(SyntheticAssetError):
    code = "TransferFailed"


class ReentrantCall(SyntheticAssetError):
    code = "ReentrantCall"
