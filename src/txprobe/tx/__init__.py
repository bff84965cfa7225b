"""
Transaction module.

Handles transaction construction, signing, submission and confirmation.
"""

from txprobe.tx.builder import (
    TransactionBuildError,
    TransactionSpec,
    UnknownTypeError,
    UnsupportedTypeError,
    build,
)
from txprobe.tx.client import SubmissionClient, SubmissionHandle
from txprobe.tx.signer import TransactionSigner
from txprobe.tx.tracker import ConfirmationTracker

__all__ = [
    "TransactionBuildError",
    "TransactionSpec",
    "UnknownTypeError",
    "UnsupportedTypeError",
    "build",
    "SubmissionClient",
    "SubmissionHandle",
    "TransactionSigner",
    "ConfirmationTracker",
]
