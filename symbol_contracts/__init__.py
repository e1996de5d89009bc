"""Symbol disposable smart contracts.

This package is organized as:
- broadcaster: announcement of signed transactions and outcome tracking
- contract: the base class and its two-phase orchestration
- contracts: CreateAsset, EscrowAsset, RequestAsset, PartialCosignature,
  OpenTimestamp
- shared: network, logging, validation and errors
"""

__version__ = "0.1.0"
