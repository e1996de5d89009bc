"""Registry of the available contracts."""

from symbol_contracts.contracts.create_asset import CreateAsset
from symbol_contracts.contracts.escrow_asset import EscrowAsset
from symbol_contracts.contracts.open_timestamp import OpenTimestamp
from symbol_contracts.contracts.partial_cosignature import PartialCosignature
from symbol_contracts.contracts.request_asset import RequestAsset

CONTRACTS = {
    contract.name: contract
    for contract in (
        CreateAsset,
        EscrowAsset,
        RequestAsset,
        PartialCosignature,
        OpenTimestamp,
    )
}

__all__ = [
    "CONTRACTS",
    "CreateAsset",
    "EscrowAsset",
    "OpenTimestamp",
    "PartialCosignature",
    "RequestAsset",
]
