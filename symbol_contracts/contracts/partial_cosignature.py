"""Cosignature of pending aggregate bonded transactions."""

from __future__ import annotations

from typing import Any

from symbol_contracts.broadcaster import BroadcastResult
from symbol_contracts.contract import Contract
from symbol_contracts.shared.network import NetworkError
from symbol_contracts.shared.validation import HexKeyValidator, ValidationResult


def _optional_hash(value: Any) -> ValidationResult:
    if not str(value or "").strip():
        return ValidationResult(True, normalized_value="")
    return HexKeyValidator.validate(str(value), "Transaction hash")


def is_signed_by(partial: dict[str, Any], public_key: str) -> bool:
    transaction = partial.get("transaction", {})
    signers = [str(transaction.get("signerPublicKey", "")).upper()]
    signers += [
        str(cosignature.get("signerPublicKey", "")).upper()
        for cosignature in transaction.get("cosignatures", [])
    ]
    return public_key.upper() in signers


class PartialCosignature(Contract):
    name = "PartialCosignature"
    description = "Disposable Smart Contract for the Cosignature of Partial Transactions"

    def fetch_unsigned_partials(self, account, transaction_hash: str = "") -> list[str]:
        """Hashes of the account's partial transactions it did not sign yet."""
        try:
            response = self.network_client.get(
                "/transactions/partial",
                context="Fetch partial transactions",
                params={"address": str(account.address)},
            )
        except NetworkError as e:
            self.error(f"Cannot read partial transactions: {e.message}")

        hashes = []
        for partial in (response or {}).get("data", []):
            partial_hash = str(partial.get("meta", {}).get("hash", "")).upper()
            if not partial_hash or is_signed_by(partial, str(account.public_key)):
                continue
            if transaction_hash and partial_hash != transaction_hash:
                continue
            hashes.append(partial_hash)
        return hashes

    def execute(self, account) -> BroadcastResult | None:
        transaction_hash = self.option(
            "hash",
            "Enter a partial transaction hash or leave empty to co-sign all",
            default="",
            validator=_optional_hash,
        )

        hashes = self.fetch_unsigned_partials(account, transaction_hash)
        if not hashes:
            self.console.print("[yellow]No transactions found to co-sign.[/yellow]")
            return None

        result: BroadcastResult | None = None
        for partial_hash in hashes:
            cosignature = self.signer.cosign(account, partial_hash)
            result = self.broadcaster.announce_cosignature(account, cosignature)
            if not result.succeeded:
                break
        return result
