"""Request of an asset from another account."""

from __future__ import annotations

from symbol_contracts.broadcaster import BroadcastResult
from symbol_contracts.contract import Contract
from symbol_contracts.shared.network import NetworkError
from symbol_contracts.shared.validation import AddressValidator, AssetAmountValidator

UNKNOWN_PUBLIC_KEY = "0" * 64


class RequestAsset(Contract):
    name = "RequestAsset"
    description = "Disposable Smart Contract for the Request of Assets"

    def fetch_public_key(self, address: str) -> str:
        """Public key of ``address``; the account must be known on the network."""
        try:
            response = self.network_client.get_optional(
                f"/accounts/{address}", context="Fetch sender account"
            )
        except NetworkError as e:
            self.error(f"The sender account (--from) cannot be read: {e.message}")

        public_key = ((response or {}).get("account") or {}).get("publicKey", "")
        if not public_key or public_key.strip("0") == "":
            self.error("The sender account (--from) is unknown on this network.")
        return public_key.upper()

    def execute(self, account) -> BroadcastResult:
        amount, asset = self.option(
            "asset",
            "Enter an amount and mosaic that will be requested (Ex.: 10 symbol.xym)",
            validator=lambda value: AssetAmountValidator.parse(value, "--asset"),
        )
        sender = self.option(
            "from",
            "Enter a taker account address (Sender of mosaic)",
            validator=AddressValidator.validate,
        )
        self.resolve_lock()

        sender_public_key = self.fetch_public_key(sender)

        transactions = [
            self.factory.transfer_transaction(
                sender_public_key,
                str(account.address),
                [(self.factory.resolve_mosaic_id(asset), amount)],
                "symbol-smart-contracts pull request",
            )
        ]

        return self.announce_bonded(account, transactions)
