"""Exchange of assets between two parties."""

from __future__ import annotations

from symbol_contracts.broadcaster import BroadcastResult
from symbol_contracts.contract import Contract
from symbol_contracts.shared.validation import AssetAmountValidator, HexKeyValidator


class EscrowAsset(Contract):
    """Aggregate bonded with a maker to taker transfer of ``--asset1`` and a
    taker to maker transfer of ``--asset2``; the taker cosigns it with
    ``PartialCosignature``."""

    name = "EscrowAsset"
    description = "Disposable Smart Contract for the Escrow of Assets"

    def execute(self, account) -> BroadcastResult:
        maker_amount, maker_asset = self.option(
            "asset1",
            "Enter an amount and mosaic you will send (Ex.: 10 symbol.xym)",
            validator=lambda value: AssetAmountValidator.parse(value, "--asset1"),
        )
        taker_public_key = self.option(
            "taker",
            "Enter the public key of the second party",
            validator=lambda value: HexKeyValidator.validate(value, "Taker public key"),
        )
        taker_amount, taker_asset = self.option(
            "asset2",
            "Enter an amount and mosaic you will receive (Ex.: 10 symbol.xym)",
            validator=lambda value: AssetAmountValidator.parse(value, "--asset2"),
        )
        self.resolve_lock()

        public_key = str(account.public_key)
        taker_address = str(self.factory.address_of(taker_public_key))

        transactions = [
            self.factory.transfer_transaction(
                public_key,
                taker_address,
                [(self.factory.resolve_mosaic_id(maker_asset), maker_amount)],
                "escrow 1st party",
            ),
            self.factory.transfer_transaction(
                taker_public_key,
                str(account.address),
                [(self.factory.resolve_mosaic_id(taker_asset), taker_amount)],
                "escrow 2nd party",
            ),
        ]

        return self.announce_bonded(account, transactions)
