"""Creation of a named asset in one aggregate complete."""

from __future__ import annotations

from symbol_contracts.broadcaster import BroadcastResult
from symbol_contracts.contract import Contract, ContractConstants
from symbol_contracts.shared.validation import (
    DivisibilityValidator,
    NamespaceNameValidator,
    SupplyValidator,
    parse_mosaic_flags,
)


class CreateAsset(Contract):
    """Registers the missing namespace levels of ``--name``, defines a
    mosaic, issues its initial supply and links the namespace to it."""

    name = "CreateAsset"
    description = "Disposable Smart Contract for the Creation of Assets"

    def execute(self, account) -> BroadcastResult:
        name = self.option(
            "name",
            "Enter a friendly name for the asset",
            validator=NamespaceNameValidator.validate,
        )
        divisibility = self.option(
            "divisibility",
            "Enter a number of decimal places",
            default="0",
            validator=DivisibilityValidator.validate,
        )
        supply = self.option(
            "supply", "Enter an initial supply", validator=SupplyValidator.validate
        )
        flags = parse_mosaic_flags(
            self.option(
                "flags",
                "Enter flagged properties (Ex.: Transferable|SupplyMutable)",
                default="",
            )
        )

        public_key = str(account.public_key)
        transactions = self.factory.get_namespace_registrations(
            public_key, name, ContractConstants.BLOCKS_IN_ONE_YEAR
        )

        definition, mosaic_id = self.factory.mosaic_definition_transaction(
            public_key,
            divisibility,
            flags,
            duration=ContractConstants.BLOCKS_IN_ONE_YEAR,
        )
        self.logger.info("Defining mosaic %016X for %s", mosaic_id, name)

        transactions += [
            definition,
            self.factory.mosaic_supply_change_transaction(public_key, mosaic_id, supply),
            self.factory.mosaic_alias_transaction(public_key, name, mosaic_id),
        ]

        return self.announce_complete(account, transactions)
