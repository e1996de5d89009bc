"""Tests for the CreateAsset contract."""

import pytest
from symbolchain import sc
from symbolchain.symbol.IdGenerator import generate_mosaic_alias_id

from symbol_contracts.contract import ContractConstants
from symbol_contracts.contracts import CreateAsset
from symbol_contracts.shared.errors import ParameterError


def announced(broadcaster):
    _, signed = broadcaster.announce.call_args.args
    return sc.TransactionFactory.deserialize(bytes.fromhex(signed.payload_hex))


@pytest.fixture
def inputs():
    return {
        "name": "company.token",
        "divisibility": "2",
        "supply": "1000",
        "flags": "Transferable|SupplyMutable",
    }


class TestCreateAsset:
    def test_announces_aggregate_complete(self, make_contract, broadcaster, inputs):
        contract = make_contract(CreateAsset, inputs)
        contract.network_client.get_optional.return_value = None

        result = contract.run()

        assert result.succeeded
        broadcaster.announce_partial.assert_not_called()
        aggregate = announced(broadcaster)
        assert aggregate.type_ == sc.TransactionType.AGGREGATE_COMPLETE
        assert aggregate.fee.value == ContractConstants.DEFAULT_AGGREGATE_FEE
        assert [tx.type_ for tx in aggregate.transactions] == [
            sc.TransactionType.NAMESPACE_REGISTRATION,
            sc.TransactionType.NAMESPACE_REGISTRATION,
            sc.TransactionType.MOSAIC_DEFINITION,
            sc.TransactionType.MOSAIC_SUPPLY_CHANGE,
            sc.TransactionType.MOSAIC_ALIAS,
        ]

    def test_mosaic_properties(self, make_contract, broadcaster, inputs):
        contract = make_contract(CreateAsset, inputs)
        contract.network_client.get_optional.return_value = None

        contract.run()

        root, _, definition, supply, alias = announced(broadcaster).transactions
        assert root.duration.value == ContractConstants.BLOCKS_IN_ONE_YEAR
        assert definition.divisibility == 2
        assert definition.duration.value == ContractConstants.BLOCKS_IN_ONE_YEAR
        assert definition.flags == sc.MosaicFlags.TRANSFERABLE | sc.MosaicFlags.SUPPLY_MUTABLE
        assert supply.delta.value == 1000
        assert supply.mosaic_id.value == definition.id.value
        assert alias.namespace_id.value == generate_mosaic_alias_id("company.token")

    def test_existing_root_is_not_registered_again(self, make_contract, broadcaster, inputs):
        contract = make_contract(CreateAsset, inputs)
        contract.network_client.get_optional.side_effect = [{"namespace": {}}, None]

        contract.run()

        types = [tx.type_ for tx in announced(broadcaster).transactions]
        assert types.count(sc.TransactionType.NAMESPACE_REGISTRATION) == 1

    def test_missing_name(self, make_contract, broadcaster, inputs):
        del inputs["name"]

        with pytest.raises(ParameterError, match="--name"):
            make_contract(CreateAsset, inputs).run()

        broadcaster.announce.assert_not_called()

    def test_invalid_supply(self, make_contract, broadcaster, inputs):
        inputs["supply"] = "0"

        with pytest.raises(ParameterError):
            make_contract(CreateAsset, inputs).run()

        broadcaster.announce.assert_not_called()
