"""Tests for the EscrowAsset contract."""

import pytest
from symbolchain import sc
from symbolchain.symbol.IdGenerator import generate_mosaic_alias_id
from symbolchain.symbol.Network import Address

from symbol_contracts.contract import ContractConstants
from symbol_contracts.contracts import EscrowAsset
from symbol_contracts.shared.errors import ParameterError

XYM_ALIAS = generate_mosaic_alias_id("symbol.xym")
CURRENCY_ID = 0x72C0212E67A08BCE


def announced_partial(broadcaster):
    _, signed_lock, signed_aggregate = broadcaster.announce_partial.call_args.args
    lock = sc.TransactionFactory.deserialize(bytes.fromhex(signed_lock.payload_hex))
    aggregate = sc.TransactionFactory.deserialize(bytes.fromhex(signed_aggregate.payload_hex))
    return signed_aggregate, lock, aggregate


@pytest.fixture
def inputs(other_account):
    return {
        "asset1": "10 symbol.xym",
        "taker": str(other_account.public_key),
        "asset2": "5 0x72C0212E67A08BCE",
    }


class TestEscrowAsset:
    def test_announces_lock_and_bonded_aggregate(self, make_contract, broadcaster, inputs):
        result = make_contract(EscrowAsset, inputs).run()

        assert result.succeeded
        broadcaster.announce.assert_not_called()
        signed_aggregate, lock, aggregate = announced_partial(broadcaster)

        assert aggregate.type_ == sc.TransactionType.AGGREGATE_BONDED
        assert lock.type_ == sc.TransactionType.HASH_LOCK
        assert str(lock.hash) == signed_aggregate.hash
        assert lock.mosaic.mosaic_id.value == CURRENCY_ID
        assert lock.mosaic.amount.value == ContractConstants.LOCK_AMOUNT
        assert lock.duration.value == ContractConstants.LOCK_DURATION

    def test_transfers_between_parties(
        self, make_contract, broadcaster, inputs, testnet_account, other_account
    ):
        make_contract(EscrowAsset, inputs).run()

        _, _, aggregate = announced_partial(broadcaster)
        to_taker, to_maker = aggregate.transactions

        assert str(to_taker.signer_public_key) == str(testnet_account.public_key)
        assert Address(to_taker.recipient_address.bytes) == other_account.address
        assert to_taker.mosaics[0].mosaic_id.value == XYM_ALIAS
        assert to_taker.mosaics[0].amount.value == 10
        assert to_taker.message == b"\x00escrow 1st party"

        assert str(to_maker.signer_public_key) == str(other_account.public_key)
        assert Address(to_maker.recipient_address.bytes) == testnet_account.address
        assert to_maker.mosaics[0].mosaic_id.value == 0x72C0212E67A08BCE
        assert to_maker.mosaics[0].amount.value == 5
        assert to_maker.message == b"\x00escrow 2nd party"

    def test_custom_lock(self, make_contract, broadcaster, inputs):
        inputs["lock"] = "20 symbol.xym"

        make_contract(EscrowAsset, inputs).run()

        _, lock, _ = announced_partial(broadcaster)
        assert lock.mosaic.mosaic_id.value == XYM_ALIAS
        assert lock.mosaic.amount.value == 20_000_000

    def test_invalid_lock(self, make_contract, broadcaster, inputs):
        inputs["lock"] = "twenty"

        with pytest.raises(ParameterError, match="--lock"):
            make_contract(EscrowAsset, inputs).run()

        broadcaster.announce_partial.assert_not_called()

    def test_invalid_taker(self, make_contract, broadcaster, inputs):
        inputs["taker"] = "TBWJ2HXE5H4OWQSFP4UGZWEFTPBNCD5A6TPUPGI"

        with pytest.raises(ParameterError, match="Taker public key"):
            make_contract(EscrowAsset, inputs).run()

        broadcaster.announce_partial.assert_not_called()
