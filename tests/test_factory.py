"""Tests for transaction construction."""

from unittest.mock import Mock

import pytest
from symbolchain import sc
from symbolchain.symbol.IdGenerator import (
    generate_mosaic_alias_id,
    generate_mosaic_id,
    generate_namespace_id,
)

from symbol_contracts.factory import (
    MOSAIC_FLAG_VALUES,
    TransactionFactory,
    encode_plain_message,
    mosaic_flags_value,
)
from symbol_contracts.shared.errors import ParameterError


@pytest.fixture
def namespace_client():
    client = Mock()
    client.get_optional.return_value = None
    return client


@pytest.fixture
def factory(network_context, testnet_facade, namespace_client):
    return TransactionFactory(network_context, testnet_facade, namespace_client)


@pytest.fixture
def signer_public_key(testnet_account):
    return str(testnet_account.public_key)


class TestHelpers:
    def test_mosaic_flags_value(self):
        assert mosaic_flags_value({}) == 0
        assert mosaic_flags_value({"supply_mutable": True, "transferable": True}) == 3
        assert mosaic_flags_value({name: True for name in MOSAIC_FLAG_VALUES}) == 15

    def test_encode_plain_message(self):
        assert encode_plain_message("") == b""
        assert encode_plain_message("hi") == b"\x00hi"


class TestResolveMosaicId:
    def test_hex_mosaic_id(self, factory):
        assert factory.resolve_mosaic_id("72C0212E67A08BCE") == 0x72C0212E67A08BCE
        assert factory.resolve_mosaic_id("0x72c0212e67a08bce") == 0x72C0212E67A08BCE

    def test_namespace_alias(self, factory):
        assert factory.resolve_mosaic_id("symbol.xym") == generate_mosaic_alias_id(
            "symbol.xym"
        )

    def test_invalid_asset(self, factory):
        with pytest.raises(ParameterError):
            factory.resolve_mosaic_id("Not A Name!")


class TestNamespaceRegistrations:
    def test_registers_every_missing_level(self, factory, signer_public_key):
        transactions = factory.get_namespace_registrations(
            signer_public_key, "company.assets.token", 1000
        )

        assert len(transactions) == 3
        root = transactions[0]
        assert root.registration_type == sc.NamespaceRegistrationType.ROOT
        assert root.duration.value == 1000
        assert root.id.value == generate_namespace_id("company")

        child = transactions[2]
        assert child.registration_type == sc.NamespaceRegistrationType.CHILD
        assert child.parent_id.value == generate_namespace_id(
            "assets", generate_namespace_id("company")
        )

    def test_skips_existing_levels(self, factory, namespace_client, signer_public_key):
        root_id = generate_namespace_id("company")
        namespace_client.get_optional.side_effect = lambda endpoint, **kwargs: (
            {"namespace": {}} if endpoint == f"/namespaces/{root_id:016X}" else None
        )

        transactions = factory.get_namespace_registrations(
            signer_public_key, "company.assets", 1000
        )

        assert len(transactions) == 1
        assert transactions[0].registration_type == sc.NamespaceRegistrationType.CHILD

    def test_rejects_deep_names(self, factory, signer_public_key):
        with pytest.raises(ParameterError):
            factory.get_namespace_registrations(signer_public_key, "a.b.c.d", 1000)


class TestMosaicTransactions:
    def test_definition_is_deterministic_for_a_nonce(
        self, factory, testnet_account, signer_public_key
    ):
        flags = {"transferable": True, "supply_mutable": True}
        first, first_id = factory.mosaic_definition_transaction(
            signer_public_key, 2, flags, duration=1000, nonce=1234
        )
        second, second_id = factory.mosaic_definition_transaction(
            signer_public_key, 2, flags, duration=1000, nonce=1234
        )

        assert first_id == second_id
        assert first_id == generate_mosaic_id(testnet_account.address, 1234)
        assert first.serialize() == second.serialize()
        assert first.divisibility == 2
        assert first.id.value == first_id

    def test_supply_change_increases(self, factory, signer_public_key):
        tx = factory.mosaic_supply_change_transaction(signer_public_key, 0x1234, 500)
        assert tx.delta.value == 500
        assert tx.action == sc.MosaicSupplyChangeAction.INCREASE

    def test_alias_links_namespace(self, factory, signer_public_key):
        tx = factory.mosaic_alias_transaction(signer_public_key, "company.token", 0x1234)
        assert tx.namespace_id.value == generate_mosaic_alias_id("company.token")
        assert tx.mosaic_id.value == 0x1234
        assert tx.alias_action == sc.AliasAction.LINK


class TestTransfers:
    def test_embedded_transfer(self, factory, signer_public_key, other_account):
        tx = factory.transfer_transaction(
            signer_public_key,
            str(other_account.address),
            [(0x72C0212E67A08BCE, 10)],
            "escrow 1st party",
        )
        assert tx.message == b"\x00escrow 1st party"
        assert tx.mosaics[0].amount.value == 10

    def test_top_level_transfer_has_fee_and_deadline(
        self, factory, signer_public_key, other_account
    ):
        tx = factory.transfer_transaction(
            signer_public_key, str(other_account.address), [], embedded=False, fee=30_000
        )
        assert tx.fee.value == 30_000
        assert tx.deadline.value > 0

    def test_invalid_recipient(self, factory, signer_public_key):
        with pytest.raises(ParameterError):
            factory.transfer_transaction(signer_public_key, "not-an-address", [])


class TestAggregates:
    def test_bonded_and_lock(self, factory, signer_public_key, other_account):
        transfer = factory.transfer_transaction(
            signer_public_key, str(other_account.address), [(0x1234, 1)]
        )
        bonded = factory.aggregate_bonded(signer_public_key, [transfer], fee=100_000)
        assert bonded.fee.value == 100_000
        assert len(bonded.transactions) == 1

        aggregate_hash = "AB" * 32
        lock = factory.hash_lock_transaction(
            signer_public_key, 0x1234, 10_000_000, 1000, aggregate_hash, fee=30_000
        )
        assert str(lock.hash) == aggregate_hash
        assert lock.mosaic.amount.value == 10_000_000
        assert lock.duration.value == 1000

    def test_complete_requires_transactions(self, factory, signer_public_key):
        with pytest.raises(ParameterError):
            factory.aggregate_complete(signer_public_key, [])
