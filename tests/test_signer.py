"""Tests for transaction signing."""

import json

import pytest

from symbol_contracts.signer import SignedTransaction, TransactionSigner


@pytest.fixture
def signer(testnet_facade):
    return TransactionSigner(testnet_facade)


@pytest.fixture
def transfer(testnet_facade, testnet_account):
    return testnet_facade.transaction_factory.create(
        {
            "type": "transfer_transaction_v1",
            "signer_public_key": str(testnet_account.public_key),
            "deadline": 1,
            "recipient_address": str(testnet_account.address),
            "mosaics": [],
            "message": b"",
        }
    )


class TestTransactionSigner:
    def test_sign_returns_payload_and_hash(self, signer, testnet_facade, testnet_account, transfer):
        signed = signer.sign(testnet_account, transfer)

        assert isinstance(signed, SignedTransaction)
        assert signed.hash == str(testnet_facade.hash_transaction(transfer)).upper()
        assert signed.signer_public_key == str(testnet_account.public_key).upper()
        assert signed.payload_hex == json.loads(signed.payload)["payload"]
        assert signed.type_name == "TransferTransactionV1"

    def test_signed_transaction_is_immutable(self, signer, testnet_account, transfer):
        signed = signer.sign(testnet_account, transfer)
        with pytest.raises(AttributeError):
            signed.hash = "00"

    def test_cosign_signs_parent_hash(self, signer, testnet_account):
        parent_hash = "ab" * 32

        cosignature = signer.cosign(testnet_account, parent_hash)

        expected = testnet_account.key_pair.sign(bytes.fromhex(parent_hash))
        assert cosignature.parent_hash == parent_hash.upper()
        assert cosignature.signature == str(expected).upper()
        assert cosignature.signer_public_key == str(testnet_account.public_key).upper()
        assert json.loads(cosignature.payload)["version"] == "0"
