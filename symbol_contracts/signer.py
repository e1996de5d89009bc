"""Signing of transactions and detached cosignatures."""

from __future__ import annotations

import json
from dataclasses import dataclass

from symbolchain import sc
from symbolchain.facade.SymbolFacade import SymbolFacade


@dataclass(frozen=True)
class SignedTransaction:
    """A signed, serialized transaction ready to be announced.

    ``payload`` is the JSON body expected by ``PUT /transactions``.
    """

    payload: str
    hash: str
    signer_public_key: str
    type_name: str = ""

    @property
    def payload_hex(self) -> str:
        return json.loads(self.payload).get("payload", "")


@dataclass(frozen=True)
class CosignatureSignedTransaction:
    parent_hash: str
    signature: str
    signer_public_key: str
    version: int = 0

    @property
    def payload(self) -> str:
        return json.dumps(
            {
                "version": str(self.version),
                "signerPublicKey": self.signer_public_key,
                "signature": self.signature,
                "parentHash": self.parent_hash,
            }
        )


class TransactionSigner:
    def __init__(self, facade: SymbolFacade):
        self.facade = facade

    def sign(self, account, transaction: sc.Transaction) -> SignedTransaction:
        """Sign ``transaction`` with ``account`` and compute its hash.

        The hash depends on the signature, so a bonded aggregate must be
        signed before a hash lock can reference it.
        """
        signature = account.sign_transaction(transaction)
        payload = self.facade.transaction_factory.attach_signature(
            transaction, signature
        )
        transaction_hash = self.facade.hash_transaction(transaction)

        return SignedTransaction(
            payload=payload,
            hash=str(transaction_hash).upper(),
            signer_public_key=str(account.public_key).upper(),
            type_name=type(transaction).__name__,
        )

    def cosign(self, account, parent_hash: str) -> CosignatureSignedTransaction:
        normalized_hash = parent_hash.strip().upper()
        signature = account.key_pair.sign(bytes.fromhex(normalized_hash))

        return CosignatureSignedTransaction(
            parent_hash=normalized_hash,
            signature=str(signature).upper(),
            signer_public_key=str(account.public_key).upper(),
        )
