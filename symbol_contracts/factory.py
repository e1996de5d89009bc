"""Construction of the transactions used by the contracts.

Every builder is deterministic for a given ``NetworkContext``: deadlines are
derived from the facade's network clock and the mosaic nonce is an explicit
optional parameter. Embedded transactions carry no fee nor deadline, top-level
ones get a fixed fee.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Any

from symbolchain import sc
from symbolchain.CryptoTypes import PublicKey
from symbolchain.facade.SymbolFacade import SymbolFacade
from symbolchain.symbol.IdGenerator import (
    generate_mosaic_alias_id,
    generate_mosaic_id,
    generate_namespace_id,
)

from symbol_contracts.network_context import NetworkContext
from symbol_contracts.shared.errors import ParameterError
from symbol_contracts.shared.logging import get_logger
from symbol_contracts.shared.network import NetworkClient
from symbol_contracts.shared.validation import (
    MOSAIC_ID_PATTERN,
    AddressValidator,
    NamespaceNameValidator,
)

logger = get_logger(__name__)

DEADLINE_HOURS = 2

MOSAIC_FLAG_VALUES = {
    "supply_mutable": 0x1,
    "transferable": 0x2,
    "restrictable": 0x4,
    "revokable": 0x8,
}


def mosaic_flags_value(flags: dict[str, bool]) -> int:
    value = 0
    for name, bit in MOSAIC_FLAG_VALUES.items():
        if flags.get(name):
            value |= bit
    return value


def encode_plain_message(message: str) -> bytes:
    return b"\x00" + message.encode("utf-8") if message else b""


class TransactionFactory:
    def __init__(
        self,
        context: NetworkContext,
        facade: SymbolFacade | None = None,
        network_client: NetworkClient | None = None,
    ):
        self.context = context
        self.facade = facade or context.create_facade()
        self.network_client = network_client

    def get_deadline_timestamp(self, hours: int = DEADLINE_HOURS) -> int:
        return self.facade.network.from_datetime(
            datetime.now(timezone.utc) + timedelta(hours=hours)
        ).timestamp

    def _create(
        self,
        transaction_dict: dict[str, Any],
        embedded: bool,
        fee: int,
    ):
        if embedded:
            return self.facade.transaction_factory.create_embedded(transaction_dict)

        transaction_dict["deadline"] = self.get_deadline_timestamp()
        tx = self.facade.transaction_factory.create(transaction_dict)
        tx.fee = sc.Amount(fee)
        return tx

    def address_of(self, public_key: str):
        return self.facade.network.public_key_to_address(PublicKey(public_key))

    def resolve_mosaic_id(self, asset: str) -> int:
        """Mosaic id for a 16 hex characters id or a namespace alias."""
        asset = asset.strip()
        if MOSAIC_ID_PATTERN.match(asset):
            return int(asset.lower().removeprefix("0x"), 16)

        result = NamespaceNameValidator.validate(asset)
        if not result.is_valid:
            raise ParameterError(result.error_message or f"Invalid asset: {asset}")
        return generate_mosaic_alias_id(result.normalized_value)

    def namespace_exists(self, namespace_id: int) -> bool:
        if self.network_client is None:
            return False
        response = self.network_client.get_optional(
            f"/namespaces/{namespace_id:016X}",
            context="Fetch namespace",
        )
        return response is not None

    def namespace_registration_transaction(
        self,
        signer_public_key: str,
        name: str,
        parent_id: int = 0,
        duration: int = 0,
        embedded: bool = True,
        fee: int = 0,
    ):
        namespace_id = generate_namespace_id(name, parent_id)
        transaction_dict: dict[str, Any] = {
            "type": "namespace_registration_transaction_v1",
            "signer_public_key": signer_public_key,
            "id": namespace_id,
            "name": name.encode("utf-8"),
        }
        if parent_id:
            transaction_dict["registration_type"] = "child"
            transaction_dict["parent_id"] = parent_id
        else:
            transaction_dict["registration_type"] = "root"
            transaction_dict["duration"] = duration

        return self._create(transaction_dict, embedded, fee)

    def get_namespace_registrations(
        self,
        signer_public_key: str,
        namespace_name: str,
        duration: int,
    ) -> list:
        """Embedded registrations for each level of ``namespace_name`` that
        is not yet registered on the node."""
        result = NamespaceNameValidator.validate(namespace_name)
        if not result.is_valid:
            raise ParameterError(result.error_message or "Invalid namespace name")

        transactions = []
        parent_id = 0
        for part in result.normalized_value.split("."):
            namespace_id = generate_namespace_id(part, parent_id)
            if self.namespace_exists(namespace_id):
                logger.debug("Namespace level %s already registered", part)
            else:
                transactions.append(
                    self.namespace_registration_transaction(
                        signer_public_key, part, parent_id, duration
                    )
                )
            parent_id = namespace_id

        return transactions

    def mosaic_definition_transaction(
        self,
        signer_public_key: str,
        divisibility: int,
        flags: dict[str, bool],
        duration: int = 0,
        nonce: int | None = None,
        embedded: bool = True,
        fee: int = 0,
    ) -> tuple[Any, int]:
        """Return the mosaic definition and the mosaic id it defines."""
        if nonce is None:
            nonce = int.from_bytes(os.urandom(4), "little")

        mosaic_id = generate_mosaic_id(self.address_of(signer_public_key), nonce)
        transaction_dict = {
            "type": "mosaic_definition_transaction_v1",
            "signer_public_key": signer_public_key,
            "id": mosaic_id,
            "duration": duration,
            "nonce": nonce,
            "flags": mosaic_flags_value(flags),
            "divisibility": divisibility,
        }
        return self._create(transaction_dict, embedded, fee), mosaic_id

    def mosaic_supply_change_transaction(
        self,
        signer_public_key: str,
        mosaic_id: int,
        delta: int,
        embedded: bool = True,
        fee: int = 0,
    ):
        transaction_dict = {
            "type": "mosaic_supply_change_transaction_v1",
            "signer_public_key": signer_public_key,
            "mosaic_id": mosaic_id,
            "delta": delta,
            "action": "increase",
        }
        return self._create(transaction_dict, embedded, fee)

    def mosaic_alias_transaction(
        self,
        signer_public_key: str,
        namespace_name: str,
        mosaic_id: int,
        embedded: bool = True,
        fee: int = 0,
    ):
        transaction_dict = {
            "type": "mosaic_alias_transaction_v1",
            "signer_public_key": signer_public_key,
            "namespace_id": generate_mosaic_alias_id(namespace_name),
            "mosaic_id": mosaic_id,
            "alias_action": "link",
        }
        return self._create(transaction_dict, embedded, fee)

    def transfer_transaction(
        self,
        signer_public_key: str,
        recipient_address: str,
        mosaics: list[tuple[int, int]],
        message: str = "",
        embedded: bool = True,
        fee: int = 0,
    ):
        result = AddressValidator.validate(recipient_address)
        if not result.is_valid:
            raise ParameterError(result.error_message or "Invalid recipient address")

        transaction_dict = {
            "type": "transfer_transaction_v1",
            "signer_public_key": signer_public_key,
            "recipient_address": result.normalized_value,
            "mosaics": [
                {"mosaic_id": mosaic_id, "amount": amount}
                for mosaic_id, amount in mosaics
            ],
            "message": encode_plain_message(message),
        }
        return self._create(transaction_dict, embedded, fee)

    def hash_lock_transaction(
        self,
        signer_public_key: str,
        mosaic_id: int,
        amount: int,
        duration: int,
        aggregate_hash: str,
        fee: int = 0,
    ):
        """Hash lock for a signed bonded aggregate's hash."""
        transaction_dict = {
            "type": "hash_lock_transaction_v1",
            "signer_public_key": signer_public_key,
            "mosaic": {"mosaic_id": mosaic_id, "amount": amount},
            "duration": duration,
            "hash": aggregate_hash,
        }
        return self._create(transaction_dict, embedded=False, fee=fee)

    def _aggregate(
        self,
        aggregate_type: str,
        signer_public_key: str,
        transactions: list,
        fee: int,
    ):
        if not transactions:
            raise ParameterError("An aggregate needs at least one transaction")

        transactions_hash = self.facade.hash_embedded_transactions(transactions)
        transaction_dict = {
            "type": aggregate_type,
            "signer_public_key": signer_public_key,
            "transactions_hash": str(transactions_hash),
            "transactions": transactions,
        }
        return self._create(transaction_dict, embedded=False, fee=fee)

    def aggregate_complete(
        self, signer_public_key: str, transactions: list, fee: int = 0
    ):
        return self._aggregate(
            "aggregate_complete_transaction_v2", signer_public_key, transactions, fee
        )

    def aggregate_bonded(self, signer_public_key: str, transactions: list, fee: int = 0):
        return self._aggregate(
            "aggregate_bonded_transaction_v2", signer_public_key, transactions, fee
        )
