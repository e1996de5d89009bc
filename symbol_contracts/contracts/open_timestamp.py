"""Public timestamping of arbitrary data."""

from __future__ import annotations

import json
import time

from symbol_contracts.broadcaster import BroadcastResult
from symbol_contracts.contract import Contract, ContractConstants

MAX_MESSAGE_SIZE = 1023


class OpenTimestamp(Contract):
    """Self-transfer carrying ``{"timestamp": ms, "data": ...}`` as message."""

    name = "OpenTimestamp"
    description = "Disposable Smart Contract for the Timestamping of Data"

    def execute(self, account) -> BroadcastResult:
        data = self.option("data", "Enter the data that you want to timestamp publicly")

        message = json.dumps({"timestamp": int(time.time() * 1000), "data": data})
        if len(message.encode("utf-8")) > MAX_MESSAGE_SIZE:
            self.error("The data is too long to fit in a transfer message.")

        transfer = self.factory.transfer_transaction(
            str(account.public_key),
            str(account.address),
            [],
            message,
            embedded=False,
            fee=ContractConstants.DEFAULT_TRANSACTION_FEE,
        )

        return self.announce_transaction(account, transfer)
