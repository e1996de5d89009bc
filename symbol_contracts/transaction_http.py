"""Submission of signed payloads to a node's REST gateway."""

from __future__ import annotations

from typing import Any

from symbol_contracts.shared.logging import get_logger
from symbol_contracts.shared.network import NetworkClient, NetworkError, TimeoutConfig

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class TransactionHttp:
    """Announces transactions, bonded aggregates and cosignatures.

    Submissions are never retried; a rejection surfaces as ``NetworkError``.
    """

    def __init__(
        self,
        node_url: str,
        timeout_config: TimeoutConfig | None = None,
        network_client: NetworkClient | None = None,
    ):
        self.node_url = node_url.rstrip("/")
        self._network_client = network_client or NetworkClient(
            node_url=self.node_url, timeout_config=timeout_config
        )

    def _put(self, endpoint: str, payload: str, context: str) -> dict[str, Any]:
        try:
            result = self._network_client.put(
                endpoint,
                context=context,
                data=payload,
                headers=JSON_HEADERS,
            )
        except NetworkError as e:
            logger.error("%s failed: %s", context, e.message)
            raise
        logger.info("%s accepted: %s", context, result.get("message", ""))
        return result

    def announce(self, payload: str) -> dict[str, Any]:
        return self._put("/transactions", payload, "Announce transaction")

    def announce_partial(self, payload: str) -> dict[str, Any]:
        return self._put(
            "/transactions/partial", payload, "Announce partial transaction"
        )

    def announce_cosignature(self, payload: str) -> dict[str, Any]:
        return self._put(
            "/transactions/cosignature", payload, "Announce cosignature"
        )
