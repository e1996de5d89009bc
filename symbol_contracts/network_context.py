"""Network parameters discovered from the node a contract connects to."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from symbolchain.CryptoTypes import Hash256
from symbolchain.facade.SymbolFacade import SymbolFacade
from symbolchain.symbol.Network import Network

from symbol_contracts.shared.errors import ConnectivityError
from symbol_contracts.shared.logging import get_logger
from symbol_contracts.shared.network import NetworkClient, NetworkError

logger = get_logger(__name__)

NETWORK_NAMES = {104: "mainnet", 152: "testnet"}


@dataclass(frozen=True)
class NetworkContext:
    node_url: str
    network_name: str
    network_identifier: int
    generation_hash: str
    epoch_adjustment: int
    currency_mosaic_id: int

    def create_facade(self) -> SymbolFacade:
        """Facade for this network, honoring a generation hash that differs
        from the built-in one (e.g. after a testnet reset)."""
        facade = SymbolFacade(self.network_name)
        builtin_seed = str(facade.network.generation_hash_seed).upper()
        if builtin_seed == self.generation_hash.upper():
            return facade

        logger.info(
            "Using custom %s network, generation hash %s",
            self.network_name,
            self.generation_hash,
        )
        network = Network(
            self.network_name,
            self.network_identifier,
            datetime.fromtimestamp(self.epoch_adjustment, timezone.utc),
            Hash256(self.generation_hash),
        )
        return SymbolFacade(network)


def _parse_epoch_adjustment(value: Any) -> int:
    return int(str(value).strip().rstrip("s"))


def _parse_mosaic_id(value: Any) -> int:
    return int(str(value).replace("'", "").strip().lower().removeprefix("0x"), 16)


def fetch_network_context(client: NetworkClient) -> NetworkContext:
    """Read ``/node/info`` and ``/network/properties`` into a context.

    Raises ``ConnectivityError`` when the node cannot be queried or answers
    with something that is not a Symbol node.
    """
    try:
        node_info = client.get("/node/info", context="Node info fetch")
        properties = client.get(
            "/network/properties", context="Network properties fetch"
        )
    except NetworkError as e:
        raise ConnectivityError(e.message) from e

    try:
        identifier = int(node_info["networkIdentifier"])
        network_properties = properties.get("network", {})
        name = str(network_properties.get("identifier") or NETWORK_NAMES[identifier])
        if name.startswith("public-test"):
            name = "testnet"
        elif name.startswith("public"):
            name = "mainnet"

        context = NetworkContext(
            node_url=client.node_url,
            network_name=name,
            network_identifier=identifier,
            generation_hash=str(node_info["networkGenerationHashSeed"]).upper(),
            epoch_adjustment=_parse_epoch_adjustment(
                network_properties["epochAdjustment"]
            ),
            currency_mosaic_id=_parse_mosaic_id(
                properties["chain"]["currencyMosaicId"]
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConnectivityError(
            f"The node {client.node_url} returned unexpected network information"
        ) from e

    logger.info(
        "Connected to %s (%s), generation hash %s",
        context.node_url,
        context.network_name,
        context.generation_hash,
    )
    return context
