import io
import json
from unittest.mock import MagicMock

import pytest
from rich.console import Console
from symbolchain.CryptoTypes import PrivateKey
from symbolchain.facade.SymbolFacade import SymbolFacade

from symbol_contracts.broadcaster import BroadcastResult, Outcome
from symbol_contracts.config import ContractConfig
from symbol_contracts.listener import (
    CosignatureNotification,
    ListenerChannel,
    ListenerClosed,
    ListenerConfig,
    Subscription,
    TransactionNotification,
    TransactionStatusNotification,
)
from symbol_contracts.network_context import NetworkContext

TESTNET_NODE = "http://sym-test-01.opening-line.jp:3000"
TESTNET_EXPLORER = "https://testnet.symbol.fyi"
TESTNET_CURRENCY_ID = 0x72C0212E67A08BCE


@pytest.fixture(autouse=True)
def isolate_logging(monkeypatch):
    """Keep tests from writing to the user's log directory."""
    monkeypatch.setenv("SYMBOL_CONTRACT_LOG_NO_FILE", "1")
    for name in ("NODE_URL", "EXPLORER_URL", "WAIT_TIMEOUT"):
        monkeypatch.delenv(f"SYMBOL_CONTRACT_{name}", raising=False)


@pytest.fixture
def testnet_facade():
    """Fixture providing testnet Symbol facade"""
    return SymbolFacade("testnet")


@pytest.fixture
def random_private_key():
    return PrivateKey.random()


@pytest.fixture
def testnet_account(testnet_facade, random_private_key):
    return testnet_facade.create_account(random_private_key)


@pytest.fixture
def other_account(testnet_facade):
    return testnet_facade.create_account(PrivateKey.random())


@pytest.fixture
def testnet_node_url():
    return TESTNET_NODE


@pytest.fixture
def network_context(testnet_facade):
    return NetworkContext(
        node_url=TESTNET_NODE,
        network_name="testnet",
        network_identifier=152,
        generation_hash=str(testnet_facade.network.generation_hash_seed),
        epoch_adjustment=1667250467,
        currency_mosaic_id=TESTNET_CURRENCY_ID,
    )


@pytest.fixture
def console_output():
    buffer = io.StringIO()
    return Console(file=buffer, force_terminal=False, width=200), buffer


@pytest.fixture
def fast_listener_config():
    return ListenerConfig(connection_timeout=1.0, poll_interval=0.01)


class ScriptedNode:
    """Fake node: records listener and announce calls in order and replays
    scripted events into the subscription when a payload is announced."""

    def __init__(self):
        self.calls = []
        self.scripts = {}
        self.rejections = {}
        self.open_error = None
        self.subscription = None

    def on_announce(self, payload, *events):
        self.scripts[payload] = list(events)

    def reject(self, payload, error):
        self.rejections[payload] = error

    def call_names(self):
        return [call[0] for call in self.calls]

    def listener_factory(self):
        return FakeListener(self)

    def _submit(self, name, payload):
        self.calls.append((name, payload))
        if payload in self.rejections:
            raise self.rejections[payload]
        for event in self.scripts.get(payload, []):
            self.subscription.push(event)
        return {"message": "packet 9 was pushed to the network via /transactions"}

    def announce(self, payload):
        return self._submit("announce", payload)

    def announce_partial(self, payload):
        return self._submit("announce_partial", payload)

    def announce_cosignature(self, payload):
        return self._submit("announce_cosignature", payload)


class FakeListener:
    def __init__(self, node):
        self.node = node

    def open(self):
        self.node.calls.append(("open", None))
        if self.node.open_error:
            raise self.node.open_error

    def subscribe(self, address):
        self.node.calls.append(("subscribe", address))
        self.node.subscription = Subscription(address)
        return self.node.subscription

    def close(self):
        self.node.calls.append(("close", None))


@pytest.fixture
def scripted_node():
    return ScriptedNode()


class Events:
    """Builders for listener events addressed to ``address``."""

    def __init__(self, address):
        self.address = address

    def confirmed(self, transaction_hash):
        return TransactionNotification(
            transaction={},
            meta={"hash": transaction_hash},
            channel=ListenerChannel.CONFIRMED_ADDED,
            address=self.address,
        )

    def partial_added(self, transaction_hash):
        return TransactionNotification(
            transaction={},
            meta={"hash": transaction_hash},
            channel=ListenerChannel.PARTIAL_ADDED,
            address=self.address,
        )

    def cosignature(self, parent_hash, signer_public_key):
        return CosignatureNotification(
            parent_hash=parent_hash,
            signature="00" * 64,
            signer_public_key=signer_public_key,
            address=self.address,
        )

    def status(self, transaction_hash, code):
        return TransactionStatusNotification(
            address=self.address, hash=transaction_hash, code=code
        )

    def closed(self, reason="connection lost"):
        return ListenerClosed(reason=reason)


@pytest.fixture
def events_for():
    return Events



@pytest.fixture
def broadcaster():
    broadcaster = MagicMock()
    for flow in ("announce", "announce_partial", "announce_cosignature"):
        getattr(broadcaster, flow).return_value = BroadcastResult(Outcome.CONFIRMED, "AB" * 32)
    return broadcaster


@pytest.fixture
def make_contract(monkeypatch, network_context, console_output, broadcaster, random_private_key):
    """Build a non-interactive contract signing with ``random_private_key``
    against ``network_context`` without touching a node."""
    monkeypatch.setattr(
        "symbol_contracts.contract.fetch_network_context", lambda client: network_context
    )
    console, _ = console_output

    def build(contract_class, inputs, network_client=None):
        return contract_class(
            ContractConfig(node_url=TESTNET_NODE, interactive=False),
            {"private_key": str(random_private_key), **inputs},
            console=console,
            network_client=network_client or MagicMock(),
            broadcaster=broadcaster,
        )

    return build
