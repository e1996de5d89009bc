"""WebSocket listener delivering per-address node events.

The listener connects to the node's ``/ws`` endpoint, waits for the
node-assigned ``uid`` and then subscribes an address to the channels the
broadcaster needs:
- ``confirmedAdded``: transactions included in a block
- ``partialAdded``: bonded aggregates entering the partial cache
- ``cosignature``: cosignatures added to bonded aggregates
- ``status``: transaction validation failures

Every subscription owns a queue. Events are parsed on the socket thread and
pushed into the queues of the subscriptions whose address matches the topic,
so a consumer reads a lazy, unbounded sequence with ``Subscription.get``.
"""

from __future__ import annotations

import json
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

import websocket

from symbol_contracts.shared.errors import ConnectivityError
from symbol_contracts.shared.logging import get_logger

logger = get_logger(__name__)


class ListenerChannel(Enum):
    BLOCK = "block"
    CONFIRMED_ADDED = "confirmedAdded"
    UNCONFIRMED_ADDED = "unconfirmedAdded"
    PARTIAL_ADDED = "partialAdded"
    COSIGNATURE = "cosignature"
    STATUS = "status"


ADDRESS_CHANNELS = (
    ListenerChannel.CONFIRMED_ADDED,
    ListenerChannel.PARTIAL_ADDED,
    ListenerChannel.COSIGNATURE,
    ListenerChannel.STATUS,
)


@dataclass
class TransactionNotification:
    transaction: dict[str, Any]
    meta: dict[str, Any]
    channel: ListenerChannel
    address: str | None = None

    @property
    def hash(self) -> str:
        return str(self.meta.get("hash", "")).upper()


@dataclass
class CosignatureNotification:
    parent_hash: str
    signature: str
    signer_public_key: str
    version: int = 0
    address: str | None = None
    channel: ListenerChannel = ListenerChannel.COSIGNATURE

    @property
    def hash(self) -> str:
        return self.parent_hash.upper()


@dataclass
class TransactionStatusNotification:
    address: str
    hash: str
    code: str
    deadline: int = 0
    channel: ListenerChannel = ListenerChannel.STATUS


@dataclass
class ListenerClosed:
    reason: str


ListenerEvent = Union[
    TransactionNotification,
    CosignatureNotification,
    TransactionStatusNotification,
    ListenerClosed,
]


@dataclass
class ListenerConfig:
    connection_timeout: float = 10.0
    ping_interval: float = 30.0
    poll_interval: float = 0.5


def normalize_address(address: str) -> str:
    return str(address).replace("-", "").strip().upper()


def parse_message(topic: str, payload: dict[str, Any]) -> ListenerEvent | None:
    """Turn a ``{"topic", "data"}`` frame into an event, or ``None`` if unknown."""
    if "/" in topic:
        channel_name, address = topic.split("/", 1)
        address = normalize_address(address)
    else:
        channel_name, address = topic, None

    try:
        channel = ListenerChannel(channel_name)
    except ValueError:
        logger.debug("Unknown channel: %s", channel_name)
        return None

    if channel in (
        ListenerChannel.CONFIRMED_ADDED,
        ListenerChannel.UNCONFIRMED_ADDED,
        ListenerChannel.PARTIAL_ADDED,
    ):
        return TransactionNotification(
            transaction=payload.get("transaction", {}),
            meta=payload.get("meta", {}),
            channel=channel,
            address=address,
        )

    if channel == ListenerChannel.COSIGNATURE:
        return CosignatureNotification(
            parent_hash=str(payload.get("parentHash", "")).upper(),
            signature=payload.get("signature", ""),
            signer_public_key=str(payload.get("signerPublicKey", "")).upper(),
            version=int(payload.get("version", 0) or 0),
            address=address,
        )

    if channel == ListenerChannel.STATUS:
        return TransactionStatusNotification(
            address=address or normalize_address(payload.get("address", "")),
            hash=str(payload.get("hash", "")).upper(),
            code=payload.get("code", ""),
            deadline=int(payload.get("deadline", 0) or 0),
        )

    return None


class Subscription:
    """Queue of events for one address."""

    def __init__(self, address: str):
        self.address = normalize_address(address)
        self._queue: queue.Queue[ListenerEvent] = queue.Queue()

    def push(self, event: ListenerEvent) -> None:
        self._queue.put(event)

    def get(self, timeout: float | None = None) -> ListenerEvent | None:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None


class Listener:
    def __init__(
        self,
        node_url: str,
        config: ListenerConfig | None = None,
        app_factory: Callable[..., websocket.WebSocketApp] = websocket.WebSocketApp,
    ):
        self.node_url = node_url.rstrip("/")
        self.ws_url = self.build_ws_url(node_url)
        self.config = config or ListenerConfig()
        self._app_factory = app_factory

        self._uid: str | None = None
        self._ws: websocket.WebSocketApp | None = None
        self._ws_thread: threading.Thread | None = None
        self._connected = threading.Event()
        self._closing = False
        self._last_error: Exception | None = None
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    @staticmethod
    def build_ws_url(node_url: str) -> str:
        url = node_url.rstrip("/")
        if url.startswith("https://"):
            url = "wss://" + url[len("https://") :]
        elif url.startswith("http://"):
            url = "ws://" + url[len("http://") :]
        elif not url.startswith(("ws://", "wss://")):
            url = f"ws://{url}"

        if url.endswith("/ws"):
            return url
        return f"{url}/ws"

    @property
    def uid(self) -> str | None:
        return self._uid

    @property
    def is_open(self) -> bool:
        return self._connected.is_set() and not self._closing

    def open(self) -> None:
        """Connect and block until the node assigned a uid.

        Raises ``ConnectivityError`` when no uid arrives within
        ``config.connection_timeout`` seconds.
        """
        if self.is_open:
            return

        self._closing = False
        self._ws = self._app_factory(
            self.ws_url,
            on_open=self._on_ws_open,
            on_message=self._on_ws_message,
            on_error=self._on_ws_error,
            on_close=self._on_ws_close,
        )
        self._ws_thread = threading.Thread(
            target=self._ws.run_forever,
            kwargs={"ping_interval": self.config.ping_interval},
            daemon=True,
        )
        self._ws_thread.start()

        if not self._connected.wait(self.config.connection_timeout):
            error = self._last_error
            self.close()
            detail = f": {error}" if error else ""
            raise ConnectivityError(
                f"Cannot open a WebSocket connection to {self.ws_url}{detail}"
            )

        logger.info("Listener connected to %s, uid=%s", self.ws_url, self._uid)

    def subscribe(self, address: str) -> Subscription:
        if not self.is_open or self._ws is None:
            raise ConnectivityError("Cannot subscribe: listener is not open")

        subscription = Subscription(address)
        with self._lock:
            self._subscriptions.append(subscription)

        for channel in ADDRESS_CHANNELS:
            topic = f"{channel.value}/{subscription.address}"
            try:
                self._ws.send(json.dumps({"uid": self._uid, "subscribe": topic}))
            except websocket.WebSocketException as e:
                raise ConnectivityError(f"Failed to subscribe to {topic}: {e}") from e
            logger.debug("Subscribed to channel: %s", topic)

        return subscription

    def close(self) -> None:
        self._closing = True
        if self._ws is not None:
            self._ws.close()
        if self._ws_thread is not None and self._ws_thread is not threading.current_thread():
            self._ws_thread.join(timeout=2.0)
        self._connected.clear()
        self._uid = None
        logger.debug("Listener closed")

    def _on_ws_open(self, ws) -> None:
        logger.debug("WebSocket connection opened to %s", self.ws_url)

    def _on_ws_message(self, ws, message: str) -> None:
        try:
            data = json.loads(message)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse WebSocket message: %s", e)
            return

        if not isinstance(data, dict):
            logger.warning("Ignoring WebSocket frame that is not an object")
            return

        if "uid" in data and "topic" not in data:
            self._uid = data["uid"]
            self._connected.set()
            return

        topic = data.get("topic")
        payload = data.get("data") or {}
        if not isinstance(topic, str) or not isinstance(payload, dict):
            logger.warning("Ignoring malformed WebSocket frame: %s", message[:200])
            return

        event = parse_message(topic, payload)
        if event is None:
            return

        address = getattr(event, "address", None)
        with self._lock:
            targets = [s for s in self._subscriptions if s.address == address]
        for subscription in targets:
            subscription.push(event)

    def _on_ws_error(self, ws, error) -> None:
        self._last_error = error
        logger.error("WebSocket error: %s", error)

    def _on_ws_close(self, ws, close_status_code, close_msg) -> None:
        was_connected = self._connected.is_set()
        self._connected.clear()
        logger.info("WebSocket closed: code=%s, msg=%s", close_status_code, close_msg)

        if self._closing or not was_connected:
            return

        reason = close_msg or f"connection closed (code={close_status_code})"
        with self._lock:
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            subscription.push(ListenerClosed(reason=reason))
