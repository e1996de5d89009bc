"""Announcement of signed transactions and tracking of their outcome.

Each flow subscribes the signer's address on a fresh listener before the
first announcement, submits over REST and then reads the subscription until
an event for the tracked hash ends the flow:

- ``announce``: ``confirmedAdded`` or ``status`` for the transaction hash.
- ``announce_partial``: the hash lock is announced and confirmed first; only
  then the bonded aggregate is announced, and ``partialAdded`` and
  ``cosignature`` events are reported until ``confirmedAdded`` or ``status``
  for the aggregate hash.
- ``announce_cosignature``: ``cosignature`` or ``status`` for the parent hash.

Flows return a ``BroadcastResult``. Waiting is unbounded unless a timeout or
a cancel event is given, in which case the flow ends ``CANCELLED``.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Protocol

from rich.console import Console

from symbol_contracts.listener import (
    CosignatureNotification,
    Listener,
    ListenerChannel,
    ListenerClosed,
    ListenerConfig,
    ListenerEvent,
    Subscription,
    TransactionStatusNotification,
)
from symbol_contracts.shared.logging import get_logger, get_user_friendly_error
from symbol_contracts.shared.network import NetworkError
from symbol_contracts.signer import CosignatureSignedTransaction, SignedTransaction
from symbol_contracts.transaction_http import TransactionHttp

logger = get_logger(__name__)

LISTENER_DISCONNECTED_CODE = "Failure_Listener_Disconnected"


class Outcome(Enum):
    CONFIRMED = "confirmed"
    COSIGNATURE_ADDED = "cosignature_added"
    FAILED = "failed"
    CANCELLED = "cancelled"


class BroadcastState(Enum):
    IDLE = "idle"
    SUBSCRIBED = "subscribed"
    LOCK_ANNOUNCED = "lock_announced"
    LOCK_CONFIRMED = "lock_confirmed"
    ANNOUNCED = "announced"
    AGGREGATE_ANNOUNCED = "aggregate_announced"
    CONFIRMED = "confirmed"
    COSIGNATURE_ADDED = "cosignature_added"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class BroadcastResult:
    outcome: Outcome
    hash: str
    code: str | None = None
    message: str = ""
    partial_added: bool = False
    cosignatures: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome in (Outcome.CONFIRMED, Outcome.COSIGNATURE_ADDED)

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


class ListenerProtocol(Protocol):
    def open(self) -> None: ...

    def subscribe(self, address: str) -> Subscription: ...

    def close(self) -> None: ...


class _WaitInterrupted(Exception):
    def __init__(self, result_outcome: Outcome, code: str | None, message: str):
        super().__init__(message)
        self.outcome = result_outcome
        self.code = code
        self.message = message


class TransactionBroadcaster:
    def __init__(
        self,
        contract_name: str,
        node_url: str,
        explorer_url: str,
        transaction_http: TransactionHttp | None = None,
        listener_factory: Callable[[], ListenerProtocol] | None = None,
        console: Console | None = None,
        debug: bool = False,
        timeout_seconds: float | None = None,
        cancel_event: threading.Event | None = None,
        listener_config: ListenerConfig | None = None,
    ):
        self.contract_name = contract_name
        self.node_url = node_url.rstrip("/")
        self.explorer_url = explorer_url.rstrip("/")
        self.transaction_http = transaction_http or TransactionHttp(self.node_url)
        self.listener_config = listener_config or ListenerConfig()
        self.listener_factory = listener_factory or (
            lambda: Listener(self.node_url, self.listener_config)
        )
        self.console = console or Console()
        self.debug = debug
        self.timeout_seconds = timeout_seconds
        self.cancel_event = cancel_event or threading.Event()

        self.state = BroadcastState.IDLE
        self.transitions: list[BroadcastState] = []
        self._deadline: float | None = None

    # -- flows ---------------------------------------------------------------

    def announce(self, account, signed: SignedTransaction) -> BroadcastResult:
        """Announce a transaction and wait for its confirmation or failure."""
        address = str(account.address)
        self._start()
        with self._subscription(address) as subscription:
            self._debug_signed("Smart Contract Execution Hash", signed)

            failure = self._submit(
                self.transaction_http.announce, signed.payload, signed.hash
            )
            if failure is not None:
                return failure
            self._transition(BroadcastState.ANNOUNCED)

            return self._await_terminal(
                subscription,
                signed.hash,
                on_confirmed=lambda: self._confirmed(signed.hash, address),
            )

    def announce_partial(
        self,
        account,
        signed_lock: SignedTransaction,
        signed_aggregate: SignedTransaction,
    ) -> BroadcastResult:
        """Announce a hash lock, then its bonded aggregate once the lock is
        confirmed, and wait for the aggregate's confirmation or failure."""
        address = str(account.address)
        self._start()
        with self._subscription(address) as subscription:
            self._debug_signed("Hash Lock Hash", signed_lock)
            self._debug_signed("Smart Contract Execution Hash", signed_aggregate)

            failure = self._submit(
                self.transaction_http.announce, signed_lock.payload, signed_lock.hash
            )
            if failure is not None:
                return failure
            self._transition(BroadcastState.LOCK_ANNOUNCED)

            lock_result = self._await_terminal(
                subscription,
                signed_lock.hash,
                on_confirmed=lambda: None,
            )
            if lock_result is not None:
                return lock_result
            self._transition(BroadcastState.LOCK_CONFIRMED)
            logger.info("Hash lock %s confirmed", signed_lock.hash)

            failure = self._submit(
                self.transaction_http.announce_partial,
                signed_aggregate.payload,
                signed_aggregate.hash,
            )
            if failure is not None:
                return failure
            self._transition(BroadcastState.AGGREGATE_ANNOUNCED)

            cosignatures: list[str] = []
            partial_added = False

            def on_event(event: ListenerEvent) -> None:
                nonlocal partial_added
                if isinstance(event, CosignatureNotification):
                    cosignatures.append(event.signer_public_key)
                    self._inform_cosignature_added(event)
                elif event.channel == ListenerChannel.PARTIAL_ADDED:
                    partial_added = True
                    self._inform_partial_added(signed_aggregate.hash, address)

            result = self._await_terminal(
                subscription,
                signed_aggregate.hash,
                on_confirmed=lambda: self._confirmed(signed_aggregate.hash, address),
                informational=(
                    ListenerChannel.PARTIAL_ADDED,
                    ListenerChannel.COSIGNATURE,
                ),
                on_informational=on_event,
            )
            result.partial_added = partial_added
            result.cosignatures = cosignatures
            return result

    def announce_cosignature(
        self, account, cosignature: CosignatureSignedTransaction
    ) -> BroadcastResult:
        """Announce a cosignature and wait until the node reports it added."""
        address = str(account.address)
        parent_hash = cosignature.parent_hash.upper()
        self._start()
        with self._subscription(address) as subscription:
            if self.debug:
                self.console.print(f"[dim]Parent Hash: {parent_hash}[/dim]")
                self.console.print(f"[dim]Cosignature: {cosignature.payload}[/dim]")

            failure = self._submit(
                self.transaction_http.announce_cosignature,
                cosignature.payload,
                parent_hash,
            )
            if failure is not None:
                return failure
            self._transition(BroadcastState.ANNOUNCED)

            def is_own_cosignature(event: ListenerEvent) -> bool:
                return (
                    isinstance(event, CosignatureNotification)
                    and event.signer_public_key
                    == cosignature.signer_public_key.upper()
                )

            return self._await_terminal(
                subscription,
                parent_hash,
                on_confirmed=lambda: self._confirmed(parent_hash, address),
                terminal=is_own_cosignature,
                on_terminal=lambda: self._cosignature_added(
                    parent_hash, cosignature.signer_public_key, address
                ),
                informational=(ListenerChannel.COSIGNATURE,),
            )

    # -- internals -----------------------------------------------------------

    def _start(self) -> None:
        self.transitions = []
        self.state = BroadcastState.IDLE
        self._deadline = (
            time.monotonic() + self.timeout_seconds
            if self.timeout_seconds is not None
            else None
        )

    def _transition(self, state: BroadcastState) -> None:
        logger.debug("Broadcast state %s -> %s", self.state.value, state.value)
        self.state = state
        self.transitions.append(state)

    @contextmanager
    def _subscription(self, address: str) -> Iterator[Subscription]:
        listener = self.listener_factory()
        try:
            listener.open()
            subscription = listener.subscribe(address)
            self._transition(BroadcastState.SUBSCRIBED)
            yield subscription
        finally:
            listener.close()

    def _submit(
        self, announce: Callable[[str], Any], payload: str, tracked_hash: str
    ) -> BroadcastResult | None:
        try:
            announce(payload)
        except NetworkError as e:
            code = e.node_code or (str(e.status_code) if e.status_code else None)
            self._transition(BroadcastState.FAILED)
            self._inform_error(tracked_hash, code, e.message)
            return BroadcastResult(Outcome.FAILED, tracked_hash, code, e.message)
        return None

    def _next_event(self, subscription: Subscription) -> ListenerEvent | None:
        if self.cancel_event.is_set():
            raise _WaitInterrupted(Outcome.CANCELLED, None, "Cancelled")

        poll = self.listener_config.poll_interval
        if self._deadline is not None:
            remaining = self._deadline - time.monotonic()
            if remaining <= 0:
                raise _WaitInterrupted(
                    Outcome.CANCELLED,
                    None,
                    f"No outcome received within {self.timeout_seconds} seconds",
                )
            poll = min(poll, remaining)

        event = subscription.get(timeout=poll)
        if isinstance(event, ListenerClosed):
            raise _WaitInterrupted(
                Outcome.FAILED,
                LISTENER_DISCONNECTED_CODE,
                f"Listener disconnected: {event.reason}",
            )
        return event

    def _await_terminal(
        self,
        subscription: Subscription,
        tracked_hash: str,
        on_confirmed: Callable[[], BroadcastResult | None],
        terminal: Callable[[ListenerEvent], bool] | None = None,
        on_terminal: Callable[[], BroadcastResult] | None = None,
        informational: tuple[ListenerChannel, ...] = (),
        on_informational: Callable[[ListenerEvent], None] | None = None,
    ) -> BroadcastResult | None:
        """Read events until one ends the wait for ``tracked_hash``.

        A ``status`` event always fails. Events on ``informational`` channels
        are handed to ``on_informational`` unless ``terminal`` accepts them,
        which ends the wait with ``on_terminal()``. A ``confirmedAdded`` event
        ends it with ``on_confirmed()``.
        """
        tracked_hash = tracked_hash.upper()
        while True:
            try:
                event = self._next_event(subscription)
            except _WaitInterrupted as interruption:
                state = (
                    BroadcastState.CANCELLED
                    if interruption.outcome == Outcome.CANCELLED
                    else BroadcastState.FAILED
                )
                self._transition(state)
                self._inform_error(
                    tracked_hash, interruption.code, interruption.message
                )
                return BroadcastResult(
                    interruption.outcome,
                    tracked_hash,
                    interruption.code,
                    interruption.message,
                )

            if event is None:
                continue

            if getattr(event, "hash", "").upper() != tracked_hash:
                logger.debug("Ignoring %s event for another hash", event.channel.value)
                continue

            if isinstance(event, TransactionStatusNotification):
                self._transition(BroadcastState.FAILED)
                self._inform_error(tracked_hash, event.code)
                return BroadcastResult(
                    Outcome.FAILED, tracked_hash, event.code, event.code
                )

            if terminal is not None and on_terminal is not None and terminal(event):
                return on_terminal()

            if event.channel in informational:
                if on_informational is not None:
                    on_informational(event)
                continue

            if event.channel == ListenerChannel.CONFIRMED_ADDED:
                return on_confirmed()

    def _confirmed(self, tracked_hash: str, address: str) -> BroadcastResult:
        self._transition(BroadcastState.CONFIRMED)
        self._inform_success(tracked_hash, address)
        return BroadcastResult(Outcome.CONFIRMED, tracked_hash)

    def _cosignature_added(
        self, parent_hash: str, signer_public_key: str, address: str
    ) -> BroadcastResult:
        self._transition(BroadcastState.COSIGNATURE_ADDED)
        self._inform_cosignature_success(parent_hash, address)
        return BroadcastResult(
            Outcome.COSIGNATURE_ADDED,
            parent_hash,
            cosignatures=[signer_public_key.upper()],
        )

    # -- reporting -----------------------------------------------------------

    def transaction_url(self, transaction_hash: str) -> str:
        return f"{self.explorer_url}/transactions/{transaction_hash}"

    def account_url(self, address: str) -> str:
        return f"{self.explorer_url}/accounts/{address}"

    def status_url(self, transaction_hash: str) -> str:
        return f"{self.node_url}/transactionStatus/{transaction_hash}"

    def _debug_signed(self, label: str, signed: SignedTransaction) -> None:
        logger.debug(
            "%s: %s (%s signed by %s)",
            label,
            signed.hash,
            signed.type_name,
            signed.signer_public_key,
        )
        if self.debug:
            self.console.print(f"[dim]{label}: {signed.hash}[/dim]")
            self.console.print(
                f"[dim]{signed.type_name} signed by {signed.signer_public_key}[/dim]"
            )
            self.console.print(f"[dim]Payload: {signed.payload_hex}[/dim]")

    def _inform_success(self, transaction_hash: str, address: str) -> None:
        logger.info("%s confirmed: %s", self.contract_name, transaction_hash)
        self.console.print(
            f"[green]Contract executed successfully: {self.contract_name}[/green]"
        )
        self.console.print(f"Transaction: {self.transaction_url(transaction_hash)}")
        self.console.print(f"Account: {self.account_url(address)}")

    def _inform_partial_added(self, transaction_hash: str, address: str) -> None:
        logger.info("%s waiting for cosignatures: %s", self.contract_name, transaction_hash)
        self.console.print(
            f"[cyan]Contract announced, waiting for cosignatures: "
            f"{self.contract_name}[/cyan]"
        )
        self.console.print(f"Transaction: {self.transaction_url(transaction_hash)}")
        self.console.print(f"Account: {self.account_url(address)}")

    def _inform_cosignature_added(self, event: CosignatureNotification) -> None:
        logger.info(
            "Cosignature added to %s by %s", event.parent_hash, event.signer_public_key
        )
        self.console.print(
            f"[cyan]Cosignature added by {event.signer_public_key}[/cyan]"
        )

    def _inform_cosignature_success(self, parent_hash: str, address: str) -> None:
        logger.info("Cosignature accepted for %s", parent_hash)
        self.console.print(
            f"[green]Cosignature added successfully: {self.contract_name}[/green]"
        )
        self.console.print(f"Transaction: {self.transaction_url(parent_hash)}")
        self.console.print(f"Account: {self.account_url(address)}")

    def _inform_error(
        self, transaction_hash: str, code: str | None, message: str = ""
    ) -> None:
        logger.error(
            "%s failed for %s: %s %s",
            self.contract_name,
            transaction_hash,
            code or "",
            message,
        )
        self.console.print(
            f"[red]Contract execution failed: {self.contract_name}[/red]"
        )
        if code:
            self.console.print(f"[red]Error: {code}[/red]")
            user_message, suggestion = get_user_friendly_error(code)
            if suggestion:
                self.console.print(f"[yellow]{user_message} {suggestion}[/yellow]")
        elif message:
            self.console.print(f"[red]{message}[/red]")
        self.console.print(f"Status: {self.status_url(transaction_hash)}")
