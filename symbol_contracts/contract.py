"""Base class of the disposable smart contracts.

A contract resolves its options, connects to a node, builds its
transactions and hands them to the ``TransactionBroadcaster``. Sets of
transactions one account can sign alone go into an aggregate complete and
are announced with ``announce``; sets that need another party's cosignature
go into an aggregate bonded paired with a hash lock and are announced with
``announce_partial``.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, NoReturn

from rich.console import Console

from symbol_contracts.account import (
    create_account_from_mnemonic,
    create_account_from_private_key,
    generate_mnemonic,
)
from symbol_contracts.broadcaster import BroadcastResult, TransactionBroadcaster
from symbol_contracts.config import (
    DEFAULT_DERIVATION_PATH,
    DEFAULT_NODE_URL,
    ContractConfig,
)
from symbol_contracts.factory import TransactionFactory
from symbol_contracts.network_context import NetworkContext, fetch_network_context
from symbol_contracts.prompts import confirm_option, resolve_option
from symbol_contracts.shared.errors import (
    ConnectivityError,
    ContractError,
    ParameterError,
)
from symbol_contracts.shared.logging import get_logger
from symbol_contracts.shared.network import NetworkClient, NetworkError
from symbol_contracts.shared.validation import (
    HEX_64_PATTERN,
    AssetAmountValidator,
    ValidationResult,
)
from symbol_contracts.signer import TransactionSigner
from symbol_contracts.transaction_http import TransactionHttp

logger = get_logger(__name__)


class ContractConstants:
    BLOCK_TARGET_SECONDS = 30
    BLOCKS_IN_ONE_YEAR = 365 * 24 * 60 * 60 // BLOCK_TARGET_SECONDS

    # fees are fixed amounts in micro-XYM
    DEFAULT_AGGREGATE_FEE = 100_000
    DEFAULT_TRANSACTION_FEE = 30_000

    LOCK_DURATION = 1000
    LOCK_AMOUNT = 10_000_000
    LOCK_DIVISIBILITY = 6


class Contract(ABC):
    name: str = ""
    description: str = ""

    def __init__(
        self,
        config: ContractConfig,
        inputs: dict[str, Any] | None = None,
        console: Console | None = None,
        network_client: NetworkClient | None = None,
        broadcaster: TransactionBroadcaster | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.config = config
        self.inputs = dict(inputs or {})
        self.console = console or Console()
        self.network_client = network_client
        self.broadcaster = broadcaster
        self.cancel_event = cancel_event

        self.node_url = config.node_url or DEFAULT_NODE_URL
        self.context: NetworkContext | None = None
        self.facade = None
        self.factory: TransactionFactory | None = None
        self.signer: TransactionSigner | None = None

        # None locks the network currency
        self.lock_asset: str | None = None
        self.lock_amount = ContractConstants.LOCK_AMOUNT

        self.logger = logger.with_context(contract=self.name)

    # -- options -------------------------------------------------------------

    def option(
        self,
        name: str,
        prompt: str,
        default: Any = None,
        validator: Callable[[Any], ValidationResult] | None = None,
        hide_input: bool = False,
    ) -> Any:
        value = resolve_option(
            self.inputs,
            name,
            default=default,
            prompt=prompt,
            interactive=self.config.interactive,
            hide_input=hide_input,
            validator=validator,
        )
        self.inputs[name] = value
        return value

    def resolve_lock(self) -> None:
        """Read ``--lock "<amount> <asset>"``; the amount is in whole units."""
        value = self.inputs.get("lock")
        if not value:
            return

        result = AssetAmountValidator.parse(
            value, label="--lock", scale=ContractConstants.LOCK_DIVISIBILITY
        )
        if not result.is_valid:
            self.error(result.error_message or "Please, enter a valid lock asset.")
        self.lock_amount, self.lock_asset = result.normalized_value

    def lock_mosaic_id(self) -> int:
        if self.lock_asset:
            return self.factory.resolve_mosaic_id(self.lock_asset)
        return self.context.currency_mosaic_id

    def error(self, message: str) -> NoReturn:
        self.logger.error("Contract aborted: %s", message)
        raise ParameterError(message)

    # -- configuration -------------------------------------------------------

    def resolve_node_url(self) -> str:
        if self.config.node_url:
            return self.config.node_url.rstrip("/")

        if confirm_option(
            "Do you want to connect to a custom node?",
            default=False,
            interactive=self.config.interactive,
        ):
            return str(
                self.option("api_url", "Enter a node URL", default=DEFAULT_NODE_URL)
            ).rstrip("/")

        return DEFAULT_NODE_URL

    def connect(self) -> NetworkContext:
        self.node_url = self.resolve_node_url()
        if self.network_client is None:
            self.network_client = NetworkClient(
                node_url=self.node_url,
                timeout_config=self.config.timeout_config,
                retry_config=self.config.retry_config,
            )

        self.context = fetch_network_context(self.network_client)
        self.facade = self.context.create_facade()
        self.factory = TransactionFactory(
            self.context, self.facade, self.network_client
        )
        self.signer = TransactionSigner(self.facade)

        if self.broadcaster is None:
            self.broadcaster = TransactionBroadcaster(
                contract_name=self.name,
                node_url=self.node_url,
                explorer_url=self.config.explorer_url,
                transaction_http=TransactionHttp(
                    self.node_url, timeout_config=self.config.timeout_config
                ),
                console=self.console,
                debug=self.config.debug,
                timeout_seconds=self.config.wait_timeout,
                cancel_event=self.cancel_event,
                listener_config=self.config.listener_config,
            )

        return self.context

    def resolve_account(self):
        private_key = self.inputs.get("private_key")
        mnemonic = self.inputs.get("mnemonic")
        path = self.inputs.get("path") or DEFAULT_DERIVATION_PATH

        # without a key a random account is generated
        wants_key = (
            not private_key
            and not mnemonic
            and self.config.interactive
            and confirm_option(
                "Do you want to sign with an existing mnemonic or private key?",
                default=True,
            )
        )
        if wants_key:
            secret = str(
                self.option(
                    "secret", "Enter your mnemonic or private key", hide_input=True
                )
            ).strip()
            if HEX_64_PATTERN.match(secret):
                private_key = secret
            else:
                mnemonic = secret

        if private_key:
            return create_account_from_private_key(self.facade, private_key)

        if mnemonic:
            return create_account_from_mnemonic(self.facade, mnemonic, path)

        mnemonic = generate_mnemonic()
        self.console.print(
            "[yellow]No key provided, a new account was generated. "
            "Back up this mnemonic:[/yellow]"
        )
        self.console.print(mnemonic, markup=False)
        return create_account_from_mnemonic(self.facade, mnemonic, path)

    def configure(self):
        self.connect()
        account = self.resolve_account()
        self.console.print(f"Account: {account.address}")
        self.logger.info("Configured contract for account %s", account.address)
        return account

    def run(self) -> BroadcastResult | None:
        """Configure and execute; ``None`` means there was nothing to do."""
        if self.description:
            self.console.print(f"[bold]{self.description}[/bold]")
        try:
            account = self.configure()
            return self.execute(account)
        except NetworkError as e:
            if e.is_connectivity_error:
                raise ConnectivityError(e.message, code=e.node_code) from e
            raise ContractError(e.message, code=e.node_code) from e

    @abstractmethod
    def execute(self, account) -> BroadcastResult | None: ...

    # -- execution -----------------------------------------------------------

    def announce_transaction(self, account, transaction) -> BroadcastResult:
        signed = self.signer.sign(account, transaction)
        return self.broadcaster.announce(account, signed)

    def announce_complete(
        self,
        account,
        transactions: list,
        fee: int = ContractConstants.DEFAULT_AGGREGATE_FEE,
    ) -> BroadcastResult:
        aggregate = self.factory.aggregate_complete(
            str(account.public_key), transactions, fee=fee
        )
        return self.announce_transaction(account, aggregate)

    def announce_bonded(
        self,
        account,
        transactions: list,
        fee: int = ContractConstants.DEFAULT_AGGREGATE_FEE,
    ) -> BroadcastResult:
        """Sign a bonded aggregate, lock its hash and announce both."""
        public_key = str(account.public_key)
        aggregate = self.factory.aggregate_bonded(public_key, transactions, fee=fee)
        signed_aggregate = self.signer.sign(account, aggregate)

        lock = self.factory.hash_lock_transaction(
            public_key,
            self.lock_mosaic_id(),
            self.lock_amount,
            ContractConstants.LOCK_DURATION,
            signed_aggregate.hash,
            fee=ContractConstants.DEFAULT_TRANSACTION_FEE,
        )
        signed_lock = self.signer.sign(account, lock)

        return self.broadcaster.announce_partial(account, signed_lock, signed_aggregate)


def exit_code_for(result: BroadcastResult | None) -> int:
    return 0 if result is None else result.exit_code
