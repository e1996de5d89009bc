"""Command line interface for the Symbol disposable smart contracts.

Commands:
    CreateAsset         Register a namespace and a mosaic linked to it
    EscrowAsset         Exchange assets with a second party
    RequestAsset        Request an asset from another account
    PartialCosignature  Cosign pending aggregate bonded transactions
    OpenTimestamp       Timestamp data publicly

Exit code is 0 when the contract executed successfully, 1 otherwise.
"""

from __future__ import annotations

from typing import Any, Optional

import typer
from rich.console import Console

from symbol_contracts import __version__
from symbol_contracts.config import ContractConfig
from symbol_contracts.contract import exit_code_for
from symbol_contracts.contracts import CONTRACTS
from symbol_contracts.shared.errors import ContractError
from symbol_contracts.shared.logging import (
    LoggingConfig,
    get_logger,
    get_user_friendly_error,
    setup_logging,
)

app = typer.Typer(
    name="symbol-contract",
    help="Disposable smart contracts for the Symbol blockchain",
    add_completion=False,
)
console = Console()
logger = get_logger(__name__)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"symbol-contract version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    api_url: Optional[str] = typer.Option(
        None, "--api-url", "-a", help="Node REST URL (default: a testnet node)"
    ),
    explorer_url: Optional[str] = typer.Option(
        None, "--explorer-url", "-e", help="Block explorer URL used in reports"
    ),
    private_key: Optional[str] = typer.Option(
        None, "--private-key", "-p", help="Private key of the signing account"
    ),
    mnemonic: Optional[str] = typer.Option(
        None, "--mnemonic", "-m", help="BIP39 mnemonic of the signing account"
    ),
    path: Optional[str] = typer.Option(
        None, "--path", help="Derivation path used with --mnemonic"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Seconds to wait for an outcome (default: forever)"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Print hashes and payloads"),
    non_interactive: bool = typer.Option(
        False, "--non-interactive", "-y", help="Never prompt, fail on missing options"
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Symbol disposable smart contracts."""
    setup_logging(LoggingConfig.from_environment(debug=debug))
    ctx.obj = {
        "config": ContractConfig.from_environment(
            node_url=api_url,
            explorer_url=explorer_url,
            wait_timeout=timeout,
            debug=debug,
            interactive=not non_interactive,
        ),
        "inputs": {"private_key": private_key, "mnemonic": mnemonic, "path": path},
    }


def run_contract(ctx: typer.Context, name: str, inputs: dict[str, Any]) -> None:
    contract_class = CONTRACTS[name]
    obj = ctx.obj or {}
    config = obj.get("config") or ContractConfig.from_environment()
    contract = contract_class(
        config, {**obj.get("inputs", {}), **inputs}, console=console
    )

    try:
        result = contract.run()
    except ContractError as e:
        logger.error("%s aborted: %s", contract_class.name, e.message)
        console.print(f"[red]{e.message}[/red]")
        _, suggestion = get_user_friendly_error(e.message)
        if suggestion:
            console.print(f"[yellow]{suggestion}[/yellow]")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("[yellow]Contract execution cancelled.[/yellow]")
        raise typer.Exit(code=1)

    raise typer.Exit(code=exit_code_for(result))


@app.command("CreateAsset")
def create_asset(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Asset name (namespace)"),
    divisibility: Optional[str] = typer.Option(
        None, "--divisibility", "-c", help="Number of decimal places (0-6)"
    ),
    supply: Optional[str] = typer.Option(None, "--supply", "-s", help="Initial supply"),
    flags: Optional[str] = typer.Option(
        None, "--flags", "-f", help="Ex.: Transferable|SupplyMutable|Restrictable"
    ),
) -> None:
    """Register a namespace and a mosaic linked to it."""
    run_contract(
        ctx,
        "CreateAsset",
        {"name": name, "divisibility": divisibility, "supply": supply, "flags": flags},
    )


@app.command("EscrowAsset")
def escrow_asset(
    ctx: typer.Context,
    asset1: Optional[str] = typer.Option(
        None, "--asset1", help="Asset you send, Ex.: 10 symbol.xym"
    ),
    taker: Optional[str] = typer.Option(
        None, "--taker", help="Public key of the second party"
    ),
    asset2: Optional[str] = typer.Option(
        None, "--asset2", help="Asset you receive, Ex.: 10 symbol.xym"
    ),
    lock: Optional[str] = typer.Option(
        None, "--lock", "-l", help="Hash lock deposit (default: 10 of the network currency)"
    ),
) -> None:
    """Exchange assets with a second party."""
    run_contract(
        ctx,
        "EscrowAsset",
        {"asset1": asset1, "taker": taker, "asset2": asset2, "lock": lock},
    )


@app.command("RequestAsset")
def request_asset(
    ctx: typer.Context,
    asset: Optional[str] = typer.Option(
        None, "--asset", help="Requested asset, Ex.: 10 symbol.xym"
    ),
    sender: Optional[str] = typer.Option(
        None, "--from", help="Address of the account sending the asset"
    ),
    lock: Optional[str] = typer.Option(
        None, "--lock", "-l", help="Hash lock deposit (default: 10 of the network currency)"
    ),
) -> None:
    """Request an asset from another account."""
    run_contract(ctx, "RequestAsset", {"asset": asset, "from": sender, "lock": lock})


@app.command("PartialCosignature")
def partial_cosignature(
    ctx: typer.Context,
    transaction_hash: Optional[str] = typer.Option(
        None, "--hash", "-H", help="Partial transaction hash (default: all pending)"
    ),
) -> None:
    """Cosign pending aggregate bonded transactions."""
    run_contract(ctx, "PartialCosignature", {"hash": transaction_hash})


@app.command("OpenTimestamp")
def open_timestamp(
    ctx: typer.Context,
    data: Optional[str] = typer.Option(None, "--data", "-i", help="Data to timestamp"),
) -> None:
    """Timestamp data publicly."""
    run_contract(ctx, "OpenTimestamp", {"data": data})


def main() -> None:
    app()
