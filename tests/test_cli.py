"""Tests for the command line interface."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from symbol_contracts import __version__
from symbol_contracts.broadcaster import BroadcastResult, Outcome
from symbol_contracts.cli import app
from symbol_contracts.contracts import CreateAsset, EscrowAsset, OpenTimestamp
from symbol_contracts.shared.errors import ConnectivityError, ParameterError

runner = CliRunner()

CONFIRMED = BroadcastResult(Outcome.CONFIRMED, "AB" * 32)
FAILED = BroadcastResult(Outcome.FAILED, "AB" * 32, code="Failure_Core_Insufficient_Balance")


class TestCLIVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"symbol-contract version {__version__}" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])

        assert result.exit_code == 0
        assert "symbol-contract version" in result.stdout


class TestCLIHelp:
    def test_lists_contracts(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in (
            "CreateAsset",
            "EscrowAsset",
            "RequestAsset",
            "PartialCosignature",
            "OpenTimestamp",
        ):
            assert command in result.stdout

    def test_escrow_options(self):
        result = runner.invoke(app, ["EscrowAsset", "--help"])

        assert result.exit_code == 0
        for option in ("--asset1", "--taker", "--asset2", "--lock"):
            assert option in result.stdout


class TestRunContract:
    def test_passes_common_and_contract_options(self):
        with patch.object(CreateAsset, "run", autospec=True, return_value=CONFIRMED) as run:
            result = runner.invoke(
                app,
                [
                    "-a", "http://localhost:3000",
                    "-t", "60",
                    "-p", "AB" * 32,
                    "-y",
                    "CreateAsset",
                    "--name", "company.token",
                    "-s", "1000",
                ],
            )

        assert result.exit_code == 0
        contract = run.call_args.args[0]
        assert contract.config.node_url == "http://localhost:3000"
        assert contract.config.wait_timeout == 60.0
        assert contract.config.interactive is False
        assert contract.inputs["private_key"] == "AB" * 32
        assert contract.inputs["name"] == "company.token"
        assert contract.inputs["supply"] == "1000"
        assert contract.inputs["divisibility"] is None

    def test_failed_outcome_exits_with_one(self):
        with patch.object(EscrowAsset, "run", return_value=FAILED):
            result = runner.invoke(app, ["-y", "EscrowAsset"])

        assert result.exit_code == 1

    def test_nothing_to_do_exits_with_zero(self):
        with patch.object(OpenTimestamp, "run", return_value=None):
            result = runner.invoke(app, ["OpenTimestamp", "--data", "x"])

        assert result.exit_code == 0

    @pytest.mark.parametrize(
        "error,expected",
        [
            (ParameterError("Missing required option --name"), "--name"),
            (ConnectivityError("Cannot connect to node: http://localhost:3000"), "Check the node URL"),
        ],
    )
    def test_contract_errors(self, error, expected):
        with patch.object(CreateAsset, "run", side_effect=error):
            result = runner.invoke(app, ["-y", "CreateAsset"])

        assert result.exit_code == 1
        assert expected in result.stdout

    def test_keyboard_interrupt(self):
        with patch.object(CreateAsset, "run", side_effect=KeyboardInterrupt):
            result = runner.invoke(app, ["CreateAsset"])

        assert result.exit_code == 1
        assert "cancelled" in result.stdout
