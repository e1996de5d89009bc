"""Exceptions raised while configuring and executing a contract."""

from __future__ import annotations


class ContractError(Exception):
    """An error reported to the user, after which the contract aborts."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class ConnectivityError(ContractError):
    """The node or its WebSocket endpoint cannot be reached."""


class ParameterError(ContractError):
    """A contract parameter is missing or malformed."""
