"""Shared utilities for the Symbol disposable smart contracts."""

from symbol_contracts.shared.errors import (
    ConnectivityError,
    ContractError,
    ParameterError,
)
from symbol_contracts.shared.logging import (
    ContextAdapter,
    LoggingConfig,
    LogLevel,
    get_logger,
    get_user_friendly_error,
    sanitize_dict,
    sanitize_message,
    setup_logging,
)
from symbol_contracts.shared.network import (
    NetworkClient,
    NetworkError,
    NetworkErrorType,
    RetryConfig,
    TimeoutConfig,
)
from symbol_contracts.shared.validation import (
    AddressValidator,
    AssetAmountValidator,
    HexKeyValidator,
    NamespaceNameValidator,
    ValidationResult,
)

__all__ = [
    "ConnectivityError",
    "ContractError",
    "ParameterError",
    "NetworkClient",
    "NetworkError",
    "NetworkErrorType",
    "RetryConfig",
    "TimeoutConfig",
    "AddressValidator",
    "AssetAmountValidator",
    "HexKeyValidator",
    "NamespaceNameValidator",
    "ValidationResult",
    "ContextAdapter",
    "LoggingConfig",
    "LogLevel",
    "get_logger",
    "get_user_friendly_error",
    "sanitize_dict",
    "sanitize_message",
    "setup_logging",
]
