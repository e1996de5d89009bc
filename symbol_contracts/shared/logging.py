"""Logging configuration for the disposable smart contracts.

This module provides:
- Log levels configured from the environment or the ``--debug`` flag
- Redaction of private keys and mnemonic passphrases
- Mapping of node status codes and transport errors to user messages
- Structured (JSON) or human readable log records
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

ENV_PREFIX = "SYMBOL_CONTRACT_"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class LoggingConfig:
    log_level: LogLevel = LogLevel.INFO
    log_to_file: bool = True
    log_to_stdout: bool = False
    log_dir: Path | None = None
    log_filename: str = "contracts.log"
    json_format: bool = False
    sanitize_sensitive: bool = True

    @classmethod
    def from_environment(cls, debug: bool = False) -> "LoggingConfig":
        env_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()
        try:
            log_level = LogLevel(env_level)
        except ValueError:
            log_level = LogLevel.INFO

        if debug:
            log_level = LogLevel.DEBUG

        def flag(name: str) -> bool:
            return os.getenv(f"{ENV_PREFIX}{name}", "").lower() in ("1", "true", "yes")

        return cls(
            log_level=log_level,
            log_to_stdout=flag("LOG_STDOUT"),
            log_to_file=not flag("LOG_NO_FILE"),
            json_format=os.getenv(f"{ENV_PREFIX}LOG_FORMAT", "human").lower() == "json",
        )


SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"(private[_-]?key['\"]?\s*[:=]\s*['\"]?)([A-Fa-f0-9]{64})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
    (
        re.compile(
            r"(mnemonic['\"]?\s*[:=]\s*['\"]?)([a-z]+(?:\s+[a-z]+){11,23})",
            re.IGNORECASE,
        ),
        r"\1[REDACTED]",
    ),
]

# a bare 64 hex string is either a key or a transaction hash; hashes are kept
# when they appear after "hash"
BARE_KEY_PATTERN = re.compile(r"(?<![Hh]ash[:= ])\b[A-Fa-f0-9]{64}\b")

SENSITIVE_KEYS = ("private_key", "privatekey", "mnemonic", "passphrase", "secret")


def sanitize_message(message: str, redact_bare_keys: bool = False) -> str:
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    if redact_bare_keys:
        sanitized = BARE_KEY_PATTERN.sub("[KEY_REDACTED]", sanitized)

    return sanitized


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            result[key] = "[REDACTED]"
        elif isinstance(value, str):
            result[key] = sanitize_message(value)
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value)
        else:
            result[key] = value
    return result


@dataclass
class ErrorMapping:
    error_pattern: str
    user_message: str
    suggest_action: str | None = None


ERROR_MAPPINGS: list[ErrorMapping] = [
    ErrorMapping(
        error_pattern="timeout|timed out",
        user_message="Connection timed out. The node may be slow or unavailable.",
        suggest_action="Try again later or use another node with --api-url.",
    ),
    ErrorMapping(
        error_pattern="connection refused|cannot connect|connection error",
        user_message="Unable to connect to the node.",
        suggest_action="Check the node URL and your network connection.",
    ),
    ErrorMapping(
        error_pattern="insufficient_balance|insufficient balance",
        user_message="Insufficient balance for this contract.",
        suggest_action="Fund the account with enough XYM for fees and deposits.",
    ),
    ErrorMapping(
        error_pattern="failure_lockhash|hash lock",
        user_message="The spam protection lock was rejected by the network.",
        suggest_action="Check the lock asset and amount passed with --lock.",
    ),
    ErrorMapping(
        error_pattern="failure_namespace",
        user_message="The namespace could not be registered.",
        suggest_action="Choose another name or renew the existing namespace.",
    ),
    ErrorMapping(
        error_pattern="failure_aggregate",
        user_message="The aggregate transaction was rejected by the network.",
        suggest_action="Verify that all parties and assets are valid.",
    ),
    ErrorMapping(
        error_pattern="deadline",
        user_message="The transaction deadline has expired.",
        suggest_action="Run the contract again to create a fresh transaction.",
    ),
    ErrorMapping(
        error_pattern="invalid.*address|address.*invalid|unknown on this network",
        user_message="The account address provided is not valid on this network.",
        suggest_action="Please check the address and network.",
    ),
    ErrorMapping(
        error_pattern="invalid.*key|key.*invalid|invalid.*private|mnemonic",
        user_message="The provided key is not valid.",
        suggest_action="Please verify the key or mnemonic and try again.",
    ),
    ErrorMapping(
        error_pattern="not found|404",
        user_message="The requested resource was not found on the node.",
    ),
    ErrorMapping(
        error_pattern="rate limit|too many requests|429",
        user_message="Too many requests sent to the node.",
        suggest_action="Wait a moment and try again.",
    ),
]


def get_user_friendly_error(error: Exception | str) -> tuple[str, str | None]:
    error_message = str(error) if isinstance(error, Exception) else error
    error_lower = error_message.lower()

    for mapping in ERROR_MAPPINGS:
        if re.search(mapping.error_pattern, error_lower):
            return mapping.user_message, mapping.suggest_action

    return "An unexpected error occurred.", None


class StructuredFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True):
        super().__init__()
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            log_data["context"] = sanitize_dict(context) if self.sanitize else context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.sanitize:
            log_data["message"] = sanitize_message(log_data["message"])

        try:
            return json.dumps(log_data)
        except (TypeError, ValueError):
            return f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"


class HumanReadableFormatter(logging.Formatter):
    def __init__(self, sanitize: bool = True):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        context = getattr(record, "context", None)
        if isinstance(context, dict) and context:
            pairs = " ".join(f"{k}={v}" for k, v in sanitize_dict(context).items())
            formatted = f"{formatted} [{pairs}]"
        if self.sanitize:
            formatted = sanitize_message(formatted)
        return formatted


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter attaching a ``context`` dict to every record."""

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None):
        super().__init__(logger, context or {})

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra", {}))
        context = {**(self.extra or {}), **extra.pop("context", {})}
        if context:
            extra["context"] = context
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **kwargs: Any) -> "ContextAdapter":
        return ContextAdapter(self.logger, {**(self.extra or {}), **kwargs})


_logging_initialized = False


def setup_logging(config: LoggingConfig | None = None, force: bool = False) -> None:
    global _logging_initialized

    if _logging_initialized and not force:
        return

    if config is None:
        config = LoggingConfig.from_environment()

    package_logger = logging.getLogger("symbol_contracts")
    package_logger.setLevel(getattr(logging, config.log_level.value))

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    def build_formatter() -> logging.Formatter:
        if config.json_format:
            return StructuredFormatter(sanitize=config.sanitize_sensitive)
        return HumanReadableFormatter(sanitize=config.sanitize_sensitive)

    handlers: list[logging.Handler] = []

    if config.log_to_file:
        if config.log_dir is None:
            config.log_dir = Path.home() / ".symbol-contracts"
        config.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(
                config.log_dir / config.log_filename, mode="a", encoding="utf-8"
            )
        )

    if config.log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))

    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        handler.setFormatter(build_formatter())
        package_logger.addHandler(handler)

    package_logger.propagate = False
    _logging_initialized = True


def get_logger(name: str, context: dict[str, Any] | None = None) -> ContextAdapter:
    return ContextAdapter(logging.getLogger(name), context)


__all__ = [
    "LogLevel",
    "LoggingConfig",
    "ContextAdapter",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "sanitize_message",
    "sanitize_dict",
    "get_user_friendly_error",
    "setup_logging",
    "get_logger",
]
