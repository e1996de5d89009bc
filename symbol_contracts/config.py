"""Runtime configuration for contract execution."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from symbol_contracts.listener import ListenerConfig
from symbol_contracts.shared.logging import ENV_PREFIX
from symbol_contracts.shared.network import RetryConfig, TimeoutConfig

DEFAULT_NODE_URL = "http://sym-test-01.opening-line.jp:3000"
DEFAULT_EXPLORER_URL = "https://testnet.symbol.fyi"
DEFAULT_DERIVATION_PATH = "m/44'/4343'/0'/0'/0'"


@dataclass
class ContractConfig:
    node_url: str | None = None
    explorer_url: str = DEFAULT_EXPLORER_URL
    wait_timeout: float | None = None
    debug: bool = False
    interactive: bool = True
    timeout_config: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry_config: RetryConfig = field(default_factory=RetryConfig)
    listener_config: ListenerConfig = field(default_factory=ListenerConfig)

    @classmethod
    def from_environment(cls, **overrides) -> "ContractConfig":
        """Build a config from ``SYMBOL_CONTRACT_*`` variables.

        Keyword arguments that are not ``None`` take precedence, so CLI flags
        override the environment.
        """
        wait_timeout: float | None = None
        raw_timeout = os.getenv(f"{ENV_PREFIX}WAIT_TIMEOUT", "").strip()
        if raw_timeout:
            try:
                wait_timeout = float(raw_timeout)
            except ValueError:
                wait_timeout = None

        values = {
            "node_url": os.getenv(f"{ENV_PREFIX}NODE_URL") or None,
            "explorer_url": os.getenv(f"{ENV_PREFIX}EXPLORER_URL")
            or DEFAULT_EXPLORER_URL,
            "wait_timeout": wait_timeout,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        if values["wait_timeout"] is not None and values["wait_timeout"] <= 0:
            values["wait_timeout"] = None

        return cls(**values)
