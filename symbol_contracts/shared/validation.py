"""Input validation for contract parameters."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

HEX_64_PATTERN = re.compile(r"^[0-9A-Fa-f]{64}$")
MOSAIC_ID_PATTERN = re.compile(r"^(0x)?[0-9A-Fa-f]{16}$")
NAMESPACE_PART_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
ADDRESS_PATTERN = re.compile(r"^[TN][A-Z2-7]{38}$")

MAX_NAMESPACE_DEPTH = 3
MAX_NAMESPACE_PART_LENGTH = 64
MAX_DIVISIBILITY = 6
MAX_AMOUNT = 9_223_372_036_854_775_807


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


class AddressValidator:
    @staticmethod
    def normalize(address: str) -> str:
        return address.replace("-", "").strip().upper()

    @classmethod
    def validate(cls, address: str | None) -> ValidationResult:
        if not address or not address.strip():
            return ValidationResult(False, "Address is required")

        normalized = cls.normalize(address)
        if not ADDRESS_PATTERN.match(normalized):
            return ValidationResult(False, f"Invalid address format: {address}")

        return ValidationResult(True, normalized_value=normalized)


class HexKeyValidator:
    """Validates 32-byte hex values: public keys, private keys and hashes."""

    @staticmethod
    def validate(value: str | None, label: str = "Value") -> ValidationResult:
        if not value or not value.strip():
            return ValidationResult(False, f"{label} is required")

        normalized = value.strip()
        if not HEX_64_PATTERN.match(normalized):
            return ValidationResult(
                False, f"{label} must be 64 hexadecimal characters"
            )

        return ValidationResult(True, normalized_value=normalized.upper())


class NamespaceNameValidator:
    @staticmethod
    def validate(name: str | None) -> ValidationResult:
        if not name or not name.strip():
            return ValidationResult(False, "Name is required")

        normalized = name.strip().lower()
        parts = normalized.split(".")
        if len(parts) > MAX_NAMESPACE_DEPTH:
            return ValidationResult(
                False,
                f'Invalid namespace name "{name}", maximum {MAX_NAMESPACE_DEPTH} levels allowed.',
            )

        for part in parts:
            if len(part) > MAX_NAMESPACE_PART_LENGTH:
                return ValidationResult(
                    False,
                    f'Namespace part "{part}" exceeds {MAX_NAMESPACE_PART_LENGTH} characters',
                )
            if not NAMESPACE_PART_PATTERN.match(part):
                return ValidationResult(
                    False,
                    f'Namespace part "{part}" may only contain a-z, 0-9, "_" and "-"',
                )

        return ValidationResult(True, normalized_value=normalized)


class AssetAmountValidator:
    """Parses ``"<amount> <asset>"`` entries such as ``"10 symbol.xym"``.

    The asset is either a namespace name or a 16 hex characters mosaic id.
    The amount is an absolute integer amount unless a ``scale`` is given, in
    which case it is multiplied by ``10 ** scale``.
    """

    @staticmethod
    def validate_asset(asset: str) -> ValidationResult:
        if MOSAIC_ID_PATTERN.match(asset):
            return ValidationResult(True, normalized_value=asset.lower())
        return NamespaceNameValidator.validate(asset)

    @classmethod
    def parse(
        cls, value: str | None, label: str = "asset", scale: int = 0
    ) -> ValidationResult:
        if not value or not value.strip():
            return ValidationResult(False, f"An amount and mosaic are required in {label}")

        parts = value.strip().split()
        if len(parts) != 2:
            return ValidationResult(
                False,
                f"Expected an amount and mosaic in {label}, Ex.: 10 symbol.xym",
            )

        raw_amount, raw_asset = parts
        if not raw_amount.isdigit():
            return ValidationResult(
                False, f"Amount in {label} must be a non-negative integer"
            )

        amount = int(raw_amount) * (10**scale)
        if amount > MAX_AMOUNT:
            return ValidationResult(False, f"Amount in {label} exceeds the maximum")

        asset_result = cls.validate_asset(raw_asset)
        if not asset_result.is_valid:
            return asset_result

        return ValidationResult(
            True, normalized_value=(amount, asset_result.normalized_value)
        )


class DivisibilityValidator:
    @staticmethod
    def validate(value: Any) -> ValidationResult:
        try:
            divisibility = int(str(value).strip())
        except (TypeError, ValueError):
            return ValidationResult(False, "Please, enter a valid divisibility (0-6).")

        # out of range values are clamped rather than rejected
        clamped = min(max(divisibility, 0), MAX_DIVISIBILITY)
        return ValidationResult(True, normalized_value=clamped)


class SupplyValidator:
    @staticmethod
    def validate(value: Any) -> ValidationResult:
        raw = str(value).strip().replace(",", "").replace("_", "")
        if not raw.isdigit():
            return ValidationResult(False, "Please, enter a valid supply.")

        supply = int(raw)
        if supply <= 0:
            return ValidationResult(False, "Supply must be greater than zero")
        if supply > MAX_AMOUNT:
            return ValidationResult(False, "Supply exceeds the maximum")

        return ValidationResult(True, normalized_value=supply)


MOSAIC_FLAG_NAMES = {
    "supplymutable": "supply_mutable",
    "transferable": "transferable",
    "restrictable": "restrictable",
    "revokable": "revokable",
}


def parse_mosaic_flags(value: str | None) -> dict[str, bool]:
    """Parse ``Transferable|SupplyMutable`` style flags; unknown names are ignored."""
    flags = {name: False for name in MOSAIC_FLAG_NAMES.values()}
    for token in re.split(r"[|,\s]+", (value or "").lower()):
        if token in MOSAIC_FLAG_NAMES:
            flags[MOSAIC_FLAG_NAMES[token]] = True
    return flags
