"""Creation of the signing account from a key, a mnemonic or at random."""

from __future__ import annotations

from symbolchain.Bip32 import Bip32
from symbolchain.CryptoTypes import PrivateKey
from symbolchain.facade.SymbolFacade import SymbolFacade

from symbol_contracts.config import DEFAULT_DERIVATION_PATH
from symbol_contracts.shared.errors import ParameterError
from symbol_contracts.shared.validation import HexKeyValidator

HARDENED_SUFFIXES = ("'", "h", "H")


def parse_derivation_path(path: str) -> list[int]:
    """Parse ``m/44'/4343'/0'/0'/0'`` into ``[44, 4343, 0, 0, 0]``.

    Symbol derives ed25519 keys, where every level is hardened, so the
    hardened marker is optional.
    """
    parts = path.strip().split("/")
    if not parts or parts[0] != "m":
        raise ParameterError(f"Invalid derivation path: {path}")

    indexes = []
    for part in parts[1:]:
        index = part.rstrip("".join(HARDENED_SUFFIXES))
        if not index.isdigit():
            raise ParameterError(f"Invalid derivation path: {path}")
        indexes.append(int(index))

    if not indexes:
        raise ParameterError(f"Invalid derivation path: {path}")
    return indexes


def create_account_from_private_key(facade: SymbolFacade, private_key: str):
    result = HexKeyValidator.validate(private_key, "Private key")
    if not result.is_valid:
        raise ParameterError(result.error_message or "Invalid private key")
    return facade.create_account(PrivateKey(result.normalized_value))


def create_account_from_mnemonic(
    facade: SymbolFacade,
    mnemonic: str,
    path: str = DEFAULT_DERIVATION_PATH,
    password: str = "",
):
    words = " ".join(mnemonic.strip().lower().split())
    if len(words.split(" ")) not in (12, 15, 18, 21, 24):
        raise ParameterError("Invalid mnemonic: expected 12 to 24 words")

    try:
        node = Bip32().from_mnemonic(words, password).derive_path(
            parse_derivation_path(path)
        )
    except (ValueError, LookupError) as e:
        raise ParameterError(f"Invalid mnemonic: {e}") from e

    key_pair = SymbolFacade.bip32_node_to_key_pair(node)
    return facade.create_account(key_pair.private_key)


def generate_mnemonic() -> str:
    return Bip32().random()
