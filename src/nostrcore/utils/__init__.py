"""Byte/hex primitives, the secp256k1 adapter and key loading.

Attributes:
    encoding: Hex and UTF-8 conversion raising
        [EncodingError][nostrcore.core.exceptions.EncodingError].
    crypto: ``coincurve``-backed BIP-340 signing and verification.
    keys: ``nostr_sdk``-backed private key loading from the environment.
"""

from .crypto import (
    KeyPair,
    derive_public_key,
    generate_key_pair,
    generate_private_key,
    sha256,
    sign_schnorr,
    verify_schnorr,
)
from .encoding import (
    bytes_to_hex,
    hex_to_bytes,
    is_hex,
    require_hex,
    utf8_decode,
    utf8_encode,
)
from .keys import ENV_PRIVATE_KEY, KeysConfig, keys_to_hex, load_keys_from_env, parse_keys


__all__ = [
    "ENV_PRIVATE_KEY",
    "KeyPair",
    "KeysConfig",
    "bytes_to_hex",
    "derive_public_key",
    "generate_key_pair",
    "generate_private_key",
    "hex_to_bytes",
    "is_hex",
    "keys_to_hex",
    "load_keys_from_env",
    "parse_keys",
    "require_hex",
    "sha256",
    "sign_schnorr",
    "utf8_decode",
    "utf8_encode",
    "verify_schnorr",
]
