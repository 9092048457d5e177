"""secp256k1 / BIP-340 primitive adapter.

Thin wrapper over ``coincurve`` (libsecp256k1) and ``hashlib``. Keys,
messages and signatures cross this boundary as lowercase hex strings except
for [sha256()][nostrcore.utils.crypto.sha256], which works on bytes.

Public keys are x-only (32 bytes) as required by BIP-340 and Nostr.

Warning:
    Private keys handled here are never logged. Keep them out of
    exception messages as well.
"""

from __future__ import annotations

import hashlib
import secrets
from typing import NamedTuple

from coincurve import PrivateKey, PublicKeyXOnly

from nostrcore.core.exceptions import CryptoError, ErrorCode
from nostrcore.core.logger import Logger
from nostrcore.models.constants import (
    EVENT_ID_BYTES,
    PRIVATE_KEY_BYTES,
    PUBKEY_BYTES,
    SIGNATURE_BYTES,
)

from .encoding import is_hex


logger = Logger(__name__)

_AUX_RANDOMNESS_BYTES = 32


class KeyPair(NamedTuple):
    """A private key with its derived x-only public key, both in hex."""

    private_key: str
    public_key: str


def sha256(data: bytes) -> bytes:
    """Return the SHA-256 digest of *data*."""
    return hashlib.sha256(data).digest()


def _private_key(private_key: str) -> PrivateKey:
    if not is_hex(private_key, PRIVATE_KEY_BYTES):
        raise CryptoError(
            f"Invalid private key: expected {PRIVATE_KEY_BYTES * 2} hex characters",
            code=ErrorCode.INVALID_KEY,
        )
    try:
        return PrivateKey(bytes.fromhex(private_key))
    except ValueError:
        # Zero or >= curve order
        raise CryptoError(
            "Invalid private key: out of range for secp256k1", code=ErrorCode.INVALID_KEY
        ) from None


def generate_private_key() -> str:
    """Return a new random private key as 64 lowercase hex characters."""
    return PrivateKey().secret.hex()


def derive_public_key(private_key: str) -> str:
    """Return the x-only public key for *private_key*.

    Raises:
        CryptoError: ``INVALID_KEY`` if the key is malformed or out of range.
    """
    return _private_key(private_key).public_key_xonly.format().hex()


def generate_key_pair() -> KeyPair:
    """Generate a fresh [KeyPair][nostrcore.utils.crypto.KeyPair]."""
    private_key = generate_private_key()
    return KeyPair(private_key=private_key, public_key=derive_public_key(private_key))


def sign_schnorr(message: bytes, private_key: str, aux_randomness: bytes | None = None) -> str:
    """Produce a BIP-340 signature over a 32-byte message.

    Args:
        message: The 32-byte message (for events, the id bytes).
        private_key: Signing key as hex.
        aux_randomness: 32 bytes of auxiliary randomness. Fresh random bytes
            are used when omitted; passing fixed bytes makes the signature
            deterministic.

    Returns:
        The 64-byte signature as 128 lowercase hex characters.

    Raises:
        CryptoError: ``INVALID_KEY`` for a malformed key, ``SIGNING_FAILED``
            for a bad message or randomness length.
    """
    key = _private_key(private_key)
    if len(message) != EVENT_ID_BYTES:
        raise CryptoError(
            f"Schnorr message must be {EVENT_ID_BYTES} bytes, got {len(message)}",
            code=ErrorCode.SIGNING_FAILED,
        )
    if aux_randomness is None:
        aux_randomness = secrets.token_bytes(_AUX_RANDOMNESS_BYTES)
    elif len(aux_randomness) != _AUX_RANDOMNESS_BYTES:
        raise CryptoError(
            f"Auxiliary randomness must be {_AUX_RANDOMNESS_BYTES} bytes",
            code=ErrorCode.SIGNING_FAILED,
        )
    try:
        return key.sign_schnorr(message, aux_randomness).hex()
    except ValueError as e:
        raise CryptoError(f"Schnorr signing failed: {e}", code=ErrorCode.SIGNING_FAILED) from e


def verify_schnorr(signature: str, message: bytes, public_key: str) -> bool:
    """Verify a BIP-340 signature. Never raises.

    Returns:
        False for malformed hex, a public key that is not on the curve, or
        a signature that does not verify.
    """
    if not is_hex(signature, SIGNATURE_BYTES) or not is_hex(public_key, PUBKEY_BYTES):
        return False
    try:
        return bool(
            PublicKeyXOnly(bytes.fromhex(public_key)).verify(bytes.fromhex(signature), message)
        )
    except ValueError as e:
        logger.debug("schnorr_verify_error", error=str(e))
        return False
