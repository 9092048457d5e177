"""Hex and UTF-8 conversion primitives.

Hex input is accepted in any case; hex output is always lowercase. Every
failure raises [EncodingError][nostrcore.core.exceptions.EncodingError] so
callers never see a bare ``ValueError`` from ``bytes.fromhex``.
"""

from __future__ import annotations

from nostrcore.core.exceptions import EncodingError, ErrorCode


_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string into bytes.

    Raises:
        EncodingError: ``INVALID_HEX`` if *value* is not a string, has odd
            length, or contains a non-hex character (whitespace included).
    """
    if not isinstance(value, str):
        raise EncodingError(
            f"Hex value must be a str, got {type(value).__name__}", code=ErrorCode.INVALID_HEX
        )
    if len(value) % 2:
        raise EncodingError(
            f"Invalid hex string: odd length {len(value)}", code=ErrorCode.INVALID_HEX
        )
    # bytes.fromhex tolerates embedded whitespace; hex fields must not.
    if not _HEX_DIGITS.issuperset(value):
        raise EncodingError(
            "Invalid hex string: contains non-hex characters", code=ErrorCode.INVALID_HEX
        )
    return bytes.fromhex(value)


def bytes_to_hex(data: bytes) -> str:
    """Encode bytes as a lowercase hex string."""
    return bytes(data).hex()


def is_hex(value: object, n_bytes: int | None = None) -> bool:
    """Return True when *value* is a hex string, optionally of exactly *n_bytes*."""
    if not isinstance(value, str) or len(value) % 2 or not _HEX_DIGITS.issuperset(value):
        return False
    return n_bytes is None or len(value) == n_bytes * 2


def require_hex(value: object, n_bytes: int, name: str) -> str:
    """Return *value* as lowercase hex of exactly *n_bytes* bytes.

    Raises:
        EncodingError: ``INVALID_HEX`` naming the field and the expected length.
    """
    if not is_hex(value, n_bytes):
        raise EncodingError(
            f"Invalid {name}: expected {n_bytes * 2} hex characters ({n_bytes} bytes)",
            code=ErrorCode.INVALID_HEX,
        )
    assert isinstance(value, str)  # noqa: S101  # narrowed by is_hex
    return value.lower()


def utf8_encode(text: str) -> bytes:
    """Encode text as UTF-8.

    Raises:
        EncodingError: ``ENCODING_FAILED`` for lone surrogates.
    """
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Text is not encodable as UTF-8: {e.reason}") from e


def utf8_decode(data: bytes) -> str:
    """Decode UTF-8 bytes strictly.

    Raises:
        EncodingError: ``ENCODING_FAILED`` for invalid byte sequences.
    """
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Invalid UTF-8 data: {e.reason}") from e
