"""
Pytest configuration and shared fixtures for nostrcore tests.

Provides:
- Deterministic secp256k1 test keys (DO NOT USE IN PRODUCTION)
- A fixed timestamp and fixed BIP-340 auxiliary randomness
- Unsigned and signed sample events
"""

import logging
from typing import Any

import pytest

from nostrcore.models.event import Event
from nostrcore.nips.nip01 import sign_event


# ============================================================================
# Test Keys
# ============================================================================

# Private key 1: x-only public key is the secp256k1 generator's x coordinate
PRIVATE_KEY_ONE = "0" * 63 + "1"  # pragma: allowlist secret
PUBLIC_KEY_ONE = "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"

# Private key 3: BIP-340 test vector 0
PRIVATE_KEY_THREE = "0" * 63 + "3"  # pragma: allowlist secret
PUBLIC_KEY_THREE = "f9308a019258c31049344f85f89d5229b531c845836f99b08601f113bce036f9"

FIXED_TIMESTAMP = 1_700_000_000
FIXED_AUX = bytes(32)

# sha256('[0,"<PUBLIC_KEY_ONE>",1700000000,1,[],"hi"]')
HI_EVENT_ID = "33c758466a465ce9df004b6d6e3abb039d593277784c276c49725a622794eca0"


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Key Fixtures
# ============================================================================


@pytest.fixture
def private_key() -> str:
    return PRIVATE_KEY_ONE


@pytest.fixture
def public_key() -> str:
    return PUBLIC_KEY_ONE


@pytest.fixture
def other_private_key() -> str:
    return PRIVATE_KEY_THREE


@pytest.fixture
def other_public_key() -> str:
    return PUBLIC_KEY_THREE


# ============================================================================
# Event Fixtures
# ============================================================================


@pytest.fixture
def unsigned_event() -> Event:
    """Kind 1 note whose canonical id is HI_EVENT_ID once signed by key 1."""
    return Event(kind=1, content="hi", created_at=FIXED_TIMESTAMP)


@pytest.fixture
def signed_event(unsigned_event: Event) -> Event:
    return sign_event(unsigned_event, PRIVATE_KEY_ONE, aux_randomness=FIXED_AUX)


@pytest.fixture
def signed_event_dict(signed_event: Event) -> dict[str, Any]:
    return signed_event.to_dict()
