"""
Nonce and validity-window helpers for ERC-3009 authorizations.

ERC-3009 nonces are not sequential: the token contract only records which
``(authorizer, nonce)`` pairs were used or canceled, so any unique 32-byte
value works and several authorizations can be outstanding at once.
Uniqueness here rests on 256 bits of OS entropy; issued nonces are not
tracked locally.
"""

import secrets
import time
from typing import Tuple

from .constants import BYTES32_LENGTH


def generate_nonce() -> bytes:
    """
    Generate a cryptographically secure random 32-byte nonce.

    Each authorization MUST use a fresh nonce; reusing one for the same
    authorizer makes the second authorization unusable (or replayable if
    the first was never submitted).

    Returns:
        32 bytes from the operating system CSPRNG.
    """
    return secrets.token_bytes(BYTES32_LENGTH)


def create_time_bounds(duration_seconds: int) -> Tuple[int, int]:
    """
    Return ``(valid_after, valid_before)`` for a window starting now.

    Both values are derived from a single clock sample, so the window is
    exactly ``duration_seconds`` long.

    Args:
        duration_seconds: Window length, e.g. ``3600`` for one hour.

    Returns:
        ``(now, now + duration_seconds)`` as Unix seconds.
    """
    now = int(time.time())
    return now, now + duration_seconds
