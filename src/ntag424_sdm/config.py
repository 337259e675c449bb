"""Runtime configuration: SDM key lookup and hex input parsing."""

import binascii
import os
from typing import Optional

from .constants import SDM_KEY_ENV_VAR, ERR_KEY_NOT_CONFIGURED
from .exceptions import HexFormatError, KeyNotConfiguredError


def get_env_sdm_key_hex() -> Optional[str]:
    """Return the SDM key configured in the environment, if any."""
    return os.environ.get(SDM_KEY_ENV_VAR) or None


def resolve_sdm_key_hex(sdm_key_hex: Optional[str] = None) -> str:
    """
    Pick the SDM key to use for a verification.

    An explicitly passed key wins; otherwise the NTAG424_SDM_KEY environment
    variable is used. Empty strings count as absent.

    Raises:
        KeyNotConfiguredError: neither source provides a key.
    """
    if sdm_key_hex:
        return sdm_key_hex
    env_key = get_env_sdm_key_hex()
    if env_key:
        return env_key
    raise KeyNotConfiguredError(ERR_KEY_NOT_CONFIGURED)


def parse_hex(value: str, field: str) -> bytes:
    """Convert hex text (either case) to bytes, raising HexFormatError if malformed."""
    try:
        return binascii.unhexlify(value.strip())
    except (binascii.Error, ValueError) as e:
        raise HexFormatError(f"Invalid hex in {field}: {e}") from e
