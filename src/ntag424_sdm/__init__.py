"""NTAG 424 DNA Secure Dynamic Messaging (SUN) verification."""

from .constants import SESSION_ENC_KEY_PURPOSE, SESSION_MAC_KEY_PURPOSE
from .crypto import (
    Subkeys, xor, shift_left, generate_subkeys, calculate_cmac, truncate_cmac,
)
from .exceptions import (
    NtagError, HexFormatError, KeyNotConfiguredError, DecryptionError, ExtractionError,
)
from .sdm import (
    UidAndCounter, SdmSessionVectorOptions, decrypt_picc_data, extract_uid_and_counter,
    generate_sdm_session_vector, generate_sdm_session_key,
)
from .verify import AuthResult, verify_sdm_auth

__version__ = "0.1.0"

__all__ = [
    "SESSION_ENC_KEY_PURPOSE", "SESSION_MAC_KEY_PURPOSE",
    "Subkeys", "xor", "shift_left", "generate_subkeys", "calculate_cmac", "truncate_cmac",
    "NtagError", "HexFormatError", "KeyNotConfiguredError", "DecryptionError", "ExtractionError",
    "UidAndCounter", "SdmSessionVectorOptions", "decrypt_picc_data", "extract_uid_and_counter",
    "generate_sdm_session_vector", "generate_sdm_session_key",
    "AuthResult", "verify_sdm_auth",
]
