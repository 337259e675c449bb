class NtagError(Exception):
    """Base exception for NTAG424 SDM operations."""
    pass

class HexFormatError(NtagError):
    """Raised when a hex input cannot be parsed."""
    pass

class KeyNotConfiguredError(NtagError):
    """Raised when no SDM key was passed and none is configured."""
    pass

class DecryptionError(NtagError):
    """Raised when the PICC data cannot be decrypted."""
    pass

class ExtractionError(NtagError):
    """Raised when UID and counter cannot be read from decrypted PICC data."""
    pass
