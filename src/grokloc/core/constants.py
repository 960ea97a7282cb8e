"""Application-wide constants.

This module defines constants used throughout the package
to avoid magic numbers and ensure consistency.
"""

# Safe values
STR_MAX = 8192

# Hex-encoded key and iv lengths (AES-128)
KEY_LEN = 32
IV_LEN = 32

# Hash lengths
SHA256_HEX_LENGTH = 64

# Password derivation (bcrypt cost)
MIN_KDF_ROUNDS = 4
DEFAULT_KDF_ROUNDS = 12
MAX_KDF_ROUNDS = 31

# Schema versions
USER_SCHEMA_VERSION = 0
ORG_SCHEMA_VERSION = 0
