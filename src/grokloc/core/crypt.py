"""Crypto engine.

Provides symmetric encryption with caller-supplied keys, one-way digests,
password key derivation and deterministic per-record iv derivation:
- AES-128-CBC with PKCS7 padding, keys and ivs hex-encoded
- SHA-256 hex digests
- bcrypt password hashing via passlib

Every function here is pure given its inputs. Keys are never stored or
transmitted by this module.
"""

import binascii
import hashlib
import secrets

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from passlib.context import CryptContext

from grokloc.core.constants import (
    DEFAULT_KDF_ROUNDS,
    IV_LEN,
    KEY_LEN,
    MAX_KDF_ROUNDS,
    MIN_KDF_ROUNDS,
    SHA256_HEX_LENGTH,
)
from grokloc.core.errors import (
    CipherError,
    IVLengthError,
    KeyLengthError,
    ValidationError,
)


# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=DEFAULT_KDF_ROUNDS,
)

_BLOCK_BITS = algorithms.AES.block_size


# ============================================================
# Random Values
# ============================================================


def random_hex() -> str:
    """Return a new random hex string (len: SHA256_HEX_LENGTH)."""
    return secrets.token_hex(SHA256_HEX_LENGTH // 2)


def random_key() -> str:
    """Return a new random encryption key (len: KEY_LEN)."""
    return secrets.token_hex(KEY_LEN // 2)


def random_iv() -> str:
    """Return a new random encryption iv (len: IV_LEN)."""
    return secrets.token_hex(IV_LEN // 2)


# ============================================================
# Digests
# ============================================================


def sha256_hex(s: str) -> str:
    """Return the hex-encoded sha256 digest of s."""
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def iv_truncate(s: str) -> str:
    """Truncate an existing seed string to IV_LEN."""
    return s[:IV_LEN]


def derive_iv(seed: str) -> str:
    """Construct a deterministic iv (len: IV_LEN) for a seed.

    Re-deriving an iv for a stored record only needs the seed, so no iv
    column is stored.
    """
    return iv_truncate(sha256_hex(seed))


# ============================================================
# Password Derivation
# ============================================================


def kdf(s: str, cost: int = DEFAULT_KDF_ROUNDS) -> str:
    """Create a safe-to-store password derivation.

    Args:
        s: Plain text password
        cost: bcrypt cost factor

    Returns:
        Bcrypt hash of the password

    Raises:
        ValidationError: If cost is outside MIN_KDF_ROUNDS..MAX_KDF_ROUNDS
    """
    if not MIN_KDF_ROUNDS <= cost <= MAX_KDF_ROUNDS:
        raise ValidationError(
            "KDF cost out of range",
            details={"cost": cost, "min": MIN_KDF_ROUNDS, "max": MAX_KDF_ROUNDS},
        )
    return pwd_context.handler("bcrypt").using(rounds=cost).hash(s)


def kdf_verify(s: str, hashed: str) -> bool:
    """Return True if s matches the password that formed hashed."""
    return pwd_context.verify(s, hashed)


def is_derived(s: str) -> bool:
    """Return True if s is recognizable as output of ``kdf``."""
    return pwd_context.identify(s) is not None


# ============================================================
# Symmetric Encryption
# ============================================================


def _decode_key(key: str) -> bytes:
    if len(key) != KEY_LEN:
        raise KeyLengthError(details={"expected": KEY_LEN, "actual": len(key)})
    try:
        return bytes.fromhex(key)
    except ValueError as e:
        raise KeyLengthError("Key is not hex encoded") from e


def _decode_iv(iv: str) -> bytes:
    if len(iv) != IV_LEN:
        raise IVLengthError(details={"expected": IV_LEN, "actual": len(iv)})
    try:
        return bytes.fromhex(iv)
    except ValueError as e:
        raise IVLengthError("IV is not hex encoded") from e


def _cipher(key: str, iv: str) -> Cipher:
    return Cipher(algorithms.AES(_decode_key(key)), modes.CBC(_decode_iv(iv)))


def encrypt(key: str, iv: str, m: str) -> str:
    """Produce a hex-encoded ciphertext.

    Args:
        key: Hex-encoded key of len KEY_LEN
        iv: Hex-encoded iv of len IV_LEN
        m: Plaintext message

    Returns:
        Hex-encoded ciphertext

    Raises:
        KeyLengthError: If key is malformed
        IVLengthError: If iv is malformed
        CipherError: If the cipher operation fails
    """
    encryptor = _cipher(key, iv).encryptor()
    padder = padding.PKCS7(_BLOCK_BITS).padder()
    try:
        padded = padder.update(m.encode("utf-8")) + padder.finalize()
        c = encryptor.update(padded) + encryptor.finalize()
    except ValueError as e:
        raise CipherError(str(e)) from e
    return c.hex()


def decrypt(key: str, iv: str, c: str) -> str:
    """Produce a cleartext message from a ciphertext made by ``encrypt``.

    Args:
        key: Hex-encoded key of len KEY_LEN
        iv: Hex-encoded iv of len IV_LEN
        c: Hex-encoded ciphertext

    Returns:
        Plaintext message

    Raises:
        KeyLengthError: If key is malformed
        IVLengthError: If iv is malformed
        CipherError: If the ciphertext is corrupt or the key/iv is wrong
    """
    decryptor = _cipher(key, iv).decryptor()
    try:
        c_bytes = binascii.unhexlify(c)
        padded = decryptor.update(c_bytes) + decryptor.finalize()
        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        m = unpadder.update(padded) + unpadder.finalize()
        return m.decode("utf-8")
    except (ValueError, binascii.Error) as e:
        raise CipherError(str(e) or e.__class__.__name__) from e
