"""Password hash codec.

Stored format is ``hex(salt):hex(derived_key)`` with scrypt parameters
N=16384, r=8, p=1 and a 64 byte key. Hashes written by the old reset flow are
bcrypt (``$2a$``/``$2b$``/``$2y$``); they still verify but are never written.
"""

import hashlib
import hmac
import secrets

import bcrypt

from gate.domain.value import HashScheme

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_DKLEN = 64
SALT_BYTES = 16
# 128 * N * r is the working set; leave headroom above OpenSSL's default cap
SCRYPT_MAXMEM = 64 * 1024 * 1024

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_PASSWORD_BYTES = 72


class PasswordHashError(Exception):
    """Stored hash cannot be parsed."""

    pass


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_DKLEN,
        maxmem=SCRYPT_MAXMEM,
    )


def detect_scheme(stored_hash: str) -> HashScheme:
    """Return the scheme a stored hash was written with."""
    if stored_hash.startswith(BCRYPT_PREFIXES):
        return HashScheme.BCRYPT
    return HashScheme.SCRYPT


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt.

    Args:
        password: Plaintext password

    Returns:
        Encoded hash ``hex(salt):hex(key)``
    """
    salt = secrets.token_bytes(SALT_BYTES)
    return f"{salt.hex()}:{_derive(password, salt).hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Check a password against a stored hash.

    Args:
        password: Plaintext password
        stored_hash: Hash as stored in the credential record

    Returns:
        True if the password matches

    Raises:
        PasswordHashError: If the stored hash is malformed
    """
    if detect_scheme(stored_hash) is HashScheme.BCRYPT:
        return _verify_bcrypt(password, stored_hash)
    return _verify_scrypt(password, stored_hash)


def needs_rehash(stored_hash: str) -> bool:
    """Whether a stored hash was written with a scheme no longer used for writes."""
    return detect_scheme(stored_hash) is not HashScheme.SCRYPT


def _verify_scrypt(password: str, stored_hash: str) -> bool:
    salt_hex, sep, key_hex = stored_hash.partition(":")
    if not sep:
        raise PasswordHashError("missing delimiter")
    if not salt_hex or not key_hex:
        raise PasswordHashError("empty salt or key")

    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(key_hex)
    except ValueError:
        raise PasswordHashError("salt or key is not hex")

    derived = _derive(password, salt)
    if len(derived) != len(expected):
        return False
    return hmac.compare_digest(derived, expected)


def _verify_bcrypt(password: str, stored_hash: str) -> bool:
    secret = password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
    try:
        return bcrypt.checkpw(secret, stored_hash.encode("utf-8"))
    except ValueError:
        raise PasswordHashError("invalid bcrypt hash")
