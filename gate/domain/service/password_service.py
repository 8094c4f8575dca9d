"""Password hashing domain service."""

import asyncio

import logfire

from gate.domain.error import MalformedPasswordHashError
from gate.util.password import (
    PasswordHashError,
    detect_scheme,
    hash_password,
    needs_rehash,
    verify_password,
)

from .base import Service


class PasswordService(Service):
    """Domain service for password hashing and verification.

    scrypt and bcrypt are CPU bound for tens of milliseconds, so both run in
    a worker thread instead of on the event loop.
    """

    async def hash(self, password: str) -> str:
        """Hash a password with the current scheme.

        Args:
            password: Plaintext password

        Returns:
            Encoded hash
        """
        with logfire.span("password_service.hash"):
            return await asyncio.to_thread(hash_password, password)

    async def verify(self, password: str, stored_hash: str) -> bool:
        """Check a password against a stored hash.

        Args:
            password: Plaintext password
            stored_hash: Hash from the credential record

        Returns:
            True if the password matches

        Raises:
            MalformedPasswordHashError: If the stored hash cannot be parsed
        """
        scheme = detect_scheme(stored_hash)
        with logfire.span("password_service.verify", scheme=scheme.value):
            try:
                return await asyncio.to_thread(verify_password, password, stored_hash)
            except PasswordHashError as e:
                logfire.error("Stored password hash is malformed", reason=str(e))
                raise MalformedPasswordHashError(str(e)) from e

    def needs_rehash(self, stored_hash: str) -> bool:
        return needs_rehash(stored_hash)
