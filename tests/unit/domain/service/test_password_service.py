"""Unit tests for PasswordService."""

import asyncio
import contextlib

import bcrypt
import pytest

from gate.domain.error import InternalError, MalformedPasswordHashError
from gate.domain.service import PasswordService


class TestPasswordService:
    """Tests for PasswordService."""

    @pytest.mark.asyncio
    async def test_hash_then_verify(self):
        service = PasswordService()
        stored = await service.hash("secret1")

        assert await service.verify("secret1", stored) is True
        assert await service.verify("secret2", stored) is False

    @pytest.mark.asyncio
    async def test_malformed_hash_is_internal_error(self):
        """A broken stored hash is a data fault, not a credential mismatch."""
        service = PasswordService()

        with pytest.raises(MalformedPasswordHashError) as exc_info:
            await service.verify("secret1", "no-delimiter")

        assert isinstance(exc_info.value, InternalError)

    @pytest.mark.asyncio
    async def test_needs_rehash_for_legacy_bcrypt(self):
        service = PasswordService()
        legacy = bcrypt.hashpw(b"secret1", bcrypt.gensalt(rounds=4)).decode()

        assert service.needs_rehash(legacy) is True
        assert service.needs_rehash(await service.hash("secret1")) is False

    @pytest.mark.asyncio
    async def test_hashing_does_not_block_the_event_loop(self):
        """Other tasks keep running while a hash is computed."""
        service = PasswordService()
        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                ticks += 1
                await asyncio.sleep(0)

        task = asyncio.create_task(ticker())
        try:
            await service.hash("secret1")
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        assert ticks > 1
