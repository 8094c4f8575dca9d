"""Unit tests for InMemoryOperatorRepository."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from gate.domain.value import Email, ExternalIdentityId, ResetToken
from gate.persistence.repository.inmemory import InMemoryOperatorRepository
from tests.conftest import make_operator


class TestInMemoryOperatorRepository:
    """Tests for the in-memory operator repository."""

    @pytest.mark.asyncio
    async def test_find_by_email_is_case_insensitive(self):
        repo = InMemoryOperatorRepository()
        operator = await repo.save(make_operator("a@x.com"))

        found = await repo.find_by_email(Email("A@X.COM"))

        assert found is not None
        assert found.id == operator.id

    @pytest.mark.asyncio
    async def test_find_registered_skips_unregistered(self):
        repo = InMemoryOperatorRepository()
        await repo.save(make_operator("a@x.com"))
        await repo.save(make_operator("b@x.com", password_hash="aa:bb"))

        assert await repo.find_registered_by_email(Email("a@x.com")) is None
        assert await repo.find_registered_by_email(Email("b@x.com")) is not None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self):
        repo = InMemoryOperatorRepository()
        await repo.save(make_operator("a@x.com"))

        with pytest.raises(IntegrityError):
            await repo.save(make_operator("A@x.com"))

    @pytest.mark.asyncio
    async def test_link_identity_never_overwrites(self):
        repo = InMemoryOperatorRepository()
        operator = await repo.save(make_operator("a@x.com"))

        first = await repo.link_identity(operator.id, ExternalIdentityId("id-1"))
        second = await repo.link_identity(operator.id, ExternalIdentityId("id-2"))

        assert first == "id-1"
        assert second == "id-1"
        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.identity_id == "id-1"

    @pytest.mark.asyncio
    async def test_claim_registration_only_once(self):
        repo = InMemoryOperatorRepository()
        operator = await repo.save(make_operator("a@x.com"))

        assert await repo.claim_registration(operator.id, "aa:bb") is True
        assert await repo.claim_registration(operator.id, "cc:dd") is False

        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.password_hash == "aa:bb"

    @pytest.mark.asyncio
    async def test_concurrent_claims_have_one_winner(self):
        repo = InMemoryOperatorRepository()
        operator = await repo.save(make_operator("a@x.com"))

        results = await asyncio.gather(
            *(repo.claim_registration(operator.id, f"{i:02x}:00") for i in range(5))
        )

        assert results.count(True) == 1

    @pytest.mark.asyncio
    async def test_release_only_clears_own_claim(self):
        repo = InMemoryOperatorRepository()
        operator = await repo.save(make_operator("a@x.com"))
        await repo.claim_registration(operator.id, "aa:bb")

        await repo.release_registration(operator.id, "cc:dd")
        assert (await repo.find_by_email(Email("a@x.com"))).password_hash == "aa:bb"

        await repo.release_registration(operator.id, "aa:bb")
        assert (await repo.find_by_email(Email("a@x.com"))).password_hash is None

    @pytest.mark.asyncio
    async def test_consume_clears_token_pair(self):
        repo = InMemoryOperatorRepository()
        now = datetime.now(timezone.utc)
        operator = await repo.save(make_operator("a@x.com", password_hash="aa:bb"))
        await repo.set_reset_token(
            operator.id, ResetToken("tok"), now + timedelta(hours=1)
        )

        consumed = await repo.consume_reset_token(
            operator.id, ResetToken("tok"), "cc:dd", now
        )

        stored = await repo.find_by_email(Email("a@x.com"))
        assert consumed is True
        assert stored.password_hash == "cc:dd"
        assert stored.reset_token is None
        assert stored.reset_token_expires_at is None

    @pytest.mark.asyncio
    async def test_consume_rejects_expired_and_leaves_token(self):
        repo = InMemoryOperatorRepository()
        now = datetime.now(timezone.utc)
        operator = await repo.save(make_operator("a@x.com", password_hash="aa:bb"))
        await repo.set_reset_token(
            operator.id, ResetToken("tok"), now + timedelta(hours=1)
        )

        consumed = await repo.consume_reset_token(
            operator.id, ResetToken("tok"), "cc:dd", now + timedelta(hours=2)
        )

        stored = await repo.find_by_email(Email("a@x.com"))
        assert consumed is False
        assert stored.password_hash == "aa:bb"
        assert stored.reset_token == ResetToken("tok")

    @pytest.mark.asyncio
    async def test_consume_rejects_replaced_token(self):
        repo = InMemoryOperatorRepository()
        now = datetime.now(timezone.utc)
        operator = await repo.save(make_operator("a@x.com", password_hash="aa:bb"))
        await repo.set_reset_token(operator.id, ResetToken("old"), now + timedelta(hours=1))
        await repo.set_reset_token(operator.id, ResetToken("new"), now + timedelta(hours=1))

        assert (
            await repo.consume_reset_token(operator.id, ResetToken("old"), "cc:dd", now)
            is False
        )
        assert (
            await repo.consume_reset_token(operator.id, ResetToken("new"), "cc:dd", now)
            is True
        )

    @pytest.mark.asyncio
    async def test_concurrent_consume_only_one_wins(self):
        """Racing consumers with the same token: exactly one succeeds."""
        repo = InMemoryOperatorRepository()
        now = datetime.now(timezone.utc)
        operator = await repo.save(make_operator("a@x.com", password_hash="aa:bb"))
        await repo.set_reset_token(operator.id, ResetToken("tok"), now + timedelta(hours=1))

        results = await asyncio.gather(
            *[
                repo.consume_reset_token(operator.id, ResetToken("tok"), f"{i:02x}:ff", now)
                for i in range(10)
            ]
        )

        assert results.count(True) == 1
        winner = results.index(True)
        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.password_hash == f"{winner:02x}:ff"
