"""Integration tests for PostgresOperatorRepository.

These tests verify value object handling and the conditional updates
against a real PostgreSQL database with migrations applied.
"""

from datetime import datetime, timedelta, timezone

from dishka import AsyncContainer
import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gate.domain.repository import OperatorRepository
from gate.domain.value import Email, ExternalIdentityId, ResetToken
from tests.conftest import make_operator
from tests.harness import create_env_fixture

# Integration test fixture - real PostgreSQL, mocked external services
integration_env = create_env_fixture(unmock={"persistence"})


@pytest_asyncio.fixture(autouse=True)
async def clean_database(integration_env):
    """Clean database before each test."""
    session = await integration_env.get(AsyncSession)
    await session.execute(text("TRUNCATE TABLE operators"))
    await session.commit()
    yield


def _in(minutes: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


class TestOperatorRepositoryIntegration:
    """Integration tests for PostgresOperatorRepository."""

    @pytest.mark.asyncio
    async def test_save_and_find_by_email(self, integration_env: AsyncContainer):
        repo = await integration_env.get(OperatorRepository)
        operator = make_operator("a@x.com", password="secret1")

        await repo.save(operator)
        found = await repo.find_by_email(Email("A@X.COM"))

        assert found is not None
        assert found.id == operator.id
        assert found.email.root == "a@x.com"
        assert found.password_hash == operator.password_hash

    @pytest.mark.asyncio
    async def test_find_registered_skips_pre_authorized(
        self, integration_env: AsyncContainer
    ):
        repo = await integration_env.get(OperatorRepository)
        await repo.save(make_operator("a@x.com"))

        assert await repo.find_by_email(Email("a@x.com")) is not None
        assert await repo.find_registered_by_email(Email("a@x.com")) is None

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self, integration_env: AsyncContainer):
        repo = await integration_env.get(OperatorRepository)
        await repo.save(make_operator("a@x.com"))

        with pytest.raises(IntegrityError):
            await repo.save(make_operator("a@x.com"))

        session = await integration_env.get(AsyncSession)
        await session.rollback()

    @pytest.mark.asyncio
    async def test_link_identity_keeps_first_link(
        self, integration_env: AsyncContainer
    ):
        repo = await integration_env.get(OperatorRepository)
        operator = await repo.save(make_operator("a@x.com", password="secret1"))

        first = await repo.link_identity(operator.id, ExternalIdentityId("id-1"))
        second = await repo.link_identity(operator.id, ExternalIdentityId("id-2"))

        assert first == "id-1"
        assert second == "id-1"
        found = await repo.find_by_email(Email("a@x.com"))
        assert found.identity_id == "id-1"

    @pytest.mark.asyncio
    async def test_claim_registration_is_conditional(
        self, integration_env: AsyncContainer
    ):
        repo = await integration_env.get(OperatorRepository)
        operator = await repo.save(make_operator("a@x.com"))

        assert await repo.claim_registration(operator.id, "00:11") is True
        assert await repo.claim_registration(operator.id, "22:33") is False

        found = await repo.find_by_email(Email("a@x.com"))
        assert found.password_hash == "00:11"

        await repo.release_registration(operator.id, "22:33")
        assert (await repo.find_by_email(Email("a@x.com"))).password_hash == "00:11"

        await repo.release_registration(operator.id, "00:11")
        assert (await repo.find_by_email(Email("a@x.com"))).password_hash is None

    @pytest.mark.asyncio
    async def test_reset_token_is_consumed_once(self, integration_env: AsyncContainer):
        repo = await integration_env.get(OperatorRepository)
        operator = await repo.save(make_operator("a@x.com", password="secret1"))
        token = ResetToken("tok-1")
        await repo.set_reset_token(operator.id, token, _in(60))

        found = await repo.find_by_email_and_reset_token(Email("a@x.com"), token)
        assert found is not None
        assert found.reset_token_expires_at.tzinfo is not None

        now = datetime.now(timezone.utc)
        assert await repo.consume_reset_token(operator.id, token, "aa:bb", now) is True
        assert await repo.consume_reset_token(operator.id, token, "cc:dd", now) is False

        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.password_hash == "aa:bb"
        assert stored.reset_token is None
        assert stored.reset_token_expires_at is None

    @pytest.mark.asyncio
    async def test_expired_token_is_not_consumed(self, integration_env: AsyncContainer):
        repo = await integration_env.get(OperatorRepository)
        operator = await repo.save(make_operator("a@x.com", password="secret1"))
        token = ResetToken("tok-1")
        await repo.set_reset_token(operator.id, token, _in(-1))

        consumed = await repo.consume_reset_token(
            operator.id, token, "aa:bb", datetime.now(timezone.utc)
        )

        assert consumed is False
        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.reset_token == token
