"""Unit tests for RequestPasswordResetUseCase."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

from dishka import AsyncContainer
import pytest

from gate.adapter.webhook.notifier import RecordingResetLinkNotifier
from gate.application.usecase.auth import (
    RequestPasswordResetRequest,
    RequestPasswordResetUseCase,
)
from gate.domain.error import InvalidInputError
from gate.domain.value import Email
from gate.persistence.repository.inmemory import InMemoryOperatorRepository
from tests.conftest import make_operator
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestRequestPasswordResetUseCase:
    """Tests for RequestPasswordResetUseCase."""

    @pytest.mark.asyncio
    async def test_registered_operator_gets_token_and_link(
        self, unit_env: AsyncContainer
    ):
        # Arrange
        repo = await unit_env.get(InMemoryOperatorRepository)
        notifier = await unit_env.get(RecordingResetLinkNotifier)
        use_case = await unit_env.get(RequestPasswordResetUseCase)
        await repo.save(make_operator("a@x.com", password="secret1"))
        before = datetime.now(timezone.utc)

        # Act
        response = await use_case.execute(RequestPasswordResetRequest(email="A@x.com"))

        # Assert
        assert response.success is True
        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.reset_token is not None
        assert (
            before + timedelta(minutes=59)
            < stored.reset_token_expires_at
            <= datetime.now(timezone.utc) + timedelta(minutes=60)
        )

        sent = notifier.last_for("a@x.com")
        assert sent is not None
        assert sent.expires_at == stored.reset_token_expires_at
        query = parse_qs(urlparse(sent.link).query)
        assert query["token"] == [stored.reset_token.root]
        assert query["email"] == ["a@x.com"]
        assert urlparse(sent.link).path == "/reset-password"

    @pytest.mark.parametrize("seed", ["unregistered", "unknown", "malformed"])
    @pytest.mark.asyncio
    async def test_response_does_not_reveal_account_state(
        self, unit_env: AsyncContainer, seed
    ):
        """Unknown and unregistered emails get the same answer as real ones."""
        repo = await unit_env.get(InMemoryOperatorRepository)
        notifier = await unit_env.get(RecordingResetLinkNotifier)
        use_case = await unit_env.get(RequestPasswordResetUseCase)
        await repo.save(make_operator("a@x.com", password="secret1"))
        await repo.save(make_operator("pending@x.com"))
        email = {
            "unregistered": "pending@x.com",
            "unknown": "nobody@x.com",
            "malformed": "not-an-email",
        }[seed]

        registered = await use_case.execute(RequestPasswordResetRequest(email="a@x.com"))
        other = await use_case.execute(RequestPasswordResetRequest(email=email))

        assert other == registered
        assert len(notifier.sent) == 1
        pending = await repo.find_by_email(Email("pending@x.com"))
        assert pending.reset_token is None

    @pytest.mark.asyncio
    async def test_new_request_replaces_previous_token(self, unit_env: AsyncContainer):
        repo = await unit_env.get(InMemoryOperatorRepository)
        use_case = await unit_env.get(RequestPasswordResetUseCase)
        await repo.save(make_operator("a@x.com", password="secret1"))

        await use_case.execute(RequestPasswordResetRequest(email="a@x.com"))
        first = (await repo.find_by_email(Email("a@x.com"))).reset_token
        await use_case.execute(RequestPasswordResetRequest(email="a@x.com"))
        second = (await repo.find_by_email(Email("a@x.com"))).reset_token

        assert first != second

    @pytest.mark.asyncio
    async def test_delivery_failure_is_not_surfaced(self, unit_env: AsyncContainer):
        repo = await unit_env.get(InMemoryOperatorRepository)
        notifier = await unit_env.get(RecordingResetLinkNotifier)
        use_case = await unit_env.get(RequestPasswordResetUseCase)
        notifier.fail = True
        await repo.save(make_operator("a@x.com", password="secret1"))

        response = await use_case.execute(RequestPasswordResetRequest(email="a@x.com"))

        assert response.success is True
        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.reset_token is not None

    @pytest.mark.asyncio
    async def test_missing_email_is_invalid_input(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(RequestPasswordResetUseCase)

        with pytest.raises(InvalidInputError):
            await use_case.execute(RequestPasswordResetRequest(email=""))
