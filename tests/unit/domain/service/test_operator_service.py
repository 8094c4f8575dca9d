"""Unit tests for OperatorService."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

from dishka import AsyncContainer
import pytest

from gate.config import AuthSettings
from gate.domain.service import OperatorService
from gate.domain.value import Email, ResetToken
from gate.persistence.repository.inmemory import InMemoryOperatorRepository
from tests.conftest import make_operator
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestOperatorService:
    """Tests for OperatorService."""

    @pytest.mark.asyncio
    async def test_issue_reset_token_sets_pair_with_ttl(self, unit_env: AsyncContainer):
        """Issued token should be stored with an expiry one TTL ahead."""
        repo = await unit_env.get(InMemoryOperatorRepository)
        service = await unit_env.get(OperatorService)
        auth_settings = await unit_env.get(AuthSettings)
        operator = await repo.save(make_operator("a@x.com", password_hash="aa:bb"))

        before = datetime.now(timezone.utc)
        token, expires_at = await service.issue_reset_token(operator)

        stored = await repo.find_by_email(Email("a@x.com"))
        assert stored.reset_token == token
        assert stored.reset_token_expires_at == expires_at
        ttl = timedelta(minutes=auth_settings.reset_token_ttl_minutes)
        assert before + ttl <= expires_at <= datetime.now(timezone.utc) + ttl

    @pytest.mark.asyncio
    async def test_new_token_replaces_previous(self, unit_env: AsyncContainer):
        repo = await unit_env.get(InMemoryOperatorRepository)
        service = await unit_env.get(OperatorService)
        operator = await repo.save(make_operator("a@x.com", password_hash="aa:bb"))

        first, _ = await service.issue_reset_token(operator)
        second, _ = await service.issue_reset_token(operator)

        assert first != second
        assert await service.find_for_reset(Email("a@x.com"), first) is None
        assert await service.find_for_reset(Email("a@x.com"), second) is not None

    @pytest.mark.asyncio
    async def test_tokens_are_long_and_url_safe(self, unit_env: AsyncContainer):
        repo = await unit_env.get(InMemoryOperatorRepository)
        service = await unit_env.get(OperatorService)
        operator = await repo.save(make_operator("a@x.com", password_hash="aa:bb"))

        token, _ = await service.issue_reset_token(operator)

        assert len(token.root) >= 43
        assert all(c.isalnum() or c in "-_" for c in token.root)

    def test_build_reset_link(self):
        service = OperatorService(
            operator_repository=InMemoryOperatorRepository(),
            auth_settings=AuthSettings(dashboard_url="https://dash.example.com"),
        )

        link = service.build_reset_link(Email("a+b@x.com"), ResetToken("tok-123"))

        parsed = urlparse(link)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
            "https://dash.example.com/reset-password"
        )
        assert parse_qs(parsed.query) == {"token": ["tok-123"], "email": ["a+b@x.com"]}
        assert "a%2Bb%40x.com" in link
