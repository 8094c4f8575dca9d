"""Unit tests for the Operator model and its value objects."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from gate.domain.model import Operator
from gate.domain.value import Email, OperatorId, ResetToken
from tests.conftest import make_operator


class TestEmail:
    """Tests for the Email value object."""

    def test_normalizes_case_and_whitespace(self):
        assert Email("  A@X.Com ").root == "a@x.com"

    def test_equal_after_normalization(self):
        assert Email("A@x.com") == Email("a@X.COM")

    @pytest.mark.parametrize("raw", ["", "ab", "no-at-sign", "x" * 321 + "@x.com"])
    def test_rejects_invalid(self, raw):
        with pytest.raises(ValidationError):
            Email(raw)


class TestResetToken:
    """Tests for the ResetToken value object."""

    def test_masked_keeps_eight_chars(self):
        assert ResetToken("abcdefghijklmnop").masked() == "abcdefgh..."

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            ResetToken("")


class TestOperator:
    """Tests for the Operator domain model."""

    def test_unregistered_without_hash(self):
        operator = make_operator()

        assert operator.is_registered is False
        assert operator.has_pending_reset is False

    def test_registered_with_hash(self):
        assert make_operator(password_hash="aa:bb").is_registered is True

    def test_token_without_expiry_is_rejected(self):
        with pytest.raises(ValidationError):
            Operator(
                id=OperatorId(uuid4()),
                email=Email("a@x.com"),
                reset_token=ResetToken("token"),
            )

    def test_expiry_without_token_is_rejected(self):
        with pytest.raises(ValidationError):
            Operator(
                id=OperatorId(uuid4()),
                email=Email("a@x.com"),
                reset_token_expires_at=datetime.now(timezone.utc),
            )

    def test_reset_token_expired(self):
        now = datetime.now(timezone.utc)
        operator = make_operator(
            password_hash="aa:bb",
            reset_token="token",
            reset_token_expires_at=now + timedelta(hours=1),
        )

        assert operator.reset_token_expired(now) is False
        assert operator.reset_token_expired(now + timedelta(minutes=30)) is False
        assert operator.reset_token_expired(now + timedelta(hours=1)) is True
        assert operator.reset_token_expired(now + timedelta(hours=2)) is True

    def test_is_immutable(self):
        operator = make_operator()

        with pytest.raises(ValidationError):
            operator.password_hash = "aa:bb"
