"""Unit tests for Settings."""

from gate.config import Settings


class TestSettings:
    """Tests for environment loading."""

    def test_defaults(self, monkeypatch):
        for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "DASHBOARD_URL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.auth.reset_token_ttl_minutes == 60
        assert settings.auth.min_password_length == 6
        assert settings.notifications.reset_webhook_url is None

    def test_nested_variables(self, monkeypatch):
        monkeypatch.setenv("IDENTITY__URL", "https://nested.supabase.co")
        monkeypatch.setenv("AUTH__RESET_TOKEN_TTL_MINUTES", "15")

        settings = Settings(_env_file=None)

        assert settings.identity.url == "https://nested.supabase.co"
        assert settings.auth.reset_token_ttl_minutes == 15

    def test_flat_aliases_fold_into_nested(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://abcd.supabase.co/")
        monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
        monkeypatch.setenv("DASHBOARD_URL", "https://dash.example.com/")

        settings = Settings(_env_file=None)

        assert settings.identity.url == "https://abcd.supabase.co"
        assert settings.identity.service_key == "service-key"
        assert settings.auth.dashboard_url == "https://dash.example.com"
