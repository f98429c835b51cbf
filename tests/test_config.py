"""Unit tests for configuration loading.

Tests the configuration layer for:
- Environment variable validation
- YAML loading, defaults and schema errors
- Provider credential checks
- Link overrides from the environment
- Health alert recipient resolution order
"""

import pytest

from notification_service.config import (
    AlertRecipients,
    AppConfig,
    ConfigurationError,
    EnvironmentConfig,
    load_config,
    load_environment_config,
    resolve_alert_recipients,
    validate_config_file,
)
from notification_service.config.validators import check_for_warnings, parse_recipient_list

ENV_VARS = [
    "CONTACT_SERVICE_URL",
    "RESEND_API_KEY",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "HEALTH_ALERT_RECIPIENTS",
    "DATABASE_URL",
    "LOG_LEVEL",
    "PORTAL_URL",
    "CANDIDATE_WEBSITE_URL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Start from an environment with only the required variable set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONTACT_SERVICE_URL", "http://contacts.internal/")
    monkeypatch.setenv("RESEND_API_KEY", "re_test_key")
    return monkeypatch


@pytest.fixture
def config_file(tmp_path):
    def write(text: str):
        path = tmp_path / "config.yaml"
        path.write_text(text)
        return path

    return write


class TestLoadEnvironmentConfig:
    """Test suite for load_environment_config."""

    def test_defaults(self, clean_env):
        env = load_environment_config()

        assert env.contact_service_url == "http://contacts.internal"
        assert env.resend_api_key == "re_test_key"
        assert env.smtp_port == 587
        assert env.database_url == "sqlite:///./data/notifications.db"
        assert env.health_alert_recipients is None
        assert env.log_level is None

    def test_missing_contact_service_url(self, clean_env):
        clean_env.delenv("CONTACT_SERVICE_URL")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert "Missing required environment variable: CONTACT_SERVICE_URL" in exc_info.value.errors

    def test_collects_every_error(self, clean_env):
        """Test all invalid variables are reported together."""
        clean_env.setenv("SMTP_PORT", "smtp")
        clean_env.setenv("LOG_LEVEL", "chatty")
        clean_env.setenv("SMTP_USER", "mailer")
        clean_env.setenv("PORTAL_URL", "portal.test")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        errors = exc_info.value.errors
        assert len(errors) == 4
        assert any("SMTP_PORT" in e for e in errors)
        assert any("LOG_LEVEL" in e for e in errors)
        assert any("SMTP_PASS" in e for e in errors)
        assert any("PORTAL_URL" in e for e in errors)

    def test_alert_recipients_parsed(self, clean_env):
        clean_env.setenv("HEALTH_ALERT_RECIPIENTS", "ops@example.com, oncall@example.com,ops@example.com")

        env = load_environment_config()

        assert env.health_alert_recipients == ["ops@example.com", "oncall@example.com"]

    def test_blank_alert_recipients_means_nobody(self, clean_env):
        clean_env.setenv("HEALTH_ALERT_RECIPIENTS", "")

        assert load_environment_config().health_alert_recipients == []

    def test_invalid_alert_recipient(self, clean_env):
        clean_env.setenv("HEALTH_ALERT_RECIPIENTS", "ops@example.com,not-an-address")

        with pytest.raises(ConfigurationError, match="not-an-address"):
            load_environment_config()


class TestLoadConfig:
    """Test suite for load_config."""

    def test_empty_file_uses_defaults(self, clean_env, config_file):
        app_config, env_config = load_config(config_file(""))

        assert app_config.email.provider == "resend"
        assert app_config.email.sender == "Splits Network <notifications@splits.network>"
        assert app_config.links.portal_url == "https://splits.network"
        assert app_config.delivery.max_concurrency == 4
        assert app_config.logging.level == "INFO"
        assert env_config.contact_service_url == "http://contacts.internal"

    def test_full_file(self, clean_env, config_file):
        path = config_file(
            """
email:
  provider: resend
  from_address: notify@example.com
  from_name: Example
  timeout_seconds: 20
links:
  portal_url: https://portal.example.com/
  candidate_website_url: https://jobs.example.com
alerts:
  recipients:
    - ops@example.com
delivery:
  max_concurrency: 8
logging:
  level: DEBUG
  format: json
"""
        )

        app_config, _ = load_config(path)

        assert app_config.email.sender == "Example <notify@example.com>"
        assert app_config.email.timeout_seconds == 20
        assert app_config.links.portal_url == "https://portal.example.com"
        assert app_config.alerts.recipients == ["ops@example.com"]
        assert app_config.delivery.max_concurrency == 8
        assert app_config.logging.format == "json"

    def test_missing_file(self, clean_env, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, clean_env, config_file):
        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(config_file("email: [unclosed"))

    def test_schema_error_lists_field(self, clean_env, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file("delivery:\n  max_concurrency: 0\n"))

        assert any("max_concurrency" in error for error in exc_info.value.errors)

    def test_resend_requires_api_key(self, clean_env, config_file):
        clean_env.delenv("RESEND_API_KEY")

        with pytest.raises(ConfigurationError, match="RESEND_API_KEY"):
            load_config(config_file(""))

    def test_smtp_requires_host(self, clean_env, config_file):
        with pytest.raises(ConfigurationError, match="SMTP_HOST"):
            load_config(config_file("email:\n  provider: smtp\n"))

    def test_environment_overrides_links(self, clean_env, config_file):
        clean_env.setenv("PORTAL_URL", "https://staging.splits.network/")

        app_config, _ = load_config(config_file(""))

        assert app_config.links.portal_url == "https://staging.splits.network"
        assert app_config.links.candidate_website_url == "https://applicant.network"

    def test_plain_http_link_warns(self, clean_env, config_file):
        with pytest.warns(UserWarning, match="plain http"):
            load_config(config_file("links:\n  portal_url: http://localhost:3000\n"))


class TestResolveAlertRecipients:
    """Test suite for alert recipient resolution order."""

    def _env(self, recipients):
        return EnvironmentConfig(
            contact_service_url="http://contacts.internal", health_alert_recipients=recipients
        )

    def test_environment_wins(self):
        app_config = AppConfig.model_validate({"alerts": {"recipients": ["cfg@example.com"]}})

        result = resolve_alert_recipients(app_config, self._env(["env@example.com"]))

        assert result == AlertRecipients(addresses=("env@example.com",), origin="environment")

    def test_blank_environment_still_wins(self):
        app_config = AppConfig.model_validate({"alerts": {"recipients": ["cfg@example.com"]}})

        result = resolve_alert_recipients(app_config, self._env([]))

        assert result.is_empty
        assert result.origin == "environment"

    def test_config_used_when_environment_unset(self):
        app_config = AppConfig.model_validate({"alerts": {"recipients": "a@example.com, b@example.com"}})

        result = resolve_alert_recipients(app_config, self._env(None))

        assert list(result) == ["a@example.com", "b@example.com"]
        assert result.origin == "config"

    def test_nobody_configured_warns(self):
        with pytest.warns(UserWarning, match="No health alert recipients"):
            result = resolve_alert_recipients(AppConfig(), self._env(None))

        assert len(result) == 0
        assert result.origin == "none"


class TestValidators:
    def test_parse_recipient_list_ignores_blanks(self):
        assert parse_recipient_list(" a@example.com ,, ", "TEST") == ["a@example.com"]

    def test_check_for_warnings(self):
        warnings = check_for_warnings(
            {
                "delivery": {"max_concurrency": 20},
                "email": {"provider": "smtp", "use_tls": False},
            }
        )

        assert len(warnings) == 2

    def test_validate_config_file(self, config_file, capsys):
        assert validate_config_file(config_file("email:\n  timeout_seconds: 30\n")) is True
        assert validate_config_file(config_file("email:\n  timeout_seconds: 0\n")) is False
        assert "validation failed" in capsys.readouterr().out
