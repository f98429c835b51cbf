"""Unit tests for the main entry point.

Tests the CLI including:
- Log level priority (CLI > env > config)
- NDJSON event reading and dispatch counting
- Listing failed logs and supported event types
- Exit code handling
- Error handling
"""

import io
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from notification_service.config.environment import EnvironmentConfig
from notification_service.config.exceptions import ConfigurationError
from notification_service.config.models import AppConfig, LoggingConfig
from notification_service.delivery import DispatchReport, RecipientFailure
from notification_service.main import dispatch_stream, load_runtime_config, main, read_events


def _line(event_type, **payload):
    return json.dumps({"type": event_type, "payload": payload})


def _env(**overrides):
    fields = dict(contact_service_url="http://contacts.internal", resend_api_key="re_test")
    fields.update(overrides)
    return EnvironmentConfig(**fields)


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    def test_log_level_priority(self, tmp_path):
        """Test log level priority: CLI > env > config."""
        config_path = tmp_path / "config.yaml"
        app_config = AppConfig(logging=LoggingConfig(level="WARNING"))
        env_config = _env(log_level="INFO")

        with patch("notification_service.main.load_config", return_value=(app_config, env_config)):
            _, resolved = load_runtime_config(config_path, "DEBUG")
            assert resolved.log_level == "DEBUG"

            env_config.log_level = "INFO"
            _, resolved = load_runtime_config(config_path, None)
            assert resolved.log_level == "INFO"

            env_config.log_level = None
            _, resolved = load_runtime_config(config_path, None)
            assert resolved.log_level == "WARNING"

    def test_configuration_error_propagates(self, tmp_path):
        with patch(
            "notification_service.main.load_config",
            side_effect=ConfigurationError("Configuration file not found"),
        ):
            with pytest.raises(ConfigurationError):
                load_runtime_config(tmp_path / "missing.yaml", None)


class TestReadEvents:
    def test_yields_events_with_line_numbers(self):
        stream = io.StringIO(
            _line("service.recovered", service_name="api") + "\n\n" + "{not json}\n" + '{"payload": {}}\n'
        )

        events = list(read_events(stream))

        assert [number for number, _ in events] == [1, 3, 4]
        assert events[0][1].type == "service.recovered"
        assert events[0][1].payload == {"service_name": "api"}
        assert events[1][1] is None
        assert events[2][1] is None


class TestDispatchStream:
    """Test suite for dispatch_stream."""

    def test_counts_handled_failed_and_unreadable(self):
        router = MagicMock()
        router.dispatch.side_effect = [
            DispatchReport(event_type="service.recovered"),
            RuntimeError("contact directory down"),
            DispatchReport(
                event_type="service.unhealthy",
                failed=[RecipientFailure("alert:ops@example.com", "HTTP 500", "ProviderHTTPError")],
            ),
        ]
        stream = io.StringIO(
            "\n".join(
                [
                    _line("service.recovered", service_name="api"),
                    _line("application.created", application_id="a1"),
                    "garbage",
                    _line("service.unhealthy", service_name="api"),
                ]
            )
        )

        handled, failed, unreadable = dispatch_stream(router, stream)

        assert (handled, failed, unreadable) == (2, 1, 1)
        assert router.dispatch.call_count == 3

    def test_empty_stream(self):
        router = MagicMock()

        assert dispatch_stream(router, io.StringIO("")) == (0, 0, 0)
        router.dispatch.assert_not_called()


class TestMain:
    """Test suite for main() function."""

    @pytest.fixture
    def runtime(self):
        """Patch configuration, logging and the database around main()."""
        with patch(
            "notification_service.main.load_runtime_config",
            return_value=(AppConfig(), _env(log_level="INFO")),
        ) as mock_load, patch("notification_service.main.configure_logging") as mock_logging, patch(
            "notification_service.main.init_database"
        ) as mock_init, patch(
            "notification_service.main.close_database"
        ) as mock_close:
            yield {
                "load": mock_load,
                "logging": mock_logging,
                "init": mock_init,
                "close": mock_close,
            }

    @patch("notification_service.main.build_router")
    @patch("sys.argv", ["notification-service", "--events", "events.ndjson"])
    def test_dispatches_events_file(self, mock_build_router, runtime, tmp_path, monkeypatch):
        events_file = tmp_path / "events.ndjson"
        events_file.write_text(_line("service.recovered", service_name="api") + "\n")
        monkeypatch.chdir(tmp_path)
        mock_build_router.return_value.dispatch.return_value = DispatchReport(
            event_type="service.recovered"
        )

        exit_code = main()

        assert exit_code == 0
        runtime["init"].assert_called_once_with("sqlite:///./data/notifications.db")
        runtime["logging"].assert_called_once()
        runtime["close"].assert_called_once()
        mock_build_router.return_value.dispatch.assert_called_once()

    @patch("notification_service.main.build_router")
    @patch("sys.argv", ["notification-service"])
    def test_reads_stdin_and_fails_on_unreadable_lines(self, mock_build_router, runtime, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("not json\n"))

        assert main() == 1
        mock_build_router.return_value.dispatch.assert_not_called()

    @patch("notification_service.main.build_router")
    @patch("sys.argv", ["notification-service", "--list-event-types"])
    def test_list_event_types(self, mock_build_router, runtime, capsys):
        mock_build_router.return_value.supported_event_types.return_value = [
            "service.recovered",
            "service.unhealthy",
        ]

        assert main() == 0
        assert capsys.readouterr().out.splitlines() == ["service.recovered", "service.unhealthy"]

    @patch("notification_service.main.build_router")
    @patch("notification_service.main.SqlNotificationRepository")
    @patch("sys.argv", ["notification-service", "--list-failed", "--limit", "5"])
    def test_list_failed(self, mock_repository, mock_build_router, runtime, capsys):
        mock_repository.return_value.list_by_status.return_value = []

        assert main() == 0

        assert "No failed notifications." in capsys.readouterr().out
        assert mock_repository.return_value.list_by_status.call_args.kwargs == {"limit": 5}
        mock_build_router.assert_not_called()

    @patch("sys.argv", ["notification-service", "--log-level", "DEBUG"])
    def test_configuration_error_returns_1(self, capsys):
        with patch(
            "notification_service.main.load_runtime_config",
            side_effect=ConfigurationError("Missing required environment variable: CONTACT_SERVICE_URL"),
        ):
            exit_code = main()

        assert exit_code == 1
        assert "Configuration Error" in capsys.readouterr().err

    @patch("notification_service.main.build_router", side_effect=RuntimeError("boom"))
    @patch("sys.argv", ["notification-service"])
    def test_unexpected_error_returns_1(self, mock_build_router, runtime, capsys):
        assert main() == 1
        assert "Fatal error: boom" in capsys.readouterr().err
        runtime["close"].assert_called_once()

    @patch(
        "notification_service.main.build_router",
        side_effect=ConfigurationError("Resend provider requires RESEND_API_KEY"),
    )
    @patch("sys.argv", ["notification-service"])
    def test_configuration_error_after_database_init_closes_database(
        self, mock_build_router, runtime, capsys
    ):
        assert main() == 1
        assert "Configuration Error" in capsys.readouterr().err
        runtime["init"].assert_called_once()
        runtime["close"].assert_called_once()

    @patch("notification_service.main.build_router")
    @patch("sys.argv", ["notification-service", "--list-event-types"])
    def test_early_exit_closes_database_once(self, mock_build_router, runtime):
        mock_build_router.return_value.supported_event_types.return_value = []

        assert main() == 0
        runtime["close"].assert_called_once()
