"""Configuration loader for the notification service."""

import warnings
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AlertRecipients, AppConfig, EmailProviderType
from .validators import check_for_warnings, emit_warnings


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from YAML file and environment variables.

    Config file lookup order:
    1. Use provided config_path if given
    2. Try config.yaml in current directory
    3. Try ./config/config.yaml
    4. Fail with helpful error message

    PORTAL_URL and CANDIDATE_WEBSITE_URL, when set, replace the matching
    ``links`` entries from the file.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with validated configuration

    Raises:
        ConfigurationError: If configuration is invalid or file not found
    """
    config_file = _find_config_file(config_path)

    try:
        with open(config_file, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[
                f"Ensure {config_file} is readable",
                "Check file permissions",
            ],
        ) from e

    # An empty file means "all defaults"
    if config_dict is None:
        config_dict = {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping at the top level",
            suggestions=["Review config.example.yaml for correct format"],
        )

    config_warnings = check_for_warnings(config_dict)
    if config_warnings:
        emit_warnings(config_warnings)

    try:
        app_config = AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(
            "Configuration validation failed",
            e,
            suggestions=[
                "Review config.example.yaml for correct format",
                "Verify field types match the expected schema",
            ],
        ) from e

    env_config = load_environment_config()

    app_config = _apply_environment_overrides(app_config, env_config)
    _check_provider_credentials(app_config, env_config)

    return app_config, env_config


def resolve_alert_recipients(
    app_config: AppConfig, env_config: EnvironmentConfig
) -> AlertRecipients:
    """
    Build the health-alert recipient list.

    HEALTH_ALERT_RECIPIENTS wins when it is set (even to an empty string),
    then ``alerts.recipients`` from the config file, then nobody. An empty
    result is returned rather than raised; the health consumer warns and
    sends nothing.
    """
    if env_config.health_alert_recipients is not None:
        return AlertRecipients(
            addresses=tuple(env_config.health_alert_recipients), origin="environment"
        )

    if app_config.alerts.recipients:
        return AlertRecipients(addresses=tuple(app_config.alerts.recipients), origin="config")

    warnings.warn(
        "No health alert recipients configured; service health events will not be emailed",
        UserWarning,
        stacklevel=2,
    )
    return AlertRecipients()


def _apply_environment_overrides(
    app_config: AppConfig, env_config: EnvironmentConfig
) -> AppConfig:
    """Return a copy of app_config with environment link overrides applied."""
    link_overrides = {}
    if env_config.portal_url:
        link_overrides["portal_url"] = env_config.portal_url
    if env_config.candidate_website_url:
        link_overrides["candidate_website_url"] = env_config.candidate_website_url

    if not link_overrides:
        return app_config

    links_data = {**app_config.links.model_dump(), **link_overrides}
    try:
        links = type(app_config.links).model_validate(links_data)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(
            "Link override from environment is invalid", e
        ) from e
    return app_config.model_copy(update={"links": links})


def _check_provider_credentials(
    app_config: AppConfig, env_config: EnvironmentConfig
) -> None:
    """Ensure the selected provider has the secrets it needs."""
    provider = app_config.email.provider

    if provider == EmailProviderType.RESEND.value and not env_config.resend_api_key:
        raise ConfigurationError(
            "Resend provider selected but RESEND_API_KEY is not set",
            suggestions=[
                "Set RESEND_API_KEY in your environment or .env file",
                "Or set email.provider to 'smtp' and configure SMTP_HOST",
            ],
        )

    if provider == EmailProviderType.SMTP.value and not env_config.smtp_host:
        raise ConfigurationError(
            "SMTP provider selected but SMTP_HOST is not set",
            suggestions=[
                "Set SMTP_HOST (and SMTP_PORT if not 587) in your environment",
                "Or set email.provider to 'resend' and configure RESEND_API_KEY",
            ],
        )


def _find_config_file(config_path: Optional[Path] = None) -> Path:
    """
    Find configuration file using fallback logic.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Path to configuration file

    Raises:
        ConfigurationError: If no config file is found
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[
                    f"Ensure {config_path} exists",
                    "Check the path and try again",
                ],
            )
        return config_path

    candidates = [
        Path("config.yaml"),
        Path("config") / "config.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    raise ConfigurationError(
        "Configuration file not found",
        errors=[
            "Tried: config.yaml",
            "Tried: config/config.yaml",
        ],
        suggestions=[
            "Copy config.example.yaml to config.yaml",
            "Use --config flag to specify a custom location",
        ],
    )


def validate_config_file(config_path: Path) -> bool:
    """
    Validate a configuration file without loading environment variables.

    Useful for pre-deployment checks.

    Args:
        config_path: Path to configuration file

    Returns:
        True if valid, False otherwise (errors printed to stdout)
    """
    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f) or {}
        AppConfig.model_validate(config_dict)
    except ValidationError as e:
        print(f"✗ Configuration validation failed:\n"
              f"{ConfigurationError.from_validation_error(str(config_path), e)}")
        return False
    except (OSError, yaml.YAMLError) as e:
        print(f"✗ Could not read {config_path}: {e}")
        return False

    print(f"✓ Configuration file {config_path} is valid")
    return True
