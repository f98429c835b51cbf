"""Configuration management for the notification service."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, resolve_alert_recipients, validate_config_file
from .models import (
    AlertRecipients,
    AlertsConfig,
    AppConfig,
    DeliveryConfig,
    EmailConfig,
    EmailProviderType,
    LinksConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    "resolve_alert_recipients",
    # Configuration models
    "AppConfig",
    "EmailConfig",
    "LinksConfig",
    "AlertsConfig",
    "DeliveryConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "AlertRecipients",
    # Enums
    "EmailProviderType",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
