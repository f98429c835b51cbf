"""Factory for the configured outbound email provider."""

import logging

from notification_service.config.environment import EnvironmentConfig
from notification_service.config.models import EmailConfig, EmailProviderType

from .base import EmailProvider
from .exceptions import ProviderConfigurationError
from .resend import ResendProvider
from .smtp import SMTPProvider

logger = logging.getLogger(__name__)


def build_provider(email_config: EmailConfig, env_config: EnvironmentConfig) -> EmailProvider:
    """Instantiate the provider named by ``email.provider``.

    Args:
        email_config: Email settings from the YAML config
        env_config: Secrets and hosts from the environment

    Returns:
        Ready-to-use provider

    Raises:
        ProviderConfigurationError: If the provider is unknown or can't be built

    Example:
        >>> provider = build_provider(app_config.email, env_config)
        >>> provider.send(OutboundEmail(...))
    """
    provider_type = str(getattr(email_config.provider, "value", email_config.provider)).lower()

    builders = {
        EmailProviderType.RESEND.value: lambda: ResendProvider(
            api_key=env_config.resend_api_key or "",
            timeout=email_config.timeout_seconds,
        ),
        EmailProviderType.SMTP.value: lambda: SMTPProvider(
            host=env_config.smtp_host or "",
            port=env_config.smtp_port,
            username=env_config.smtp_user,
            password=env_config.smtp_pass,
            use_tls=email_config.use_tls,
            timeout=email_config.timeout_seconds,
        ),
    }

    builder = builders.get(provider_type)
    if builder is None:
        supported = ", ".join(sorted(builders))
        raise ProviderConfigurationError(
            f"Unknown email provider: {email_config.provider}. Supported providers: {supported}"
        )

    logger.debug("Creating email provider", extra={"provider": provider_type})
    return builder()
