#!/usr/bin/env python3
"""Simple script to verify config.example.yaml structure without the service installed."""

import sys
from pathlib import Path

import yaml

SECTIONS = {
    "email": dict,
    "links": dict,
    "alerts": dict,
    "delivery": dict,
    "logging": dict,
}
PROVIDERS = ("resend", "smtp")
LOG_FORMATS = ("json", "key-value")


def verify_config_structure(config_file=Path("config.example.yaml")):
    """Verify a config file has the expected sections and value types."""
    config_file = Path(config_file)

    if not config_file.exists():
        print(f"✗ {config_file} not found")
        return False

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"✗ Failed to parse {config_file}: {e}")
        return False

    if not isinstance(config, dict):
        print(f"✗ {config_file} must contain a mapping")
        return False

    errors = []

    for key, expected_type in SECTIONS.items():
        if key in config and not isinstance(config[key], expected_type):
            errors.append(f"'{key}' must be of type {expected_type.__name__}")

    unknown = sorted(set(config) - set(SECTIONS))
    for key in unknown:
        errors.append(f"Unknown top-level key: {key}")

    email = config.get("email") if isinstance(config.get("email"), dict) else {}
    if email.get("provider", "resend") not in PROVIDERS:
        errors.append(f"email.provider must be one of: {', '.join(PROVIDERS)}")

    links = config.get("links") if isinstance(config.get("links"), dict) else {}
    for key in ("portal_url", "candidate_website_url"):
        value = links.get(key)
        if value is not None and not str(value).startswith(("http://", "https://")):
            errors.append(f"links.{key} must start with http:// or https://")

    alerts = config.get("alerts") if isinstance(config.get("alerts"), dict) else {}
    recipients = alerts.get("recipients", [])
    if not isinstance(recipients, (list, str)):
        errors.append("alerts.recipients must be a list or comma-separated string")

    logging_config = config.get("logging") if isinstance(config.get("logging"), dict) else {}
    if logging_config.get("format", "key-value") not in LOG_FORMATS:
        errors.append(f"logging.format must be one of: {', '.join(LOG_FORMATS)}")

    if errors:
        print(f"✗ {config_file} validation failed:")
        for error in errors:
            print(f"  - {error}")
        return False

    if isinstance(recipients, str):
        recipients = [item for item in recipients.split(",") if item.strip()]
    print(f"✓ {config_file} structure is valid")
    print(f"  - Provider: {email.get('provider', 'resend')}")
    print(f"  - Portal: {links.get('portal_url', 'default')}")
    print(f"  - {len(recipients)} alert recipient(s)")
    return True


if __name__ == "__main__":
    success = verify_config_structure(sys.argv[1] if len(sys.argv) > 1 else "config.example.yaml")
    sys.exit(0 if success else 1)
