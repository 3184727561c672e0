"""
Centralized configuration for the matching program.

All settings come from environment variables (loaded from .env / .env.local
by the entry points).
"""

import os


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("true", "1", "yes")


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return _env_flag("DEV_MODE")


def is_production() -> bool:
    """Check if running in the production environment."""
    return os.environ.get("ENVIRONMENT", "").lower() == "production"


def get_database_url() -> str | None:
    """Raw DATABASE_URL as configured (driver not yet applied)."""
    return os.environ.get("DATABASE_URL") or None


def get_sentry_dsn() -> str | None:
    """Sentry DSN for error reporting, if configured."""
    return os.environ.get("SENTRY_DSN") or None


def is_sql_echo_enabled() -> bool:
    return _env_flag("SQL_ECHO")


def is_single_membership_enabled() -> bool:
    """
    Whether matching keeps each participant in only their first group.

    Off by default: backfilled participants may land in two slots' groups.
    """
    return _env_flag("MATCHING_SINGLE_MEMBERSHIP")


# Required environment variables
# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("SENTRY_DSN", "Sentry DSN for error reporting", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in REQUIRED_ENV_VARS:
        value = os.environ.get(name)

        if not value:
            if is_production():
                errors.append(f"  ✗ {name}: Not set ({description})")
            elif required_in_dev or not in_dev:
                warnings.append(f"  ⚠ {name}: Not set ({description})")

    if errors:
        for error in errors:
            print(error)
        return False, warnings

    return True, warnings
