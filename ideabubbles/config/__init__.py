"""
Configuration module.

Handles environment variables, Supabase credentials, and query sizes.
"""

from ideabubbles.config.config import (
    APP_ENV,
    DEBUG,
    SUPABASE_URL,
    SUPABASE_ANON_KEY,
    IDEAS_TABLE,
    REQUEST_TIMEOUT,
    NEWEST_LIMIT,
    MOST_VOTED_LIMIT,
    OLDEST_LIMIT,
    RANDOM_LIMIT,
    RANDOM_VOTED_LIMIT,
    DISPLAY_LIMIT,
    FETCH_WORKERS,
    is_production,
    is_development,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "IDEAS_TABLE",
    "REQUEST_TIMEOUT",
    "NEWEST_LIMIT",
    "MOST_VOTED_LIMIT",
    "OLDEST_LIMIT",
    "RANDOM_LIMIT",
    "RANDOM_VOTED_LIMIT",
    "DISPLAY_LIMIT",
    "FETCH_WORKERS",
    "is_production",
    "is_development",
    "validate_config",
    "print_config_summary",
]
