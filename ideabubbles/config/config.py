"""
Configuration module for Idea Bubbles.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of ideabubbles/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
# Default: "development" for safe local testing
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose output (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"


# =============================================================================
# Supabase Configuration
# =============================================================================

# Project URL, e.g. https://abcdefgh.supabase.co
# Required for production; empty string as default for development
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")

# Anonymous (public) API key sent as both apikey and bearer token
SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")

# Table holding the ideas and their vote counts
IDEAS_TABLE: str = os.getenv("IDEAS_TABLE", "ideas")

# HTTP request timeout in seconds
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "10"))


# =============================================================================
# Ranked Query Sizes
# =============================================================================

# Each ranked view of the idea set is bounded to a small count.
NEWEST_LIMIT: int = int(os.getenv("NEWEST_LIMIT", "5"))
MOST_VOTED_LIMIT: int = int(os.getenv("MOST_VOTED_LIMIT", "5"))
OLDEST_LIMIT: int = int(os.getenv("OLDEST_LIMIT", "2"))
RANDOM_LIMIT: int = int(os.getenv("RANDOM_LIMIT", "3"))
RANDOM_VOTED_LIMIT: int = int(os.getenv("RANDOM_VOTED_LIMIT", "5"))

# Maximum number of bubbles on screen at once
DISPLAY_LIMIT: int = int(os.getenv("DISPLAY_LIMIT", "10"))

# Worker threads used to issue the ranked queries concurrently
FETCH_WORKERS: int = int(os.getenv("FETCH_WORKERS", "5"))


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for production.
    
    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []
    
    if is_production():
        if not SUPABASE_URL:
            errors.append("SUPABASE_URL is required in production")
        if not SUPABASE_ANON_KEY:
            errors.append("SUPABASE_ANON_KEY is required in production")
    
    if SUPABASE_URL and not SUPABASE_URL.startswith(("http://", "https://")):
        errors.append("SUPABASE_URL must start with http:// or https://")
    
    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")
    
    limits = {
        "NEWEST_LIMIT": NEWEST_LIMIT,
        "MOST_VOTED_LIMIT": MOST_VOTED_LIMIT,
        "OLDEST_LIMIT": OLDEST_LIMIT,
        "RANDOM_LIMIT": RANDOM_LIMIT,
        "RANDOM_VOTED_LIMIT": RANDOM_VOTED_LIMIT,
    }
    for key, value in limits.items():
        if value < 0:
            errors.append(f"{key} cannot be negative")
    
    if DISPLAY_LIMIT < 1:
        errors.append("DISPLAY_LIMIT must be at least 1")
    
    if FETCH_WORKERS < 1:
        errors.append("FETCH_WORKERS must be at least 1")
    
    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  SUPABASE_URL: {SUPABASE_URL or '(not set)'}")
    print(f"  SUPABASE_ANON_KEY: {'***' if SUPABASE_ANON_KEY else '(not set)'}")
    print(f"  IDEAS_TABLE: {IDEAS_TABLE}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(
        f"  LIMITS: newest={NEWEST_LIMIT} most_voted={MOST_VOTED_LIMIT} "
        f"oldest={OLDEST_LIMIT} random={RANDOM_LIMIT} random_voted={RANDOM_VOTED_LIMIT}"
    )
    print(f"  DISPLAY_LIMIT: {DISPLAY_LIMIT}")
    print(f"  FETCH_WORKERS: {FETCH_WORKERS}")
