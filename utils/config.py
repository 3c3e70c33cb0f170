"""Configuration management for the Tagging Service.

This module centralizes all configuration settings including the database
URL, the tagging policies and the event publishing settings.

Architecture:
    Configuration is separated from dependencies to follow separation of concerns.
    All environment variables and configuration logic is centralized here.
"""

import os
from typing import Dict

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


def _env_mapping(name: str) -> Dict[str, str]:
    """Parse ``"key=value,key=value"`` into a dict; empty values are kept."""
    mapping = {}
    for item in os.getenv(name, "").split(","):
        key, sep, value = item.partition("=")
        if sep and key.strip():
            mapping[key.strip()] = value.strip()
    return mapping


# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tagging.db")

# Tagging behavior
# Dotted paths such as "mypackage.text:my_slug"; empty means the defaults
TAGGING_NORMALIZER = os.getenv("TAGGING_NORMALIZER", "")
TAGGING_DISPLAYER = os.getenv("TAGGING_DISPLAYER", "")
TAGGING_UNTAG_ON_DELETE = _env_flag("TAGGING_UNTAG_ON_DELETE", "true")
TAGGING_DELETE_UNUSED_TAGS = _env_flag("TAGGING_DELETE_UNUSED_TAGS", "false")
TAGGING_AUTO_TAG_PROPERTY = os.getenv("TAGGING_AUTO_TAG_PROPERTY", "")
TAGGING_DELIMITER = os.getenv("TAGGING_DELIMITER", ",")

# Per subject type overrides, e.g. "photo=false" and "article=tag_list,photo="
TAGGING_UNTAG_ON_DELETE_BY_TYPE = {
    subject_type: value.lower() in _TRUE_VALUES
    for subject_type, value in _env_mapping("TAGGING_UNTAG_ON_DELETE_BY_TYPE").items()
}
TAGGING_AUTO_TAG_PROPERTY_BY_TYPE = _env_mapping("TAGGING_AUTO_TAG_PROPERTY_BY_TYPE")

# Event publishing (disabled when no Redis URL is set)
TAG_EVENTS_REDIS_URL = os.getenv("TAG_EVENTS_REDIS_URL", "")
TAG_EVENTS_CHANNEL = os.getenv("TAG_EVENTS_CHANNEL", "tagging.events")

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
