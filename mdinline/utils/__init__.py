"""App constants and utilities."""

from .constants import (
    ABSENT_VALUES,
    AFFORDANCE_SELECTORS,
    APP_NAME,
    APP_ORG,
    CSS_PREVIEW,
    DEFAULT_PROFILE_NAME,
    HTML_TEMPLATE,
    MAX_RECENTS,
    PREVIEW_CONTAINER_CLASS,
    PROPERTY_WHITELIST,
    SETTINGS_EXPORT,
    SETTINGS_GEOMETRY,
    SETTINGS_RECENTS,
    SETTINGS_SPLITTER,
)
from .logging_setup import configure_logging

__all__ = [
    "APP_ORG",
    "APP_NAME",
    "CSS_PREVIEW",
    "HTML_TEMPLATE",
    "PREVIEW_CONTAINER_CLASS",
    "SETTINGS_GEOMETRY",
    "SETTINGS_SPLITTER",
    "SETTINGS_RECENTS",
    "SETTINGS_EXPORT",
    "MAX_RECENTS",
    "DEFAULT_PROFILE_NAME",
    "PROPERTY_WHITELIST",
    "ABSENT_VALUES",
    "AFFORDANCE_SELECTORS",
    "configure_logging",
]
