"""
Input validation functions for poeditor-sync.

Provides validation for API credentials, language codes and declaration
names so bad settings are rejected before any request is made.
"""

import re
from urllib.parse import urlparse

_LANGUAGE_CODE = re.compile(r"^[a-z]{2,3}([-_][A-Za-z0-9]{2,8})*$")


# ---------------------------------------------------------------------------
# Error message formatting helpers
# ---------------------------------------------------------------------------


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Project id")
        reason: Description of validation failure (e.g., "cannot be empty")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


def validate_api_token(token: str) -> tuple[bool, str]:
    """
    Validate a POEditor API token.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not token or not token.strip():
        return (
            False,
            format_validation_error("API token", "cannot be empty"),
        )
    if any(ch.isspace() for ch in token.strip()):
        return (
            False,
            format_validation_error(
                "API token", "cannot contain whitespace"
            ),
        )
    return (True, "")


def validate_project_id(project_id: str) -> tuple[bool, str]:
    """
    Validate a POEditor project id.

    Validation rules:
        - Cannot be empty or whitespace-only
        - Must be a positive integer (POEditor ids are numeric)
    """
    if not project_id or not project_id.strip():
        return (
            False,
            format_validation_error("Project id", "cannot be empty"),
        )
    if not project_id.strip().isdigit():
        return (
            False,
            format_validation_error(
                "Project id", f"must be numeric, got '{project_id}'"
            ),
        )
    return (True, "")


def validate_language_code(language: str) -> tuple[bool, str]:
    """
    Validate a POEditor language code (e.g. ``en``, ``pt-br``, ``zh-Hans``).
    """
    if not language or not language.strip():
        return (
            False,
            format_validation_error("Language code", "cannot be empty"),
        )
    if not _LANGUAGE_CODE.match(language.strip()):
        return (
            False,
            format_validation_error(
                "Language code", f"'{language}' is not a valid code"
            ),
        )
    return (True, "")


def validate_enum_name(name: str) -> tuple[bool, str]:
    """
    Validate the name of the root declaration container.
    """
    if not name or not name.strip():
        return (
            False,
            format_validation_error("Enum name", "cannot be empty"),
        )
    if not name.strip().isidentifier():
        return (
            False,
            format_validation_error(
                "Enum name", f"'{name}' is not a valid identifier"
            ),
        )
    return (True, "")


def validate_api_url(url: str) -> tuple[bool, str]:
    """
    Validate the POEditor API base URL.
    """
    if not url.startswith(("http://", "https://")):
        return (
            False,
            format_validation_error(
                "API URL", f"'{url}' must start with http:// or https://"
            ),
        )
    if not urlparse(url).hostname:
        return (
            False,
            format_validation_error(
                "API URL", f"'{url}' must include a hostname"
            ),
        )
    return (True, "")
