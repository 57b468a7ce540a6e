"""Input validation and formatting helpers shared by the builders."""

import re
from datetime import date, datetime

from dataverse_client import VERSION_ALIASES

# ORCID IDs: XXXX-XXXX-XXXX-XXXX, last character may be a checksum 'X'
_ORCID_ID_PATTERN = re.compile(r'^\d{4}-\d{4}-\d{4}-\d{3}[0-9X]$')

# Dataverse aliases become URI path segments
_ALIAS_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

_VERSION_NUMBER_PATTERN = re.compile(r'^\d+\.\d+$')

DEFAULT_DATE_FORMAT = "%Y-%m-%d"


def validate_orcid_id(orcid_id: str) -> bool:
    """Validate ORCID ID format.

    ORCID IDs must match the pattern: XXXX-XXXX-XXXX-XXXX where X is a digit,
    and the last character can be a digit or 'X'.

    Args:
        orcid_id: The ORCID ID to validate

    Returns:
        True if valid format, False otherwise
    """
    if not orcid_id or not isinstance(orcid_id, str):
        return False
    return _ORCID_ID_PATTERN.match(orcid_id) is not None


def validate_alias(alias: str) -> bool:
    """Validate a dataverse alias.

    Only alphanumeric characters, underscores, and hyphens are accepted, so
    an alias is always usable as a single URI path segment.
    """
    if not alias or not isinstance(alias, str):
        return False
    return _ALIAS_PATTERN.match(alias) is not None


def validate_email(email: str) -> bool:
    """Loose e-mail check: one '@', no whitespace, a dotted domain."""
    if not email or not isinstance(email, str):
        return False
    return _EMAIL_PATTERN.match(email) is not None


def validate_version(version: str) -> bool:
    """Validate a dataset version selector.

    Accepts "major.minor" (e.g. "1.0") or one of ":latest",
    ":latest-published", ":draft".
    """
    if not version or not isinstance(version, str):
        return False
    return version in VERSION_ALIASES or _VERSION_NUMBER_PATTERN.match(version) is not None


def format_person_name(surname: str, christian_name: str) -> str:
    """Format a person as "Surname, ChristianName"."""
    return f"{surname.strip()}, {christian_name.strip()}"


def format_date(value: date | datetime | str | None, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a date for a metadata field.

    Strings are passed through unchanged; None means today.

    Args:
        value: Date, datetime, preformatted string, or None
        date_format: strftime format applied to date objects

    Returns:
        Formatted date string
    """
    if isinstance(value, str):
        return value
    if value is None:
        value = date.today()
    return value.strftime(date_format)


def is_empty(value) -> bool:
    """True for None, empty strings and empty sequences."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False
