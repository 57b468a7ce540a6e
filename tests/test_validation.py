"""Tests for dataverse_client.validation module."""

from datetime import date, datetime

from dataverse_client.validation import (
    format_date,
    format_person_name,
    is_empty,
    validate_alias,
    validate_email,
    validate_orcid_id,
    validate_version,
)


# ── ORCID ────────────────────────────────────────────────────────────────


def test_validate_orcid_id_valid():
    assert validate_orcid_id("0000-0001-2345-6789") is True
    assert validate_orcid_id("1234-5678-9012-345X") is True  # X is valid checksum


def test_validate_orcid_id_invalid():
    assert validate_orcid_id("0000-0001-2345") is False
    assert validate_orcid_id("0000/0001/2345/6789") is False
    assert validate_orcid_id("../../../etc/passwd") is False
    assert validate_orcid_id("") is False
    assert validate_orcid_id(None) is False
    assert validate_orcid_id(123) is False


# ── SECURITY: alias used as a URI path segment ───────────────────────────


def test_validate_alias_valid():
    assert validate_alias("visus") is True
    assert validate_alias("VIS_US-2") is True


def test_validate_alias_path_traversal():
    assert validate_alias("..") is False
    assert validate_alias("../root") is False
    assert validate_alias("a/b") is False
    assert validate_alias("a\\b") is False


def test_validate_alias_special_chars():
    assert validate_alias("a b") is False
    assert validate_alias("a?b") is False
    assert validate_alias("a%2Fb") is False
    assert validate_alias("") is False
    assert validate_alias(None) is False


# ── Email / version ──────────────────────────────────────────────────────


def test_validate_email():
    assert validate_email("test@test.com") is True
    assert validate_email("first.last@uni-stuttgart.de") is True
    assert validate_email("nobody") is False
    assert validate_email("a@b") is False
    assert validate_email("a b@c.de") is False
    assert validate_email(None) is False


def test_validate_version():
    for version in (":latest", ":latest-published", ":draft", "1.0", "2.13"):
        assert validate_version(version) is True
    for version in ("latest", "1", "v1.0", "", None):
        assert validate_version(version) is False


# ── Formatting ───────────────────────────────────────────────────────────


def test_format_person_name_strips():
    assert format_person_name(" Doe ", "Jane ") == "Doe, Jane"


def test_format_date_variants():
    assert format_date("2022-01-01") == "2022-01-01"
    assert format_date(date(2022, 1, 2)) == "2022-01-02"
    assert format_date(datetime(2022, 1, 2, 13, 0), "%Y") == "2022"
    assert format_date(None) == date.today().strftime("%Y-%m-%d")


def test_is_empty():
    assert is_empty(None)
    assert is_empty("")
    assert is_empty("  ")
    assert is_empty([])
    assert not is_empty("x")
    assert not is_empty(["x"])
    assert not is_empty(0)
