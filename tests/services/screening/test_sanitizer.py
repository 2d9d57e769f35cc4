import pytest

from app.services.screening.exceptions import ValidationError
from app.services.screening.sanitizer import (
    DEFAULT_MAX_CONTENT_LENGTH,
    DEFAULT_MAX_TITLE_LENGTH,
    sanitize_proposal_input,
)

MARKDOWN_PROPOSAL = """## Abstract
Build a   NEAR IDE plugin.\t\t

## Budget & Resources

| Item | Amount | Notes |
|------|--------|-------|
| Dev  | $150k  | 6 months |

- milestone one
    - nested item
"""


def test_sanitize_trims_and_collapses_title():
    """Test that title whitespace collapses to single spaces."""
    result = sanitize_proposal_input("  My \t proposal\n title  ", "Body")
    assert result.title == "My proposal title"


def test_sanitize_preserves_markdown_structure():
    """Test that headers, tables and indentation survive normalisation."""
    result = sanitize_proposal_input("Title", MARKDOWN_PROPOSAL)

    lines = result.content.split("\n")
    assert lines[0] == "## Abstract"
    assert lines[1] == "Build a NEAR IDE plugin."
    assert "| Item | Amount | Notes |" in lines
    assert "|------|--------|-------|" in lines
    assert "    - nested item" in lines


def test_sanitize_collapses_blank_lines_and_line_endings():
    """Test that CRLF becomes LF and long blank runs shrink to one blank line."""
    result = sanitize_proposal_input("Title", "First\r\n\r\n\r\n\r\nSecond\rThird")
    assert result.content == "First\n\nSecond\nThird"


def test_sanitize_strips_control_characters():
    """Test that NUL and other control characters are removed."""
    result = sanitize_proposal_input("Ti\x00tle", "Bo\x07dy\x1b text")
    assert result.title == "Title"
    assert result.content == "Body text"


@pytest.mark.parametrize(
    "title, content",
    [
        ("Test", "Short."),
        ("  Spaced   title ", MARKDOWN_PROPOSAL),
        ("Title", "  leading\n\n\n\ntrailing   \n"),
        ("Title", "a    b\n\t\tindented\r\n"),
        ("Title", "x" * 10 + "  \t  " + "y"),
    ],
)
def test_sanitize_is_idempotent(title, content):
    """Test that sanitizing sanitized input changes nothing."""
    once = sanitize_proposal_input(title, content)
    twice = sanitize_proposal_input(*once)
    assert twice == once


@pytest.mark.parametrize(
    "title, content, field",
    [
        (None, "Body", "title"),
        ("Title", None, "content"),
        ("", "Body", "title"),
        ("Title", "", "content"),
        ("   \t\n", "Body", "title"),
        ("Title", "   \n\n\t  ", "content"),
        (123, "Body", "title"),
        ("Title", ["not", "a", "string"], "content"),
    ],
)
def test_sanitize_rejects_missing_or_empty_fields(title, content, field):
    """Test that missing, non-string and blank fields are rejected."""
    with pytest.raises(ValidationError) as exc_info:
        sanitize_proposal_input(title, content)

    assert exc_info.value.field == field
    assert field in exc_info.value.message


def test_sanitize_content_length_boundary():
    """Test content exactly at the maximum passes and one more character fails."""
    at_limit = "a" * DEFAULT_MAX_CONTENT_LENGTH
    assert sanitize_proposal_input("Title", at_limit).content == at_limit

    with pytest.raises(ValidationError) as exc_info:
        sanitize_proposal_input("Title", at_limit + "a")

    assert exc_info.value.field == "content"
    assert "maximum length" in exc_info.value.message


def test_sanitize_title_length_boundary():
    """Test title exactly at the maximum passes and one more character fails."""
    at_limit = "t" * DEFAULT_MAX_TITLE_LENGTH
    assert sanitize_proposal_input(at_limit, "Body").title == at_limit

    with pytest.raises(ValidationError) as exc_info:
        sanitize_proposal_input(at_limit + "t", "Body")

    assert exc_info.value.field == "title"


def test_sanitize_measures_length_after_normalisation():
    """Test that redundant whitespace does not count against the limit."""
    padded = "   " + "word  " * 5 + "   "
    result = sanitize_proposal_input("Title", padded, max_content_length=24)
    assert result.content == "word word word word word"


def test_sanitize_custom_limits():
    """Test configurable limits."""
    with pytest.raises(ValidationError):
        sanitize_proposal_input("Title", "Too long body", max_content_length=5)
    with pytest.raises(ValidationError):
        sanitize_proposal_input("Long title", "Body", max_title_length=4)
