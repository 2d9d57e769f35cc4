"""Validation and whitespace normalisation of proposal input."""

import re
from typing import Any, NamedTuple

from app.services.screening.exceptions import ValidationError

DEFAULT_MAX_TITLE_LENGTH = 200
DEFAULT_MAX_CONTENT_LENGTH = 50_000

# C0 controls and DEL, keeping tab and newline
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
# Runs of spaces/tabs after visible text; leading indentation is left alone
_INLINE_WHITESPACE = re.compile(r"(?<=\S)[ \t]{2,}")
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


class SanitizedProposal(NamedTuple):
    title: str
    content: str


def _normalize_title(title: str) -> str:
    return " ".join(_CONTROL_CHARS.sub("", title).split())


def _normalize_content(content: str) -> str:
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_CHARS.sub("", text)
    lines = [_INLINE_WHITESPACE.sub(" ", line).rstrip() for line in text.split("\n")]
    text = _EXCESS_BLANK_LINES.sub("\n\n", "\n".join(lines))
    return text.strip()


def _check_field(name: str, value: Any) -> str:
    if value is None:
        raise ValidationError(name, f"{name} is required")
    if not isinstance(value, str):
        raise ValidationError(name, f"{name} must be a string")
    return value


def sanitize_proposal_input(
    title: Any,
    content: Any,
    max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH,
) -> SanitizedProposal:
    """Validate and normalise a proposal's title and content.

    Markdown structure (headers, lists, tables, indentation) is preserved;
    only redundant whitespace and control characters are removed. The
    function is pure and idempotent.

    Args:
        title: Raw proposal title
        content: Raw proposal body (markdown)
        max_title_length: Maximum title length after normalisation
        max_content_length: Maximum content length after normalisation

    Returns:
        SanitizedProposal with the normalised title and content

    Raises:
        ValidationError: If either field is missing, not a string, empty or too long
    """
    title = _normalize_title(_check_field("title", title))
    content = _normalize_content(_check_field("content", content))

    if not title:
        raise ValidationError("title", "title must not be empty")
    if not content:
        raise ValidationError("content", "content must not be empty")
    if len(title) > max_title_length:
        raise ValidationError(
            "title", f"title exceeds maximum length of {max_title_length} characters"
        )
    if len(content) > max_content_length:
        raise ValidationError(
            "content",
            f"content exceeds maximum length of {max_content_length} characters",
        )

    return SanitizedProposal(title=title, content=content)
