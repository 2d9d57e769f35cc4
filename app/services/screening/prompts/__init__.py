"""Prompts package for proposal screening."""

from .screening import SCREENING_SYSTEM_PROMPT, SCREENING_USER_PROMPT_TEMPLATE

__all__ = [
    "SCREENING_SYSTEM_PROMPT",
    "SCREENING_USER_PROMPT_TEMPLATE",
]
