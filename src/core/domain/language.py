"""Language utilities for serpent-id.

This module centralizes the language options supported across the
application. Every identification result carries localized fields for each
of these codes, so keeping it in the domain layer gives the validator, the
prompts and the CLI a single source of truth.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported natural-language choices for localized result fields."""

    ENGLISH = "en"
    THAI = "th"

    @classmethod
    def default(cls) -> "Language":
        """Return the default language used across the application."""

        return cls.ENGLISH

    @classmethod
    def codes(cls) -> tuple[str, ...]:
        """All supported language codes, in declaration order."""

        return tuple(lang.value for lang in cls)

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return "Thai" if self is Language.THAI else "English"
