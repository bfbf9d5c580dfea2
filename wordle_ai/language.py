"""Supported word-list languages and their alphabets."""

from enum import Enum
from typing import FrozenSet


ENGLISH_ALPHABET = frozenset("abcdefghijklmnopqrstuvwxyz")
GERMAN_ALPHABET = ENGLISH_ALPHABET | frozenset("äöüß")


class Language(Enum):
    ENGLISH = "en"
    GERMAN = "de"

    @property
    def code(self) -> str:
        return self.value

    @property
    def alphabet(self) -> FrozenSet[str]:
        if self is Language.GERMAN:
            return GERMAN_ALPHABET
        return ENGLISH_ALPHABET

    @classmethod
    def from_code(cls, code: str) -> "Language":
        """Look up a language by its ISO code ('en', 'de')."""
        try:
            return cls(code.strip().lower())
        except ValueError:
            known = ", ".join(lang.value for lang in cls)
            raise ValueError(f"Unknown language '{code}' (expected one of: {known})") from None
