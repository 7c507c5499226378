"""
Language Value Object

Languages offered for identification results, translation and speech.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Language:
    """A selectable result language."""

    code: str
    label: str

    @property
    def english_name(self) -> str:
        """English name, e.g. "Telugu" for "తెలుగు (Telugu)"."""
        if "(" in self.label and self.label.endswith(")"):
            return self.label[self.label.rindex("(") + 1:-1]
        return self.label


SUPPORTED_LANGUAGES: Tuple[Language, ...] = (
    Language("en", "English"),
    Language("es", "Español (Spanish)"),
    Language("fr", "Français (French)"),
    Language("de", "Deutsch (German)"),
    Language("hi", "हिन्दी (Hindi)"),
    Language("ja", "日本語 (Japanese)"),
    Language("ar", "العربية (Arabic)"),
    Language("pt", "Português (Portuguese)"),
    Language("ru", "Русский (Russian)"),
    Language("zh", "中文 (Chinese)"),
    Language("te", "తెలుగు (Telugu)"),
)

DEFAULT_LANGUAGE_CODE = "te"

_BY_CODE = {language.code: language for language in SUPPORTED_LANGUAGES}


def get_language(code: str) -> Optional[Language]:
    """Look up a supported language by its two-letter code (case-insensitive)."""
    if not code:
        return None
    return _BY_CODE.get(code.strip().lower())


def supported_language_codes() -> List[str]:
    return [language.code for language in SUPPORTED_LANGUAGES]


def split_language_tag(tag: str) -> Tuple[str, Optional[str]]:
    """
    Split a locale tag into its base language and the rest.

    "en-US" -> ("en", "US"), "pt_BR" -> ("pt", "BR"), "te" -> ("te", None)
    """
    normalized = tag.strip().replace("_", "-")
    if "-" not in normalized:
        return normalized, None
    base, rest = normalized.split("-", 1)
    return base, rest or None


def describe_language(tag: str) -> str:
    """Prompt-friendly description: "Telugu (te)" for known codes, the tag itself otherwise."""
    language = get_language(tag)
    if language is None:
        return tag
    return f"{language.english_name} ({language.code})"
