"""Domain helpers for deriving URL-safe slugs from titles."""
from __future__ import annotations

import re

# Precomposed Vietnamese letters folded to their Latin base. Applied after
# lowercasing, so only the lowercase forms are listed.
_DIACRITIC_FOLDS = (
    (re.compile("đ"), "d"),
    (re.compile("[áàảãạăắằẳẵặâấầẩẫậ]"), "a"),
    (re.compile("[éèẻẽẹêếềểễệ]"), "e"),
    (re.compile("[íìỉĩị]"), "i"),
    (re.compile("[óòỏõọôốồổỗộơớờởỡợ]"), "o"),
    (re.compile("[úùủũụưứừửữự]"), "u"),
    (re.compile("[ýỳỷỹỵ]"), "y"),
)

_INVALID_CHARS = re.compile(r"[^a-z0-9 -]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")

SLUG_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


def derive_slug(title: str | None) -> str:
    """
    Turn a free-text title into a lowercase, hyphen separated slug.

    "  Áo Dài Việt Nam  " -> "ao-dai-viet-nam"
    "Hello   World!!"     -> "hello-world"

    Titles made only of symbols produce an empty string.
    """
    value = (title or "").strip().lower()
    for pattern, base in _DIACRITIC_FOLDS:
        value = pattern.sub(base, value)
    value = _INVALID_CHARS.sub("", value)
    value = _WHITESPACE_RUN.sub("-", value)
    value = _HYPHEN_RUN.sub("-", value)
    return value.strip("-")
