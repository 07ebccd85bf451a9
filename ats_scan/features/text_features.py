from __future__ import annotations

import re

from ats_scan.schemas import TextFeatures

SECTION_MARKERS: tuple[str, ...] = ("experience", "education", "skills", "summary", "contact")
BULLET_GLYPHS: tuple[str, ...] = ("•", "·", "-")

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_PHONE_RE = re.compile(r"\d{3}[-.]?\d{3}[-.]?\d{4}")


def count_words(text: str) -> int:
    return len(text.split())


def count_bullets(text: str) -> int:
    return sum(text.count(glyph) for glyph in BULLET_GLYPHS)


def has_email(text: str) -> bool:
    return bool(_EMAIL_RE.search(text))


def has_phone(text: str) -> bool:
    return bool(_PHONE_RE.search(text))


def build_text_features(resume_text: str) -> TextFeatures:
    lowered = resume_text.lower()
    return TextFeatures(
        word_count=count_words(resume_text),
        bullet_count=count_bullets(resume_text),
        has_email=has_email(resume_text),
        has_phone=has_phone(resume_text),
        sections_found={marker for marker in SECTION_MARKERS if marker in lowered},
    )
