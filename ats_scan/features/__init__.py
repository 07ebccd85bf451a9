from .sections import (
    SectionSpan,
    contains_any,
    find_section_span,
    is_bullet_like,
    is_heading_like,
    normalize_line,
    ordered_unique,
    strip_bullet_prefix,
)
from .text_features import build_text_features, count_bullets, count_words, has_email, has_phone

__all__ = [
    "SectionSpan",
    "build_text_features",
    "count_bullets",
    "count_words",
    "has_email",
    "has_phone",
    "contains_any",
    "find_section_span",
    "is_bullet_like",
    "is_heading_like",
    "normalize_line",
    "ordered_unique",
    "strip_bullet_prefix",
]
