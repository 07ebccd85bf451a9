from __future__ import annotations

from ats_scan.features import build_text_features
from ats_scan.schemas import FormatReport, TextFeatures

MIN_SECTIONS = 3
MIN_BULLETS = 5
MIN_WORDS = 200
MAX_WORDS = 800

# (points, issue, suggestion), applied in this order.
_SECTION_RULE = (20, "Missing essential sections", "Add missing sections like Experience, Education, or Skills")
_BULLET_RULE = (15, "Few bullet points detected", "Use bullet points to organize information clearly")
_EMAIL_RULE = (10, "No email address found", "Include a professional email address")
_PHONE_RULE = (10, "No phone number found", "Include a phone number for contact")
_SHORT_RULE = (15, "Resume appears too short", "Expand your experience and achievements")
_LONG_RULE = (10, "Resume may be too long", "Consider condensing to 1-2 pages")


def score_format_features(features: TextFeatures) -> FormatReport:
    triggered: list[tuple[int, str, str]] = []
    if len(features.sections_found) < MIN_SECTIONS:
        triggered.append(_SECTION_RULE)
    if features.bullet_count < MIN_BULLETS:
        triggered.append(_BULLET_RULE)
    if not features.has_email:
        triggered.append(_EMAIL_RULE)
    if not features.has_phone:
        triggered.append(_PHONE_RULE)
    if features.word_count < MIN_WORDS:
        triggered.append(_SHORT_RULE)
    elif features.word_count > MAX_WORDS:
        triggered.append(_LONG_RULE)

    score = 100 - sum(points for points, _, _ in triggered)
    return FormatReport(
        score=max(0, score),
        issues=[issue for _, issue, _ in triggered],
        suggestions=[suggestion for _, _, suggestion in triggered],
    )


def score_format(resume_text: str) -> FormatReport:
    """Deterministic ATS layout score; identical text always yields an identical report."""
    return score_format_features(build_text_features(resume_text))
