from __future__ import annotations

import logging
import re
from typing import Any

from ats_scan.ai.structured import json_object_completion
from ats_scan.ai.types import AICompletionError, AIClient
from ats_scan.core.scoring import get_scoring_value
from ats_scan.features import build_text_features
from ats_scan.schemas import ContentReport, Improvement, SectionStatus
from ats_scan.services.coercion import (
    PROMPT_MAX_CHARS,
    clamp_int,
    clamp_score,
    safe_str,
    safe_str_list,
    truncate_for_prompt,
)

logger = logging.getLogger(__name__)

_QUANTIFIED_RE = re.compile(r"\d+%|\d+\+|increased|improved|reduced|led \d+|managed \d+")
_VALID_PRIORITIES = {"high", "medium", "low"}
_VALID_STATUSES = {"complete", "incomplete", "missing"}

CONTENT_SYSTEM_PROMPT = """You are an expert ATS (Applicant Tracking System) resume analyzer. Analyze the resume content and provide detailed feedback in JSON format.

Focus on:
1. Content quality and clarity
2. Section completeness
3. Achievement quantification
4. Action verb usage
5. Professional language

Report section completeness for exactly these sections: Contact Information, Professional Experience, Education, Skills, Summary/Profile.

Return JSON with this structure:
{
  "contentScore": number (0-100),
  "improvements": [
    {
      "priority": "high|medium|low",
      "category": "string",
      "title": "string",
      "description": "string",
      "suggestions": ["string", ...]
    }
  ],
  "sectionCompleteness": [
    {
      "section": "string",
      "status": "complete|incomplete|missing",
      "suggestions": ["string", ...] (optional)
    }
  ]
}"""

_QUANTIFY_IMPROVEMENT = Improvement(
    priority="high",
    category="Content",
    title="Add Quantified Achievements",
    description="Your resume lacks specific numbers and metrics that demonstrate impact",
    suggestions=[
        "Add percentage improvements (e.g., 'Improved efficiency by 30%')",
        "Include specific numbers (e.g., 'Managed team of 5 developers')",
        "Quantify results wherever possible",
    ],
)
_BULLETS_IMPROVEMENT = Improvement(
    priority="medium",
    category="Format",
    title="Use More Bullet Points",
    description="Bullet points help organize information for better readability",
    suggestions=[
        "Convert paragraph text to bullet points",
        "Use action verbs to start each bullet",
        "Keep bullets concise and impactful",
    ],
)
_SUMMARY_IMPROVEMENT = Improvement(
    priority="high",
    category="Content",
    title="Add Professional Summary",
    description="A strong summary helps recruiters quickly understand your value proposition",
    suggestions=[
        "Write 2-3 sentences highlighting your expertise",
        "Include years of experience and key skills",
        "Mention your career goals or specialization",
    ],
)
_EXPAND_IMPROVEMENT = Improvement(
    priority="medium",
    category="Content",
    title="Expand Content",
    description="Your resume appears too brief to showcase your full potential",
    suggestions=[
        "Add more details about your responsibilities",
        "Include additional projects or achievements",
        "Expand on your technical skills and experience",
    ],
)


def _section_status(section: str, present: bool, absent_status: str, suggestion: str) -> SectionStatus:
    if present:
        return SectionStatus(section=section, status="complete")
    return SectionStatus(section=section, status=absent_status, suggestions=[suggestion])


def heuristic_content_report(resume_text: str) -> ContentReport:
    """Rule-based content score used whenever the AI analysis is unavailable."""
    lowered = resume_text.lower()
    features = build_text_features(resume_text)

    has_numbers = bool(_QUANTIFIED_RE.search(lowered))
    has_experience = "experience" in lowered or "work" in lowered
    has_education = "education" in lowered or "degree" in lowered
    has_skills = "skills" in lowered or "technologies" in lowered
    has_summary = "summary" in lowered or "profile" in lowered
    has_contact = features.has_email and features.has_phone

    score = 60
    if has_numbers:
        score += 15
    if features.bullet_count >= 5:
        score += 10
    if features.word_count >= 300:
        score += 10
    if features.word_count > 800:
        score -= 5

    sections = [
        _section_status("Contact Information", has_contact, "incomplete", "Add professional email and phone number"),
        _section_status(
            "Professional Experience", has_experience, "missing", "Add work experience with quantified achievements"
        ),
        _section_status("Education", has_education, "incomplete", "Include education background and certifications"),
        _section_status("Skills", has_skills, "missing", "Add relevant technical and soft skills"),
        _section_status(
            "Summary/Profile", has_summary, "missing", "Add professional summary highlighting key strengths"
        ),
    ]

    improvements: list[Improvement] = []
    if not has_numbers:
        improvements.append(_QUANTIFY_IMPROVEMENT)
    if features.bullet_count < 5:
        improvements.append(_BULLETS_IMPROVEMENT)
    if not has_summary:
        improvements.append(_SUMMARY_IMPROVEMENT)
    if features.word_count < 200:
        improvements.append(_EXPAND_IMPROVEMENT)

    return ContentReport(score=clamp_score(score), improvements=improvements, sections=sections)


def parse_improvements(value: Any, max_items: int = 12) -> list[Improvement]:
    if not isinstance(value, list):
        return []
    output: list[Improvement] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        priority = safe_str(item.get("priority"), max_len=10).lower()
        title = safe_str(item.get("title"), max_len=160)
        if priority not in _VALID_PRIORITIES or not title:
            continue
        output.append(
            Improvement(
                priority=priority,
                category=safe_str(item.get("category"), max_len=80) or "Content",
                title=title,
                description=safe_str(item.get("description"), max_len=1200),
                suggestions=safe_str_list(item.get("suggestions"), max_items=6),
            )
        )
        if len(output) >= max_items:
            break
    return output


def parse_sections(value: Any) -> list[SectionStatus]:
    if not isinstance(value, list):
        return []
    output: list[SectionStatus] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        section = safe_str(item.get("section"), max_len=80)
        status = safe_str(item.get("status"), max_len=20).lower()
        if not section or status not in _VALID_STATUSES:
            continue
        suggestions = safe_str_list(item.get("suggestions"), max_items=4)
        output.append(SectionStatus(section=section, status=status, suggestions=suggestions or None))
    return output


async def score_content(resume_text: str, *, client: AIClient) -> ContentReport:
    try:
        payload = await json_object_completion(
            client,
            system_prompt=CONTENT_SYSTEM_PROMPT,
            user_prompt=f"Analyze this resume:\n\n{truncate_for_prompt(resume_text, PROMPT_MAX_CHARS)}",
            purpose="content_analysis",
        )
    except AICompletionError as exc:
        logger.warning("content_scorer_ai_failed code=%s", exc.code)
        return heuristic_content_report(resume_text)
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("content_scorer_ai_failed code=unexpected error=%s", type(exc).__name__)
        return heuristic_content_report(resume_text)

    default_score = int(get_scoring_value("content.ai_default_score", 50))
    return ContentReport(
        score=clamp_int(payload.get("contentScore"), default_score),
        improvements=parse_improvements(payload.get("improvements")),
        sections=parse_sections(payload.get("sectionCompleteness")),
    )
