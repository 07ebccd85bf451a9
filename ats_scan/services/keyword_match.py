from __future__ import annotations

import logging
import re
from typing import Any

from ats_scan.ai.structured import json_object_completion
from ats_scan.ai.types import AICompletionError, AIClient
from ats_scan.core.scoring import get_scoring_value
from ats_scan.schemas import KeywordCandidate, KeywordReport
from ats_scan.services.coercion import PROMPT_MAX_CHARS, round_half_up, safe_str_list, truncate_for_prompt
from ats_scan.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

logger = logging.getLogger(__name__)

KEYWORD_DICTIONARY: tuple[str, ...] = (
    "javascript", "python", "java", "react", "node.js", "sql", "aws", "docker",
    "kubernetes", "agile", "scrum", "git", "mongodb", "postgresql", "api",
    "microservices", "ci/cd", "testing", "html", "css", "typescript",
    "machine learning", "data analysis", "project management", "leadership",
    "frontend", "backend", "full stack", "devops", "cloud", "mobile", "web",
    "database", "security", "ui/ux", "analytics", "automation", "rest api",
)

STOPWORDS = {
    "the", "and", "for", "with", "that", "this", "your", "you", "from", "into", "our", "are",
    "its", "their", "they", "them", "these", "those", "which", "what", "who", "where", "when",
    "how", "why", "each", "every", "both", "some", "any", "all", "most", "other", "such",
    "than", "then", "will", "must", "have", "has", "had", "can", "could", "would", "should",
    "may", "might", "been", "being", "was", "were", "not", "also", "very", "just", "only",
    "about", "above", "after", "before", "between", "during", "over", "through", "while",
    "within", "across", "including", "plus", "well", "more", "less", "able", "strong",
    "looking", "join", "help", "work", "working", "team", "teams", "role", "roles", "job",
    "position", "company", "candidate", "candidates", "ideal", "years", "year", "experience",
    "required", "requirements", "preferred", "responsibilities", "qualifications", "skills",
    "ability", "knowledge", "understanding", "we", "us", "is", "be", "in", "of", "to", "a",
    "an", "or", "on", "as", "at", "by", "it", "if", "do", "new", "who", "etc",
}

TECHNICAL_TERMS = (
    "javascript", "python", "java", "react", "node", "sql", "aws", "docker", "kubernetes",
    "git", "mongodb", "api", "frontend", "backend", "database", "cloud",
)
SOFT_SKILL_TERMS = (
    "leadership", "management", "communication", "teamwork", "collaboration", "problem-solving",
    "analytical", "creative", "detail-oriented", "agile", "scrum",
)
DOMAIN_TERMS = (
    "finance", "healthcare", "retail", "marketing", "sales", "education", "manufacturing",
    "logistics", "security", "analytics",
)

_CAPITALIZED_RE = re.compile(r"\b[A-Z][a-zA-Z]+\b")
_WORD_SPLIT_RE = re.compile(r"\W+")
_PHRASE_RE = re.compile(r"\b[a-z][a-z\s]{5,30}?\b")
_STEM_SUFFIX_RE = re.compile(r"(?:s|ing|ed)$")

KEYWORD_SYSTEM_PROMPT = """You are an expert at keyword analysis for ATS systems. Compare a resume against a job description and identify keyword matches and gaps.

Only list keywords that appear in the job description. A keyword belongs in exactly one of keywordMatches or missingKeywords.

Return JSON with this structure:
{
  "keywordMatches": ["string", ...],
  "missingKeywords": ["string", ...],
  "keywordScore": number (0-100),
  "improvementSuggestions": ["string", ...]
}"""


def _contains_term(text_lower: str, term: str) -> bool:
    return bool(re.search(rf"(?<![a-z0-9]){re.escape(term)}(?![a-z0-9])", text_lower))


def _is_phrase(candidate: str) -> bool:
    words = candidate.split()
    if len(words) < 2:
        return False
    return all(len(word) > 2 and word not in STOPWORDS for word in (words[0], words[-1]))


def _dictionary_terms(taxonomy: TaxonomyProvider) -> list[str]:
    terms = list(KEYWORD_DICTIONARY)
    for skill in taxonomy.known_skills():
        terms.extend(taxonomy.surface_forms(skill))
    return [term for term in terms if len(term) >= 2]


def extract_keyword_candidates(
    job_description: str,
    *,
    taxonomy: TaxonomyProvider | None = None,
    limit: int | None = None,
) -> list[str]:
    """Candidate keywords from a job description without calling the AI service."""
    taxonomy = taxonomy or get_default_taxonomy_provider()
    limit = limit if limit is not None else int(get_scoring_value("keywords.max_candidates", 20))
    jd_lower = job_description.lower()

    ordered: list[str] = []
    ordered.extend(term for term in _dictionary_terms(taxonomy) if _contains_term(jd_lower, term))
    ordered.extend(
        term.lower()
        for term in _CAPITALIZED_RE.findall(job_description)
        if len(term) > 2 and term.lower() not in STOPWORDS
    )
    ordered.extend(
        word for word in _WORD_SPLIT_RE.split(jd_lower) if len(word) > 3 and word not in STOPWORDS
    )
    ordered.extend(
        phrase.strip() for phrase in _PHRASE_RE.findall(jd_lower) if _is_phrase(phrase.strip())
    )
    return _dedupe_keywords(ordered)[:limit]


def _dedupe_keywords(values: list[str]) -> list[str]:
    seen: set[str] = set()
    output: list[str] = []
    for value in values:
        key = value.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        output.append(value.strip())
    return output


def is_partial_match(keyword: str, resume_text: str) -> bool:
    """Whether a keyword missing verbatim still shows up in word or stem form."""
    words = keyword.split()
    if len(words) > 1:
        return any(
            re.search(rf"\b{re.escape(word)}\b", resume_text, re.IGNORECASE)
            for word in words
            if len(word) > 3
        )

    min_stem = int(get_scoring_value("keywords.partial_min_stem_length", 4))
    stem = _STEM_SUFFIX_RE.sub("", keyword.strip().lower(), count=1)
    if len(stem) < min_stem:
        return False
    return bool(re.search(rf"\b{re.escape(stem)}\w*\b", resume_text, re.IGNORECASE))


def classify_keyword(keyword: str, resume_text: str) -> str:
    if keyword.lower() in resume_text.lower():
        return "found"
    if is_partial_match(keyword, resume_text):
        return "partial"
    return "missing"


def _categorize_missing(missing: list[str]) -> dict[str, list[str]]:
    buckets: dict[str, list[str]] = {"technical": [], "soft": [], "domain": [], "other": []}
    for keyword in missing:
        lowered = keyword.lower()
        if any(term in lowered for term in TECHNICAL_TERMS):
            buckets["technical"].append(keyword)
        elif any(term in lowered for term in SOFT_SKILL_TERMS):
            buckets["soft"].append(keyword)
        elif any(term in lowered for term in DOMAIN_TERMS):
            buckets["domain"].append(keyword)
        else:
            buckets["other"].append(keyword)
    return buckets


def keyword_suggestions(missing: list[str]) -> list[str]:
    if not missing:
        return ["Great keyword coverage for this role!"]

    buckets = _categorize_missing(missing)
    suggestions = [f"Add these key missing terms: {', '.join(missing[:3])}"]
    if buckets["technical"]:
        suggestions.append(f"Highlight technical skills like: {', '.join(buckets['technical'][:3])}")
    if buckets["soft"]:
        suggestions.append(f"Incorporate soft skills such as: {', '.join(buckets['soft'][:2])}")
    if buckets["domain"]:
        suggestions.append(f"Add domain knowledge in: {', '.join(buckets['domain'][:2])}")
    suggestions.append("Tailor your resume to match terminology used in the job description")
    return suggestions


def build_keyword_report(
    resume_text: str,
    keywords: list[str],
    *,
    suggestions: list[str] | None = None,
) -> KeywordReport:
    """Classify each keyword against the resume and score the exact-match ratio.

    Partial matches stay in ``missing``; only exact containment counts toward the score.
    """
    weights = get_scoring_value("keywords.weights", {}) or {}
    matches: list[str] = []
    missing: list[str] = []
    candidates: list[KeywordCandidate] = []
    for keyword in _dedupe_keywords(keywords):
        status = classify_keyword(keyword, resume_text)
        if status == "found":
            matches.append(keyword)
        else:
            missing.append(keyword)
        candidates.append(
            KeywordCandidate(text=keyword, status=status, weight=float(weights.get(status, 1.0)))
        )

    total = len(matches) + len(missing)
    if total:
        score = round_half_up(len(matches) / total * 100)
    else:
        score = int(get_scoring_value("keywords.no_candidates_score", 30))

    return KeywordReport(
        matches=matches,
        missing=missing,
        score=max(0, min(100, score)),
        suggestions=suggestions or keyword_suggestions(missing),
        candidates=candidates,
    )


def heuristic_keyword_report(
    resume_text: str,
    job_description: str,
    *,
    taxonomy: TaxonomyProvider | None = None,
) -> KeywordReport:
    return build_keyword_report(resume_text, extract_keyword_candidates(job_description, taxonomy=taxonomy))


def _ai_keywords(payload: dict[str, Any]) -> list[str]:
    matches = safe_str_list(payload.get("keywordMatches"), max_items=30, max_len=80)
    missing = safe_str_list(payload.get("missingKeywords"), max_items=30, max_len=80)
    return _dedupe_keywords(matches + missing)


async def match_keywords(
    resume_text: str,
    job_description: str,
    *,
    client: AIClient,
    taxonomy: TaxonomyProvider | None = None,
) -> KeywordReport:
    try:
        payload = await json_object_completion(
            client,
            system_prompt=KEYWORD_SYSTEM_PROMPT,
            user_prompt=(
                f"Job Description:\n{truncate_for_prompt(job_description, PROMPT_MAX_CHARS)}\n\n"
                f"Resume:\n{truncate_for_prompt(resume_text, PROMPT_MAX_CHARS)}\n\n"
                "Analyze keyword match and provide recommendations."
            ),
            purpose="keyword_match",
        )
    except AICompletionError as exc:
        logger.warning("keyword_match_ai_failed code=%s", exc.code)
        return heuristic_keyword_report(resume_text, job_description, taxonomy=taxonomy)
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("keyword_match_ai_failed code=unexpected error=%s", type(exc).__name__)
        return heuristic_keyword_report(resume_text, job_description, taxonomy=taxonomy)

    keywords = _ai_keywords(payload)
    if not keywords:
        logger.warning("keyword_match_ai_failed code=%s", "invalid_schema")
        return heuristic_keyword_report(resume_text, job_description, taxonomy=taxonomy)

    suggestions = safe_str_list(payload.get("improvementSuggestions"), max_items=8, max_len=300)
    return build_keyword_report(resume_text, keywords, suggestions=suggestions or None)
