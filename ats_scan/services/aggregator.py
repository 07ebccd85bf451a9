from __future__ import annotations

from ats_scan.core.scoring import get_scoring_value
from ats_scan.schemas import ContentReport, FormatReport, Improvement, KeywordReport, ScoreReport
from ats_scan.services.coercion import clamp_score


def _weights(mode: str, defaults: tuple[float, float, float]) -> tuple[float, float, float]:
    configured = get_scoring_value(f"aggregation.{mode}.weights", {}) or {}
    return (
        float(configured.get("format", defaults[0])),
        float(configured.get("content", defaults[1])),
        float(configured.get("keyword", defaults[2])),
    )


def default_keyword_score(content_score: int) -> int:
    """Keyword score used when there is no job description to match against."""
    floor = int(get_scoring_value("aggregation.no_job.keyword_floor", 40))
    ceiling = int(get_scoring_value("aggregation.no_job.keyword_ceiling", 85))
    return max(floor, min(ceiling, content_score))


def match_bonus(matches: int, missing: int) -> int:
    total = matches + missing
    if total <= 0:
        return 0
    min_ratio = float(get_scoring_value("aggregation.bonus.min_match_ratio", 0.80))
    if matches / total >= min_ratio:
        return int(get_scoring_value("aggregation.bonus.points", 5))
    return 0


def combine_scores(
    format_score: int,
    content_score: int,
    keyword_score: int,
    *,
    has_job_description: bool,
    matches: int = 0,
    missing: int = 0,
) -> int:
    if has_job_description:
        w_format, w_content, w_keyword = _weights("with_job", (0.25, 0.35, 0.40))
    else:
        w_format, w_content, w_keyword = _weights("no_job", (0.30, 0.40, 0.30))
    base = clamp_score(format_score * w_format + content_score * w_content + keyword_score * w_keyword)
    return min(100, base + match_bonus(matches, missing))


def _missing_keywords_improvement(keywords: KeywordReport) -> Improvement:
    return Improvement(
        priority="high",
        category="Keywords",
        title="Add Missing Keywords",
        description=f"Your resume is missing {len(keywords.missing)} key terms from the job description",
        suggestions=list(keywords.suggestions),
    )


def aggregate(
    format_report: FormatReport,
    content_report: ContentReport,
    keyword_report: KeywordReport | None = None,
) -> ScoreReport:
    """Build the final report; without a keyword report the no-job weighting applies."""
    format_score = clamp_score(format_report.score)
    content_score = clamp_score(content_report.score)
    improvements = list(content_report.improvements)

    if keyword_report is None:
        keyword_score = default_keyword_score(content_score)
        ats_score = combine_scores(format_score, content_score, keyword_score, has_job_description=False)
        matches: list[str] = []
        missing: list[str] = []
    else:
        keyword_score = clamp_score(keyword_report.score)
        matches = list(keyword_report.matches)
        missing = list(keyword_report.missing)
        ats_score = combine_scores(
            format_score,
            content_score,
            keyword_score,
            has_job_description=True,
            matches=len(matches),
            missing=len(missing),
        )
        if missing:
            improvements.append(_missing_keywords_improvement(keyword_report))

    return ScoreReport(
        ats_score=ats_score,
        format_score=format_score,
        keyword_score=keyword_score,
        content_score=content_score,
        keyword_matches=matches,
        missing_keywords=missing,
        improvements=improvements,
        sections=list(content_report.sections),
    )
