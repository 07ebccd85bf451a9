from __future__ import annotations

import asyncio
import logging
import time

from ats_scan.ai.types import AIClient
from ats_scan.schemas import ExtractedProfile, InterviewQuestion, KeywordReport, ScoreReport
from ats_scan.services.aggregator import aggregate
from ats_scan.services.content_scorer import score_content
from ats_scan.services.entity_extractor import extract_profile
from ats_scan.services.format_scorer import score_format
from ats_scan.services.interview_questions import generate_questions
from ats_scan.services.keyword_match import match_keywords

logger = logging.getLogger(__name__)


class EmptyResumeError(ValueError):
    def __init__(self, message: str = "Cannot analyze an empty document."):
        super().__init__(message)
        self.message = message


def _require_text(resume_text: str | None) -> str:
    if resume_text is None or not resume_text.strip():
        raise EmptyResumeError()
    return resume_text


def _optional_text(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


async def analyze_resume(
    resume_text: str,
    job_description: str | None = None,
    *,
    client: AIClient,
) -> ScoreReport:
    """Score a resume, optionally against a job description.

    Raises EmptyResumeError for blank input; every other failure is absorbed by
    the individual scorers' fallbacks, so a complete report is always returned.
    """
    resume_text = _require_text(resume_text)
    job_description = _optional_text(job_description)
    started = time.perf_counter()

    format_report = score_format(resume_text)
    if job_description is None:
        content_report = await score_content(resume_text, client=client)
        keyword_report = None
    else:
        content_report, keyword_report = await asyncio.gather(
            score_content(resume_text, client=client),
            match_keywords(resume_text, job_description, client=client),
        )

    report = aggregate(format_report, content_report, keyword_report)
    logger.info(
        "resume_analysis_done ats_score=%s has_job=%s latency_ms=%s",
        report.ats_score,
        job_description is not None,
        int((time.perf_counter() - started) * 1000),
    )
    return report


async def analyze_keywords(resume_text: str, job_description: str, *, client: AIClient) -> KeywordReport:
    resume_text = _require_text(resume_text)
    if _optional_text(job_description) is None:
        raise EmptyResumeError("Cannot match keywords against an empty job description.")
    return await match_keywords(resume_text, job_description, client=client)


async def extract_resume_profile(resume_text: str, *, client: AIClient) -> ExtractedProfile:
    return await extract_profile(_require_text(resume_text), client=client)


async def generate_interview_questions(
    resume_text: str,
    job_title: str | None = None,
    *,
    client: AIClient,
) -> list[InterviewQuestion]:
    questions = await generate_questions(_require_text(resume_text), _optional_text(job_title), client=client)
    logger.info("interview_questions_done count=%s", len(questions))
    return questions


async def complete_analysis(
    resume_text: str,
    job_description: str | None = None,
    job_title: str | None = None,
    *,
    client: AIClient,
) -> tuple[ScoreReport, list[InterviewQuestion]]:
    """Score report and interview questions for one resume, computed concurrently."""
    resume_text = _require_text(resume_text)
    report, questions = await asyncio.gather(
        analyze_resume(resume_text, job_description, client=client),
        generate_interview_questions(resume_text, job_title, client=client),
    )
    return report, questions
