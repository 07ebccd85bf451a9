import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ats_scan.ai.factory import default_ai_client
from ats_scan.ai.types import AIClient
from ats_scan.core.config import settings
from ats_scan.core.rate_limit import rate_limit
from ats_scan.schemas import ExtractedProfile, KeywordReport, ScoreReport
from ats_scan.schemas.api import (
    AnalysisRequest,
    CompleteAnalysisRequest,
    CompleteAnalysisResponse,
    InterviewPrepRequest,
    InterviewPrepResponse,
    KeywordRequest,
    ProfileRequest,
)
from ats_scan.services.analysis_service import (
    EmptyResumeError,
    analyze_keywords,
    analyze_resume,
    complete_analysis,
    extract_resume_profile,
    generate_interview_questions,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_ai_client() -> AIClient:
    return default_ai_client()


def _raise_input_error(exc: EmptyResumeError) -> None:
    logger.info("analysis_rejected reason=empty_input")
    raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.message) from exc


@router.post("/analysis", response_model=ScoreReport)
@rate_limit()
async def analyze(request: Request, payload: AnalysisRequest, client: AIClient = Depends(get_ai_client)):
    try:
        return await analyze_resume(payload.resume_text, payload.job_description, client=client)
    except EmptyResumeError as exc:
        _raise_input_error(exc)


@router.post("/keywords", response_model=KeywordReport)
@rate_limit()
async def keywords(request: Request, payload: KeywordRequest, client: AIClient = Depends(get_ai_client)):
    try:
        return await analyze_keywords(payload.resume_text, payload.job_description, client=client)
    except EmptyResumeError as exc:
        _raise_input_error(exc)


@router.post("/profile", response_model=ExtractedProfile)
@rate_limit()
async def profile(request: Request, payload: ProfileRequest, client: AIClient = Depends(get_ai_client)):
    try:
        return await extract_resume_profile(payload.resume_text, client=client)
    except EmptyResumeError as exc:
        _raise_input_error(exc)


@router.post("/interview-prep", response_model=InterviewPrepResponse)
@rate_limit(settings.analysis_rate_limit)
async def interview_prep(
    request: Request, payload: InterviewPrepRequest, client: AIClient = Depends(get_ai_client)
):
    try:
        questions = await generate_interview_questions(payload.resume_text, payload.job_title, client=client)
    except EmptyResumeError as exc:
        _raise_input_error(exc)
    return InterviewPrepResponse(questions=questions)


@router.post("/complete-analysis", response_model=CompleteAnalysisResponse)
@rate_limit(settings.analysis_rate_limit)
async def complete(
    request: Request, payload: CompleteAnalysisRequest, client: AIClient = Depends(get_ai_client)
):
    try:
        report, questions = await complete_analysis(
            payload.resume_text,
            payload.job_description,
            payload.job_title,
            client=client,
        )
    except EmptyResumeError as exc:
        _raise_input_error(exc)
    return CompleteAnalysisResponse(
        ats_score=report.ats_score,
        interview_questions=[item.question for item in questions],
        recommendations=[f"{item.title}: {item.description}" for item in report.improvements],
    )
