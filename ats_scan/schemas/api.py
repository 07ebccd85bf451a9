from __future__ import annotations

from pydantic import BaseModel, Field

from .analysis import InterviewQuestion


class AnalysisRequest(BaseModel):
    resume_text: str = Field(min_length=1, max_length=50000)
    job_description: str | None = Field(default=None, max_length=20000)


class KeywordRequest(BaseModel):
    resume_text: str = Field(min_length=1, max_length=50000)
    job_description: str = Field(min_length=1, max_length=20000)


class ProfileRequest(BaseModel):
    resume_text: str = Field(min_length=1, max_length=50000)


class InterviewPrepRequest(BaseModel):
    resume_text: str = Field(min_length=1, max_length=50000)
    job_title: str | None = Field(default=None, max_length=120)


class InterviewPrepResponse(BaseModel):
    questions: list[InterviewQuestion]


class CompleteAnalysisRequest(BaseModel):
    resume_text: str = Field(min_length=1, max_length=50000)
    job_description: str | None = Field(default=None, max_length=20000)
    job_title: str | None = Field(default=None, max_length=120)


class CompleteAnalysisResponse(BaseModel):
    ats_score: int = Field(ge=0, le=100)
    interview_questions: list[str]
    recommendations: list[str]
