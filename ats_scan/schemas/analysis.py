from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Priority = Literal["high", "medium", "low"]
SectionState = Literal["complete", "incomplete", "missing"]
KeywordStatus = Literal["found", "partial", "missing"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TextFeatures(_CamelModel):
    word_count: int = Field(ge=0)
    bullet_count: int = Field(ge=0)
    has_email: bool
    has_phone: bool
    sections_found: set[str] = Field(default_factory=set)


class FormatReport(_CamelModel):
    score: int = Field(ge=0, le=100)
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class Improvement(_CamelModel):
    priority: Priority
    category: str = Field(min_length=1, max_length=80)
    title: str = Field(min_length=1, max_length=160)
    description: str = Field(default="", max_length=1200)
    suggestions: list[str] = Field(default_factory=list)


class SectionStatus(_CamelModel):
    section: str = Field(min_length=1, max_length=80)
    status: SectionState
    suggestions: list[str] | None = None


class ContentReport(_CamelModel):
    score: int = Field(ge=0, le=100)
    improvements: list[Improvement] = Field(default_factory=list)
    sections: list[SectionStatus] = Field(default_factory=list)


class KeywordCandidate(_CamelModel):
    text: str
    status: KeywordStatus
    weight: float = Field(ge=0.0, le=1.0)


class KeywordReport(_CamelModel):
    matches: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    score: int = Field(ge=0, le=100)
    suggestions: list[str] = Field(default_factory=list)
    candidates: list[KeywordCandidate] = Field(default_factory=list)

    @model_validator(mode="after")
    def _matches_and_missing_are_disjoint(self) -> "KeywordReport":
        overlap = set(self.matches) & set(self.missing)
        if overlap:
            raise ValueError(f"keywords cannot be both matched and missing: {sorted(overlap)}")
        return self

    @property
    def partial(self) -> list[str]:
        return [candidate.text for candidate in self.candidates if candidate.status == "partial"]

    @property
    def match_ratio(self) -> float | None:
        total = len(self.matches) + len(self.missing)
        if total == 0:
            return None
        return len(self.matches) / total


class ExtractedProfile(_CamelModel):
    job_titles: list[str] = Field(default_factory=list)
    companies: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)

    @field_validator("job_titles", "companies", "skills", "achievements", "projects")
    @classmethod
    def _dedupe(cls, values: list[str]) -> list[str]:
        seen: set[str] = set()
        output: list[str] = []
        for value in values:
            if value in seen:
                continue
            seen.add(value)
            output.append(value)
        return output


class ScoreReport(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    ats_score: int = Field(ge=0, le=100)
    format_score: int = Field(ge=0, le=100)
    keyword_score: int = Field(ge=0, le=100)
    content_score: int = Field(ge=0, le=100)
    keyword_matches: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    improvements: list[Improvement] = Field(default_factory=list)
    sections: list[SectionStatus] = Field(default_factory=list)


class InterviewQuestion(_CamelModel):
    category: str = Field(min_length=1, max_length=60)
    question: str = Field(min_length=1, max_length=600)
    tips: list[str] = Field(default_factory=list)
    resume_context: str | None = None
