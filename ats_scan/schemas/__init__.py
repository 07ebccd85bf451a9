from .analysis import (
    ContentReport,
    ExtractedProfile,
    FormatReport,
    Improvement,
    InterviewQuestion,
    KeywordCandidate,
    KeywordReport,
    ScoreReport,
    SectionStatus,
    TextFeatures,
)

__all__ = [
    "TextFeatures",
    "FormatReport",
    "Improvement",
    "SectionStatus",
    "ContentReport",
    "KeywordCandidate",
    "KeywordReport",
    "ExtractedProfile",
    "ScoreReport",
    "InterviewQuestion",
]
