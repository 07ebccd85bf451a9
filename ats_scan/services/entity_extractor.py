from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ats_scan.ai.structured import json_array_completion
from ats_scan.ai.types import AICompletionError, AIClient
from ats_scan.schemas import ExtractedProfile
from ats_scan.services.coercion import PROMPT_MAX_CHARS, safe_str_list, truncate_for_prompt
from ats_scan.services.entity_heuristics import (
    DEFAULT_COMPANIES,
    DEFAULT_JOB_TITLES,
    DEFAULT_PROJECTS,
    DEFAULT_SKILLS,
    PLACEHOLDER_VALUES,
    heuristic_achievements,
    heuristic_companies,
    heuristic_job_titles,
    heuristic_projects,
    heuristic_skills,
)

logger = logging.getLogger(__name__)

JOB_TITLES_PROMPT = """You are a specialized resume parser focused on extracting job titles.

Extract ALL job titles from the resume, including current and previous positions.
Look for patterns like:
- Lines with job titles followed by company names
- Sections labeled "Experience", "Work History", or "Employment"
- Job titles near dates (e.g., "Software Engineer | 2018-2020")
- Titles that appear after words like "as", "position", or "role"

Return ONLY a JSON array of strings containing the job titles without any additional text.
Example: ["Senior Software Engineer", "Frontend Developer", "IT Intern"]

Do not include company names, dates, locations or descriptions.
If no job titles are found, return an empty array []"""

COMPANIES_PROMPT = """Extract company names from the resume.
Return ONLY a JSON array of strings containing only the company names.
If no companies are found, return an empty array []"""

SKILLS_PROMPT = """You are a specialized resume parser focused on extracting skills.

Extract ALL technical and professional skills from the resume, including:
- Programming languages (Python, Java, JavaScript, etc.)
- Frameworks and libraries (React, Angular, Django, etc.)
- Tools and platforms (AWS, Docker, Kubernetes, etc.)
- Databases (SQL, MongoDB, PostgreSQL, etc.)
- Methodologies (Agile, Scrum, TDD, etc.)
- Soft skills (Leadership, Communication, Problem-solving, etc.)

Look for skills in skills sections, project descriptions, work experience bullet points,
and education or certification sections.

Return ONLY a JSON array of strings containing the skills without any additional text.
Example: ["JavaScript", "React", "Node.js", "AWS", "Agile", "Leadership"]

Do not include job titles, company names or descriptions.
If no skills are found, return an empty array []"""

ACHIEVEMENTS_PROMPT = """Extract quantifiable achievements and accomplishments from the resume.
Return ONLY a JSON array of strings containing only the achievements.
If no achievements are found, return an empty array []"""

PROJECTS_PROMPT = """You are a specialized resume parser focused on extracting projects.

Extract ALL projects from the resume, including personal, professional and academic projects
and open source contributions. Look in dedicated "Projects" sections, work experience
descriptions, portfolio mentions and GitHub/repository links.

For each project include the project name and, if available, a very brief (1-2 sentence) description.

Return ONLY a JSON array of strings, each containing a project name and optionally a brief description.
Example: ["E-commerce Platform: Built a full-stack online store with React and Node.js", "Inventory Management System: Automated tracking for warehouse operations"]

Do not include job titles, company names (unless part of the project name) or dates.
If no projects are found, return an empty array []"""


async def _extract(
    kind: str,
    resume_text: str,
    *,
    client: AIClient,
    system_prompt: str,
    fallback: Callable[[str], list[str]],
    max_len: int = 200,
) -> list[str]:
    try:
        items = await json_array_completion(
            client,
            system_prompt=system_prompt,
            user_prompt=f"Extract {kind.replace('_', ' ')} from this resume:\n\n"
            f"{truncate_for_prompt(resume_text, PROMPT_MAX_CHARS)}",
            purpose=f"extract_{kind}",
        )
    except AICompletionError as exc:
        logger.warning("entity_extraction_ai_failed kind=%s code=%s", kind, exc.code)
        return fallback(resume_text)
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("entity_extraction_ai_failed kind=%s code=unexpected error=%s", kind, type(exc).__name__)
        return fallback(resume_text)

    values = safe_str_list(items, max_items=30, max_len=max_len)
    if not values:
        logger.info("entity_extraction_ai_empty kind=%s", kind)
        return fallback(resume_text)
    return values


async def extract_job_titles(resume_text: str, *, client: AIClient) -> list[str]:
    return await _extract(
        "job_titles", resume_text, client=client, system_prompt=JOB_TITLES_PROMPT,
        fallback=heuristic_job_titles, max_len=100,
    )


async def extract_companies(resume_text: str, *, client: AIClient) -> list[str]:
    return await _extract(
        "companies", resume_text, client=client, system_prompt=COMPANIES_PROMPT,
        fallback=heuristic_companies, max_len=100,
    )


async def extract_skills(resume_text: str, *, client: AIClient) -> list[str]:
    return await _extract(
        "skills", resume_text, client=client, system_prompt=SKILLS_PROMPT,
        fallback=heuristic_skills, max_len=60,
    )


async def extract_achievements(resume_text: str, *, client: AIClient) -> list[str]:
    return await _extract(
        "achievements", resume_text, client=client, system_prompt=ACHIEVEMENTS_PROMPT,
        fallback=heuristic_achievements,
    )


async def extract_projects(resume_text: str, *, client: AIClient) -> list[str]:
    return await _extract(
        "projects", resume_text, client=client, system_prompt=PROJECTS_PROMPT,
        fallback=heuristic_projects, max_len=250,
    )


async def extract_profile(resume_text: str, *, client: AIClient) -> ExtractedProfile:
    """Run all five extractors concurrently; each one falls back on its own."""
    job_titles, companies, skills, achievements, projects = await asyncio.gather(
        extract_job_titles(resume_text, client=client),
        extract_companies(resume_text, client=client),
        extract_skills(resume_text, client=client),
        extract_achievements(resume_text, client=client),
        extract_projects(resume_text, client=client),
    )
    return ExtractedProfile(
        job_titles=job_titles,
        companies=companies,
        skills=skills,
        achievements=achievements,
        projects=projects,
    )


def is_placeholder(value: str) -> bool:
    return value.strip().lower() in PLACEHOLDER_VALUES


def project_name(project: str) -> str:
    """The name part of a "Name: description" project entry."""
    name, _, rest = project.partition(":")
    if name.strip().lower() in {"github project", "gitlab project"}:
        name = rest
    return name.strip()


def has_personal_data(profile: ExtractedProfile) -> bool:
    """Whether titles, companies, skills or projects hold anything beyond the defaults."""
    return any(
        values and values != defaults
        for values, defaults in (
            (profile.job_titles, DEFAULT_JOB_TITLES),
            (profile.companies, DEFAULT_COMPANIES),
            (profile.skills, DEFAULT_SKILLS),
            (profile.projects, DEFAULT_PROJECTS),
        )
    )


def reference_terms(profile: ExtractedProfile) -> list[str]:
    """Lower-cased resume details a personalized question is expected to mention."""
    terms: list[str] = []
    for value in [*profile.companies, *profile.job_titles, *profile.skills]:
        if not is_placeholder(value):
            terms.append(value.strip().lower())
    for project in profile.projects:
        if is_placeholder(project):
            continue
        name = project_name(project).lower()
        if name:
            terms.append(name)
    return [term for term in dict.fromkeys(terms) if term]
