from __future__ import annotations

import logging
import re
from typing import Any

from ats_scan.ai.structured import json_object_completion
from ats_scan.ai.types import AICompletionError, AIClient
from ats_scan.core.scoring import get_scoring_value
from ats_scan.schemas import ExtractedProfile, InterviewQuestion
from ats_scan.services.coercion import PROMPT_MAX_CHARS, safe_str, safe_str_list, truncate_for_prompt
from ats_scan.services.entity_extractor import (
    extract_profile,
    has_personal_data,
    is_placeholder,
    project_name,
    reference_terms,
)
from ats_scan.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

logger = logging.getLogger(__name__)

DEFAULT_TARGET_TITLE = "Software Engineer"
TECHNICAL_TIP = "Prepare a specific code or implementation example to illustrate your answer"
BEHAVIORAL_TIP = "Use the STAR method: Situation, Task, Action, Result"

INTERVIEW_SYSTEM_PROMPT = """You are an expert interview coach specializing in highly personalized interview preparation. Generate interview questions that are deeply tailored to the candidate's specific resume details and the job they're applying for.

You MUST reference specific details from their resume such as:
- Exact job titles they've held
- Specific company names where they've worked
- Concrete projects they've completed (with technical details when available)
- Particular skills they possess (both technical and soft skills)
- Quantifiable achievements and results they've delivered

Distribute questions across these categories:
- 3-4 Technical questions that directly reference their listed technical skills and ask about implementation details, problem-solving approaches, or technical challenges
- 2-3 Behavioral questions that reference specific companies, teams, or situations from their work history
- 2-3 Project-based questions that ask about specific projects mentioned in their resume, focusing on their role, challenges, and outcomes
- 2-3 Experience questions that reference specific achievements or responsibilities
- 1-2 Role-specific questions that connect their past experience to the job they're applying for

Each question MUST:
1. Include specific details from their resume (names, technologies, metrics, etc.)
2. Be open-ended to encourage detailed responses
3. Focus on their unique experience rather than generic scenarios
4. Include practical tips for answering effectively
5. Reference exactly which part of their resume the question relates to

AVOID GENERIC QUESTIONS AT ALL COSTS. Every question must contain specific details from the resume.

Return JSON with this structure:
{
  "questions": [
    {
      "category": "string",
      "question": "string",
      "tips": ["string", ...],
      "resume_context": "string"
    }
  ]
}"""

_SKILL_QUESTION_TEMPLATES: dict[str, tuple[str, list[str]]] = {
    "language": (
        "You've listed {skill} as one of your skills. Describe a complex problem you solved using {skill} "
        "and explain your approach to the solution.",
        [
            "Provide specific technical details about the implementation",
            "Explain any libraries or frameworks you utilized",
            "Discuss performance considerations and trade-offs",
        ],
    ),
    "framework": (
        "How have you leveraged {skill} in your previous projects? What specific features or patterns did you implement?",
        [
            "Discuss specific components or modules you built",
            "Explain architectural decisions you made",
            "Mention any performance optimizations you implemented",
        ],
    ),
    "database": (
        "With your experience in {skill}, how would you design a database schema for a system that needs to "
        "handle high-volume transactions while maintaining data integrity?",
        [
            "Discuss normalization and denormalization trade-offs",
            "Explain indexing strategies you would implement",
            "Address scaling and performance considerations",
        ],
    ),
    "cloud": (
        "Based on your experience with {skill}, how would you design a scalable and resilient architecture "
        "for a mission-critical application?",
        [
            "Discuss specific services or components you would use",
            "Explain your approach to high availability and disaster recovery",
            "Address security considerations in your design",
        ],
    ),
}

_WORD_SPLIT_RE = re.compile(r"\W+")


def _company_questions(companies: list[str]) -> list[InterviewQuestion]:
    questions = [
        InterviewQuestion(
            category="Behavioral",
            question=(
                f"During your time at {company}, what was the most significant challenge you faced "
                "and how did you overcome it?"
            ),
            tips=[
                "Use the STAR method (Situation, Task, Action, Result)",
                "Focus on a specific project or initiative",
                "Highlight your problem-solving approach",
            ],
            resume_context=f"Work experience at {company} mentioned in resume",
        )
        for company in companies[:2]
    ]
    if len(companies) >= 2:
        first, second = companies[0], companies[1]
        questions.append(
            InterviewQuestion(
                category="Leadership",
                question=(
                    f"How would you compare the team cultures at {first} and {second}? "
                    "What leadership approaches were most effective in each environment?"
                ),
                tips=[
                    "Compare and contrast specific aspects of each company culture",
                    "Discuss how you adapted your working style to each environment",
                    "Highlight specific leadership techniques that worked well",
                ],
                resume_context=f"Work experience at both {first} and {second} mentioned in resume",
            )
        )
    return questions


def _title_questions(titles: list[str]) -> list[InterviewQuestion]:
    questions: list[InterviewQuestion] = []
    for title in titles[:2]:
        lowered = title.lower()
        if "senior" in lowered or "lead" in lowered or "manager" in lowered:
            questions.append(
                InterviewQuestion(
                    category="Leadership",
                    question=(
                        f"As a {title}, describe a situation where you had to make a difficult decision that "
                        "impacted your team or project. What was your decision-making process?"
                    ),
                    tips=[
                        "Explain the context and constraints you were working with",
                        "Detail your analysis and the factors you considered",
                        "Discuss the outcome and what you learned from the experience",
                    ],
                    resume_context=f"{title} role mentioned in resume",
                )
            )
        else:
            questions.append(
                InterviewQuestion(
                    category="Role-specific",
                    question=(
                        f"In your role as {title}, what was the most innovative solution you implemented "
                        "and what impact did it have?"
                    ),
                    tips=[
                        "Describe the specific problem you were trying to solve",
                        "Explain what made your solution innovative",
                        "Quantify the results if possible",
                    ],
                    resume_context=f"{title} role mentioned in resume",
                )
            )
    return questions


def _skill_questions(skills: list[str], taxonomy: TaxonomyProvider) -> list[InterviewQuestion]:
    questions: list[InterviewQuestion] = []
    for category, (template, tips) in _SKILL_QUESTION_TEMPLATES.items():
        skill = next((item for item in skills if taxonomy.in_category(item, category)), None)
        if skill is None:
            continue
        questions.append(
            InterviewQuestion(
                category="Technical",
                question=template.format(skill=skill),
                tips=list(tips),
                resume_context=f"{skill} skill mentioned in resume",
            )
        )
    return questions


def _project_questions(projects: list[str]) -> list[InterviewQuestion]:
    questions: list[InterviewQuestion] = []
    if projects:
        name = project_name(projects[0])
        questions.append(
            InterviewQuestion(
                category="Project",
                question=(
                    f"Regarding your {name} project, what were the most significant technical challenges "
                    "you faced and how did you overcome them?"
                ),
                tips=[
                    "Describe the specific technical problems in detail",
                    "Explain your problem-solving process and alternatives you considered",
                    "Highlight the technical skills you applied to solve the issues",
                ],
                resume_context=f"Project mentioned in resume: {projects[0]}",
            )
        )
    if len(projects) >= 2:
        name = project_name(projects[1])
        questions.append(
            InterviewQuestion(
                category="Project",
                question=(
                    f"For your {name} project, how did you approach collaboration with other team members "
                    "and stakeholders?"
                ),
                tips=[
                    "Discuss your communication strategies",
                    "Explain how you handled disagreements or conflicting priorities",
                    "Highlight your role in ensuring project success through teamwork",
                ],
                resume_context=f"Project mentioned in resume: {projects[1]}",
            )
        )
    return questions


def _leadership_questions() -> list[InterviewQuestion]:
    return [
        InterviewQuestion(
            category="Leadership",
            question="How do you prioritize tasks when managing multiple projects?",
            tips=[
                "Mention specific methodologies (Agile, Kanban)",
                "Discuss stakeholder communication",
                "Show understanding of business impact",
            ],
            resume_context="Leadership experience mentioned in resume",
        ),
        InterviewQuestion(
            category="Leadership",
            question="Describe your approach to mentoring junior developers.",
            tips=[
                "Show patience and teaching skills",
                "Discuss knowledge sharing practices",
                "Mention code review processes",
            ],
            resume_context="Senior/leadership role mentioned in resume",
        ),
    ]


def _problem_solving_questions() -> list[InterviewQuestion]:
    return [
        InterviewQuestion(
            category="Problem Solving",
            question="Walk me through how you would debug a performance issue in a web application.",
            tips=[
                "Start with gathering information and metrics",
                "Mention specific tools (Chrome DevTools, profilers)",
                "Show systematic problem-solving approach",
            ],
            resume_context="Technical troubleshooting skills implied in resume",
        ),
        InterviewQuestion(
            category="Problem Solving",
            question="How would you approach learning a new technology or framework?",
            tips=[
                "Show continuous learning mindset",
                "Mention documentation, tutorials, and practice projects",
                "Discuss how you stay updated with industry trends",
            ],
            resume_context="Technical adaptability implied from resume skills",
        ),
    ]


def fallback_questions(
    resume_text: str,
    profile: ExtractedProfile,
    job_title: str | None = None,
    *,
    taxonomy: TaxonomyProvider | None = None,
) -> list[InterviewQuestion]:
    """Template questions filled from the extracted profile."""
    taxonomy = taxonomy or get_default_taxonomy_provider()
    target = job_title or DEFAULT_TARGET_TITLE
    lowered = resume_text.lower()

    companies = [value for value in profile.companies if not is_placeholder(value)]
    titles = [value for value in profile.job_titles if not is_placeholder(value)]
    skills = [value for value in profile.skills if not is_placeholder(value)]
    projects = [value for value in profile.projects if not is_placeholder(value)]

    questions: list[InterviewQuestion] = []
    questions.extend(_company_questions(companies))
    questions.extend(_title_questions(titles))
    questions.extend(_skill_questions(skills, taxonomy))
    questions.extend(_project_questions(projects))
    if "lead" in lowered or "manage" in lowered or "senior" in lowered:
        questions.extend(_leadership_questions())
    questions.extend(_problem_solving_questions())
    if titles:
        questions.append(
            InterviewQuestion(
                category="Role-Specific",
                question=f"How has your experience as a {titles[0]} prepared you for this {target} role?",
                tips=[
                    "Highlight transferable skills",
                    "Discuss relevant accomplishments",
                    "Show career progression",
                ],
                resume_context=f"Previous job title in resume: {titles[0]}",
            )
        )
    questions.append(
        InterviewQuestion(
            category="Role-Specific",
            question=f"Why are you interested in this {target} position?",
            tips=[
                "Research the company and role thoroughly",
                "Connect your experience to their needs",
                "Show enthusiasm for their mission/products",
            ],
            resume_context=f"Based on target job title: {target}",
        )
    )

    limit = int(get_scoring_value("interview.fallback_limit", 10))
    return questions[:limit]


def parse_questions(value: Any, max_items: int = 20) -> list[InterviewQuestion]:
    if not isinstance(value, list):
        return []
    output: list[InterviewQuestion] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        question = safe_str(item.get("question"), max_len=600)
        if not question:
            continue
        context = safe_str(item.get("resume_context") or item.get("resumeContext"), max_len=300)
        output.append(
            InterviewQuestion(
                category=safe_str(item.get("category"), max_len=60) or "General",
                question=question,
                tips=safe_str_list(item.get("tips"), max_items=6, max_len=300),
                resume_context=context or None,
            )
        )
        if len(output) >= max_items:
            break
    return output


def personalization_ratio(questions: list[InterviewQuestion], terms: list[str]) -> float:
    if not questions:
        return 0.0
    personalized = sum(
        1 for item in questions if any(term in item.question.lower() for term in terms)
    )
    return personalized / len(questions)


def enrich_tips(question: InterviewQuestion) -> InterviewQuestion:
    category = question.category.lower()
    tips = list(question.tips)
    if category == "technical" and not any("example" in tip for tip in tips):
        tips.append(TECHNICAL_TIP)
    if category == "behavioral" and not any("STAR" in tip for tip in tips):
        tips.append(BEHAVIORAL_TIP)
    return question.model_copy(update={"tips": tips})


def _significant_words(text: str) -> list[str]:
    return [word for word in _WORD_SPLIT_RE.split(text.lower()) if len(word) > 3]


def is_similar_question(candidate: str, existing: str, *, overlap: float | None = None) -> bool:
    """Whether two questions share too many significant words to both be asked."""
    threshold = overlap if overlap is not None else float(get_scoring_value("interview.duplicate_word_overlap", 0.40))
    candidate_words = _significant_words(candidate)
    existing_words = set(_significant_words(existing))
    common = [word for word in candidate_words if word in existing_words]
    return len(common) > threshold * min(len(candidate_words), len(existing_words))


def merge_with_fallback(
    questions: list[InterviewQuestion],
    fallback: list[InterviewQuestion],
) -> list[InterviewQuestion]:
    min_questions = int(get_scoring_value("interview.min_questions", 10))
    max_questions = int(get_scoring_value("interview.max_questions", 15))
    merged = list(questions)
    if len(merged) < min_questions:
        for candidate in fallback:
            if any(is_similar_question(candidate.question, item.question) for item in merged):
                continue
            merged.append(candidate)
    return merged[:max_questions]


def _interview_user_prompt(resume_text: str, profile: ExtractedProfile, job_title: str | None) -> str:
    return (
        f"Resume: {truncate_for_prompt(resume_text, PROMPT_MAX_CHARS)}\n\n"
        f"Job Title: {job_title or DEFAULT_TARGET_TITLE}\n\n"
        "Extracted Information:\n"
        f"Job Titles: {', '.join(profile.job_titles)}\n"
        f"Companies: {', '.join(profile.companies)}\n"
        f"Skills: {', '.join(profile.skills)}\n"
        f"Projects: {'; '.join(profile.projects)}\n"
        f"Achievements: {'; '.join(profile.achievements)}\n\n"
        "Generate 10-15 highly personalized interview questions that specifically reference the candidate's "
        "experience, skills, projects, and achievements. Each question MUST include a resume_context field "
        "explaining what part of the resume it relates to."
    )


async def generate_questions_for_profile(
    resume_text: str,
    profile: ExtractedProfile,
    job_title: str | None = None,
    *,
    client: AIClient,
    taxonomy: TaxonomyProvider | None = None,
) -> list[InterviewQuestion]:
    fallback = fallback_questions(resume_text, profile, job_title, taxonomy=taxonomy)
    if not has_personal_data(profile):
        logger.info("interview_questions_fallback reason=no_profile_data")
        return fallback

    try:
        payload = await json_object_completion(
            client,
            system_prompt=INTERVIEW_SYSTEM_PROMPT,
            user_prompt=_interview_user_prompt(resume_text, profile, job_title),
            purpose="interview_questions",
        )
    except AICompletionError as exc:
        logger.warning("interview_questions_ai_failed code=%s", exc.code)
        return fallback
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("interview_questions_ai_failed code=unexpected error=%s", type(exc).__name__)
        return fallback

    questions = parse_questions(payload.get("questions"))
    if not questions:
        logger.warning("interview_questions_ai_failed code=%s", "invalid_schema")
        return fallback

    ratio = personalization_ratio(questions, reference_terms(profile))
    threshold = float(get_scoring_value("interview.personalization_threshold", 0.70))
    if ratio < threshold:
        logger.info(
            "interview_questions_fallback reason=low_personalization ratio=%.2f questions=%s",
            ratio,
            len(questions),
        )
        return fallback

    return merge_with_fallback([enrich_tips(item) for item in questions], fallback)


async def generate_questions(
    resume_text: str,
    job_title: str | None = None,
    *,
    client: AIClient,
    taxonomy: TaxonomyProvider | None = None,
) -> list[InterviewQuestion]:
    profile = await extract_profile(resume_text, client=client)
    return await generate_questions_for_profile(
        resume_text, profile, job_title, client=client, taxonomy=taxonomy
    )
