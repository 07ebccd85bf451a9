from __future__ import annotations

import re

from ats_scan.features import (
    SectionSpan,
    contains_any,
    find_section_span,
    is_bullet_like,
    is_heading_like,
    normalize_line,
    ordered_unique,
    strip_bullet_prefix,
)
from ats_scan.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

DEFAULT_JOB_TITLES = ["Software Engineer"]
DEFAULT_COMPANIES = ["previous company"]
DEFAULT_SKILLS = ["programming", "development"]
DEFAULT_ACHIEVEMENTS = ["past achievement or project"]
DEFAULT_PROJECTS = ["No specific projects identified"]

# Values that never count as resume-specific detail.
PLACEHOLDER_VALUES = {
    "software engineer",
    "previous company",
    "no specific company identified",
    "programming",
    "development",
    "past achievement or project",
    "no specific projects identified",
}

EXPERIENCE_MARKERS = ("experience", "employment", "work history")
SKILLS_MARKERS = ("skills", "technologies", "technical proficiencies")
PROJECT_MARKERS = ("project",)

TITLE_KEYWORDS = (
    "software engineer", "developer", "programmer", "architect", "designer",
    "manager", "director", "analyst", "consultant", "specialist", "lead",
    "administrator", "devops", "full stack", "frontend", "backend", "data scientist",
    "engineer", "technician", "coordinator", "supervisor", "head of", "chief",
    "cto", "ceo", "cfo", "vp", "vice president", "president", "founder",
    "intern", "assistant", "associate", "senior", "junior", "principal",
    "project manager", "product manager", "program manager", "scrum master",
)

COMPANY_SUFFIXES = {
    "inc", "llc", "ltd", "corp", "corporation", "company", "technologies",
    "solutions", "labs", "systems", "group",
}

PROJECT_WORDS = ("project", "developed", "created", "built", "implemented", "designed", "architected")
PROJECT_BULLET_WORDS = (
    "project", "developed", "created", "built", "implemented", "designed",
    "application", "system", "platform",
)

_TITLE_KEYWORD_RES = [
    (keyword, re.compile(rf"(?<![a-z]){re.escape(keyword)}(?![a-z])")) for keyword in TITLE_KEYWORDS
]
_TITLE_CUT_RE = re.compile(r"\s+at\s+|\s*\|\s*|\s*,\s*|\s+[-–—]\s+|\s*\(|\b(?:19|20)\d{2}\b", re.IGNORECASE)
_PROPER_NOUN_RE = re.compile(r"^[A-Z][a-z]+ [A-Z][a-z]+")
_ROLE_WORD_RE = re.compile(r"\b(?:position|title|role)\b", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_DATE_RANGE_RE = re.compile(r"\d{4}\s*(?:-|to|–)\s*(?:\d{4}|present|current|now)", re.IGNORECASE)

_CAPITALIZED_SEQ = r"[A-Z][\w&.'-]*(?:\s+(?:[A-Z][\w&.'-]*|&|of))*"
_COMPANY_AFTER_RE = re.compile(rf"\b(?:at|for)\s+({_CAPITALIZED_SEQ})")
_CAPITALIZED_SEQ_RE = re.compile(_CAPITALIZED_SEQ)

_SKILL_SPLIT_RE = re.compile(r"[,;|•·]")
_SKILL_LABEL_RE = re.compile(r"^[A-Za-z &/]{2,30}:\s*")

_ACHIEVEMENT_RE = re.compile(
    r"\b(?:increased|improved|reduced|saved|delivered|implemented|launched|led|managed|created|developed)\b"
    r"|\d+%|\$\d+|\b\d+ users\b|\b\d+ customers\b"
)

_PROJECT_HEADING_RE = re.compile(
    r"(?:(?:key|personal|academic|side|selected|notable|technical|open source)\s+)?projects?(?:\s+experience)?",
    re.IGNORECASE,
)
_REPO_RE = re.compile(r"(github|gitlab)\.com/[\w.-]+/([\w-]+)", re.IGNORECASE)


def _lines(text: str) -> list[str]:
    return [normalize_line(line) for line in text.splitlines()]


def _span_first_order(lines: list[str], span: SectionSpan | None) -> list[int]:
    """Line indexes with those inside ``span`` first."""
    if span is None:
        return list(range(len(lines)))
    inside = [index for index in range(len(lines)) if index in span]
    outside = [index for index in range(len(lines)) if index not in span]
    return inside + outside


def _length_filter(values: list[str], min_len: int, max_len: int) -> list[str]:
    return [value for value in values if min_len <= len(value) <= max_len]


def _clean_title(line: str, keyword: str | None) -> str:
    parts = [part.strip() for part in _TITLE_CUT_RE.split(line) if part and part.strip()]
    if not parts:
        return ""
    chosen = parts[0]
    if keyword:
        for part in parts:
            if keyword in part.lower():
                chosen = part
                break
    return re.sub(r"^[^A-Za-z]+", "", chosen).strip()


def heuristic_job_titles(resume_text: str) -> list[str]:
    lines = _lines(resume_text)
    span = find_section_span(lines, EXPERIENCE_MARKERS, ("education", "skills", "projects", "certifications"))

    titles: list[str] = []
    for index, line in enumerate(lines):
        if not line or len(line) >= 100 or is_bullet_like(line):
            continue
        lowered = line.lower()
        in_experience = span is not None and index in span
        keyword = next((kw for kw, pattern in _TITLE_KEYWORD_RES if pattern.search(lowered)), None)
        if keyword is None:
            dated = bool(_YEAR_RE.search(line) or _DATE_RANGE_RE.search(line))
            named = bool(_PROPER_NOUN_RE.match(line) or _ROLE_WORD_RE.search(line))
            if not (in_experience and (dated or named)):
                continue
        title = _clean_title(line, keyword)
        if title and len(title.split()) <= 8:
            titles.append(title)

    titles = _length_filter(ordered_unique(titles), 4, 49)
    return titles or list(DEFAULT_JOB_TITLES)


def _company_from_line(line: str) -> str:
    match = _COMPANY_AFTER_RE.search(line)
    if match:
        return match.group(1)
    for candidate in _CAPITALIZED_SEQ_RE.finditer(line):
        words = candidate.group(0).split()
        if len(words) >= 2 and words[-1].strip(".,").lower() in COMPANY_SUFFIXES:
            return candidate.group(0)
    return ""


def heuristic_companies(resume_text: str) -> list[str]:
    lines = _lines(resume_text)
    span = find_section_span(lines, EXPERIENCE_MARKERS, ("education", "skills", "projects", "certifications"))

    companies: list[str] = []
    for index in _span_first_order(lines, span):
        line = strip_bullet_prefix(lines[index]) if is_bullet_like(lines[index]) else lines[index]
        company = _company_from_line(line).strip(" .,;:&-")
        if company:
            companies.append(company)

    companies = _length_filter(ordered_unique(companies), 3, 49)
    return companies or list(DEFAULT_COMPANIES)


def _skills_from_section(lines: list[str], span: SectionSpan | None) -> list[str]:
    if span is None:
        return []
    skills: list[str] = []
    for index in range(span.start, span.end):
        line = strip_bullet_prefix(lines[index]) if is_bullet_like(lines[index]) else lines[index]
        line = _SKILL_LABEL_RE.sub("", line)
        for part in _SKILL_SPLIT_RE.split(line):
            candidate = part.strip(" .:")
            if candidate:
                skills.append(candidate)
    return skills


def heuristic_skills(resume_text: str, *, taxonomy: TaxonomyProvider | None = None) -> list[str]:
    taxonomy = taxonomy or get_default_taxonomy_provider()
    lines = _lines(resume_text)
    span = find_section_span(lines, SKILLS_MARKERS, ("experience", "education", "projects", "certifications"))

    skills = _length_filter(_skills_from_section(lines, span), 2, 29)
    seen = {skill.lower() for skill in skills}
    seen.update(canonical for _, canonical in (taxonomy.normalize_skill(skill) for skill in skills) if canonical)

    for skill in taxonomy.known_skills():
        if skill in seen:
            continue
        for form in taxonomy.surface_forms(skill):
            match = re.search(rf"(?<![A-Za-z0-9]){re.escape(form)}(?![A-Za-z0-9])", resume_text, re.IGNORECASE)
            if match:
                skills.append(match.group(0))
                seen.add(skill)
                seen.add(form)
                break

    skills = ordered_unique(skills)
    return skills or list(DEFAULT_SKILLS)


def heuristic_achievements(resume_text: str) -> list[str]:
    lines = _lines(resume_text)
    span = find_section_span(lines, EXPERIENCE_MARKERS, ("education", "skills", "projects", "certifications"))

    achievements: list[str] = []
    for index in _span_first_order(lines, span):
        line = strip_bullet_prefix(lines[index]) if is_bullet_like(lines[index]) else lines[index]
        if _ACHIEVEMENT_RE.search(line.lower()):
            achievements.append(line)

    achievements = _length_filter(ordered_unique(achievements), 21, 199)
    return achievements or list(DEFAULT_ACHIEVEMENTS)


def _projects_from_section(lines: list[str], span: SectionSpan | None) -> list[str]:
    if span is None:
        return []
    projects: list[str] = []
    title = ""
    description = ""

    def flush() -> None:
        if title:
            projects.append(f"{title}: {description}" if description else title)

    for index in range(span.start, span.end):
        line = lines[index]
        if not line:
            continue
        if not is_bullet_like(line) and len(line) < 80:
            flush()
            title = line.rstrip(":").strip()
            description = ""
        elif title:
            text = strip_bullet_prefix(line) if is_bullet_like(line) else line
            if not description:
                description = text
            elif len(description) < 100:
                description = f"{description} {text}"
    flush()
    return projects


def _project_indicator_lines(lines: list[str], span: SectionSpan | None) -> list[str]:
    projects: list[str] = []
    for index, line in enumerate(lines):
        if (span is not None and index in span) or not line or is_bullet_like(line) or is_heading_like(line):
            continue
        if not (15 < len(line) < 150) or not contains_any(line, PROJECT_WORDS):
            continue
        entry = line
        if len(line) < 50 and index + 1 < len(lines):
            following = lines[index + 1]
            if following and "project" not in following.lower():
                following = strip_bullet_prefix(following) if is_bullet_like(following) else following
                entry = f"{line}: {following}"
        projects.append(entry)
    return projects


def _project_bullets(lines: list[str], span: SectionSpan | None) -> list[str]:
    projects: list[str] = []
    context = ""
    in_list = False
    for index, line in enumerate(lines):
        if not line:
            continue
        if not is_bullet_like(line):
            in_list = False
            context = ""
            continue
        if not in_list:
            in_list = True
            previous = lines[index - 1] if index > 0 else ""
            context = previous if 0 < len(previous) < 80 and not is_bullet_like(previous) else ""
            if contains_any(context, EXPERIENCE_MARKERS + SKILLS_MARKERS + ("education",)):
                context = ""
        if span is not None and index in span:
            continue
        cleaned = strip_bullet_prefix(line)
        if len(cleaned) > 15 and contains_any(cleaned, PROJECT_BULLET_WORDS):
            projects.append(f"{context}: {cleaned}" if context else cleaned)
    return projects


def _humanize_repo_name(raw: str) -> str:
    name = re.sub(r"[-_]+", " ", raw)
    name = re.sub(r"([a-z])([A-Z])", r"\1 \2", name).strip()
    return name[:1].upper() + name[1:]


def _project_links(lines: list[str]) -> list[str]:
    projects: list[str] = []
    for line in lines:
        if not line or len(line) >= 150:
            continue
        match = _REPO_RE.search(line)
        if match:
            host = "GitHub" if match.group(1).lower() == "github" else "GitLab"
            projects.append(f"{host} Project: {_humanize_repo_name(match.group(2))}")
        elif contains_any(line, ("repository", "portfolio")) and "@" not in line:
            projects.append(strip_bullet_prefix(line) if is_bullet_like(line) else line)
    return projects


def heuristic_projects(resume_text: str) -> list[str]:
    lines = _lines(resume_text)
    span = find_section_span(
        lines,
        PROJECT_MARKERS,
        ("experience", "education", "skills", "certifications"),
        heading_pattern=_PROJECT_HEADING_RE,
    )

    projects = (
        _projects_from_section(lines, span)
        + _project_indicator_lines(lines, span)
        + _project_bullets(lines, span)
        + _project_links(lines)
    )
    projects = _length_filter(ordered_unique(projects), 3, 250)
    return projects or list(DEFAULT_PROJECTS)
