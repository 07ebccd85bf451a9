import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_scan.ai.types import AICompletionError  # noqa: E402
from ats_scan.schemas import ExtractedProfile  # noqa: E402
from ats_scan.services.entity_extractor import (  # noqa: E402
    extract_job_titles,
    extract_profile,
    extract_skills,
    has_personal_data,
    project_name,
    reference_terms,
)
from ats_scan.services.entity_heuristics import (  # noqa: E402
    DEFAULT_ACHIEVEMENTS,
    DEFAULT_COMPANIES,
    DEFAULT_JOB_TITLES,
    DEFAULT_PROJECTS,
    DEFAULT_SKILLS,
    heuristic_achievements,
    heuristic_companies,
    heuristic_job_titles,
    heuristic_projects,
    heuristic_skills,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class _FailingClient:
    async def complete(self, messages, *, json_mode=False):
        raise AICompletionError("rate limited", code="llm_rate_limited")


class _StaticClient:
    def __init__(self, content):
        self.content = content
        self.calls = 0

    async def complete(self, messages, *, json_mode=False):
        self.calls += 1
        return self.content


def _resume():
    return (FIXTURES / "resume_full.txt").read_text(encoding="utf-8")


class HeuristicExtractionTests(unittest.TestCase):
    def test_job_titles_and_companies_from_experience(self):
        text = _resume()
        self.assertEqual(heuristic_job_titles(text), ["Senior Software Engineer", "Software Engineer"])
        self.assertEqual(heuristic_companies(text), ["Acme Corp", "Globex Solutions"])

    def test_skills_section_comes_first_then_taxonomy_hits(self):
        skills = heuristic_skills(_resume())
        self.assertEqual(skills[:4], ["Python", "Java", "JavaScript", "SQL"])
        for expected in ("Django", "Spring Boot", "FastAPI", "Kubernetes", "Terraform", "Kafka", "Redis"):
            self.assertIn(expected, skills)
        self.assertNotIn("Languages", skills)

    def test_achievements_and_projects(self):
        text = _resume()
        achievements = heuristic_achievements(text)
        self.assertTrue(achievements[0].startswith("Led a team of 5 engineers"))
        self.assertTrue(all(20 < len(item) < 200 for item in achievements))

        projects = heuristic_projects(text)
        self.assertEqual(
            projects[0],
            "Inventory Tracker: Built a warehouse inventory application with FastAPI, React and PostgreSQL "
            "for a local nonprofit.",
        )

    def test_repository_links_become_named_projects(self):
        projects = heuristic_projects("Jane Doe\nSee github.com/janedoe/order-tracker for code")
        self.assertIn("GitHub Project: Order tracker", projects)

    def test_defaults_when_nothing_is_found(self):
        text = "hello world"
        self.assertEqual(heuristic_job_titles(text), DEFAULT_JOB_TITLES)
        self.assertEqual(heuristic_companies(text), DEFAULT_COMPANIES)
        self.assertEqual(heuristic_skills(text), DEFAULT_SKILLS)
        self.assertEqual(heuristic_achievements(text), DEFAULT_ACHIEVEMENTS)
        self.assertEqual(heuristic_projects(text), DEFAULT_PROJECTS)


class ProfileHelpersTests(unittest.TestCase):
    def test_project_name_strips_description_and_link_prefix(self):
        self.assertEqual(project_name("Inventory Tracker: Built a tool"), "Inventory Tracker")
        self.assertEqual(project_name("GitHub Project: Order tracker"), "Order tracker")

    def test_placeholder_profile_has_no_personal_data(self):
        profile = ExtractedProfile(
            job_titles=list(DEFAULT_JOB_TITLES),
            companies=list(DEFAULT_COMPANIES),
            skills=list(DEFAULT_SKILLS),
            achievements=list(DEFAULT_ACHIEVEMENTS),
            projects=list(DEFAULT_PROJECTS),
        )
        self.assertFalse(has_personal_data(profile))
        self.assertEqual(reference_terms(profile), [])

    def test_reference_terms_skip_placeholders(self):
        profile = ExtractedProfile(
            job_titles=["Software Engineer", "Data Analyst"],
            companies=["Acme Corp"],
            skills=["Python", "programming"],
            projects=["Inventory Tracker: Built a tool"],
        )
        self.assertTrue(has_personal_data(profile))
        self.assertEqual(reference_terms(profile), ["acme corp", "data analyst", "python", "inventory tracker"])


class ExtractProfileTests(unittest.IsolatedAsyncioTestCase):
    async def test_prose_wrapped_array_is_accepted(self):
        client = _StaticClient('Here are the titles: ["Staff Engineer", "", "Tech Lead"] hope this helps')
        titles = await extract_job_titles(_resume(), client=client)
        self.assertEqual(titles, ["Staff Engineer", "Tech Lead"])

    async def test_empty_array_falls_back_to_heuristics(self):
        skills = await extract_skills(_resume(), client=_StaticClient("[]"))
        self.assertEqual(skills, heuristic_skills(_resume()))

    async def test_failing_client_yields_heuristic_profile(self):
        text = _resume()
        profile = await extract_profile(text, client=_FailingClient())

        self.assertEqual(profile.job_titles, heuristic_job_titles(text))
        self.assertEqual(profile.companies, heuristic_companies(text))
        self.assertEqual(profile.skills, heuristic_skills(text))
        self.assertEqual(profile.achievements, heuristic_achievements(text))
        self.assertEqual(profile.projects, heuristic_projects(text))

    async def test_all_five_extractors_call_the_client(self):
        client = _StaticClient('["Acme Corp"]')
        profile = await extract_profile("Engineer at Acme Corp", client=client)
        self.assertEqual(client.calls, 5)
        self.assertEqual(profile.companies, ["Acme Corp"])


if __name__ == "__main__":
    unittest.main()
