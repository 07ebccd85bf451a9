import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_scan.ai.types import AICompletionError  # noqa: E402
from ats_scan.services.keyword_match import (  # noqa: E402
    build_keyword_report,
    classify_keyword,
    extract_keyword_candidates,
    heuristic_keyword_report,
    is_partial_match,
    keyword_suggestions,
    match_keywords,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class _FailingClient:
    async def complete(self, messages, *, json_mode=False):
        raise AICompletionError("timed out", code="llm_timeout")


class _StaticClient:
    def __init__(self, content):
        self.content = content

    async def complete(self, messages, *, json_mode=False):
        return self.content


class PartialMatchTests(unittest.TestCase):
    def test_ed_suffix_stems_to_prefix_match(self):
        resume = "Experienced in managing distributed teams."
        self.assertTrue(is_partial_match("managed", resume))
        self.assertEqual(classify_keyword("managed", resume), "partial")

    def test_short_stem_is_never_partial(self):
        self.assertFalse(is_partial_match("is", "This resume is about islands."))

    def test_multi_word_keyword_matches_on_a_long_part(self):
        self.assertTrue(is_partial_match("distributed systems", "Built distributed caches."))
        self.assertFalse(is_partial_match("api design", "Designed the apis."))

    def test_exact_containment_is_case_insensitive(self):
        self.assertEqual(classify_keyword("PostgreSQL", "Tuned postgresql clusters"), "found")
        self.assertEqual(classify_keyword("golang", "Python only"), "missing")


class KeywordReportTests(unittest.TestCase):
    def test_partial_keywords_stay_in_missing_and_do_not_change_score(self):
        resume = "Python developer shipping Docker images and managing releases."
        report = build_keyword_report(resume, ["python", "docker", "managed", "golang", "Python"])

        self.assertEqual(report.matches, ["python", "docker"])
        self.assertEqual(report.missing, ["managed", "golang"])
        self.assertEqual(report.score, 50)
        self.assertEqual(report.partial, ["managed"])
        statuses = {item.text: (item.status, item.weight) for item in report.candidates}
        self.assertEqual(statuses["python"], ("found", 1.0))
        self.assertEqual(statuses["managed"], ("partial", 0.7))
        self.assertEqual(statuses["golang"], ("missing", 0.8))
        self.assertFalse(set(report.matches) & set(report.missing))
        self.assertEqual(len(report.matches) + len(report.missing), len(report.candidates))

    def test_no_candidates_uses_default_score(self):
        report = build_keyword_report("anything", [])
        self.assertEqual(report.score, 30)
        self.assertIsNone(report.match_ratio)

    def test_rounding_is_half_up(self):
        report = build_keyword_report("alpha", ["alpha", "beta", "gamma", "delta", "omega", "sigma", "kappa", "theta"])
        self.assertEqual(report.score, 13)

    def test_suggestions_group_missing_terms(self):
        suggestions = keyword_suggestions(["kubernetes", "leadership", "healthcare", "blockchain"])
        self.assertEqual(suggestions[0], "Add these key missing terms: kubernetes, leadership, healthcare")
        self.assertIn("Highlight technical skills like: kubernetes", suggestions)
        self.assertIn("Incorporate soft skills such as: leadership", suggestions)
        self.assertIn("Add domain knowledge in: healthcare", suggestions)
        self.assertEqual(suggestions[-1], "Tailor your resume to match terminology used in the job description")
        self.assertEqual(keyword_suggestions([]), ["Great keyword coverage for this role!"])


class CandidateExtractionTests(unittest.TestCase):
    def test_dictionary_terms_come_first_and_are_unique(self):
        jd = "We need Python and Docker experience with Kubernetes."
        candidates = extract_keyword_candidates(jd)
        self.assertEqual(candidates[:3], ["python", "docker", "kubernetes"])
        lowered = [item.lower() for item in candidates]
        self.assertEqual(len(lowered), len(set(lowered)))

    def test_candidates_are_capped(self):
        jd = (FIXTURES / "job_description.txt").read_text(encoding="utf-8")
        candidates = extract_keyword_candidates(jd)
        self.assertLessEqual(len(candidates), 20)
        self.assertIn("graphql", candidates)
        self.assertNotIn("the", candidates)


class MatchKeywordsTests(unittest.IsolatedAsyncioTestCase):
    async def test_ai_failure_uses_heuristic_candidates(self):
        resume = (FIXTURES / "resume_full.txt").read_text(encoding="utf-8")
        jd = (FIXTURES / "job_description.txt").read_text(encoding="utf-8")

        report = await match_keywords(resume, jd, client=_FailingClient())

        self.assertEqual(report, heuristic_keyword_report(resume, jd))
        self.assertIn("python", report.matches)
        self.assertIn("graphql", report.missing)
        self.assertTrue(0 <= report.score <= 100)

    async def test_ai_keywords_are_reclassified_locally(self):
        payload = {
            "keywordMatches": ["Python", "Rust"],
            "missingKeywords": ["Docker", "python"],
            "keywordScore": 12,
            "improvementSuggestions": ["Mention Rust projects"],
        }
        resume = "Python services packaged with Docker."

        report = await match_keywords(resume, "Python Rust Docker", client=_StaticClient(json.dumps(payload)))

        self.assertEqual(report.matches, ["Python", "Docker"])
        self.assertEqual(report.missing, ["Rust"])
        self.assertEqual(report.score, 67)
        self.assertEqual(report.suggestions, ["Mention Rust projects"])

    async def test_empty_ai_keywords_fall_back(self):
        payload = {"keywordMatches": [], "missingKeywords": [], "keywordScore": 90}
        resume = "Python developer"
        jd = "Python and Docker"

        report = await match_keywords(resume, jd, client=_StaticClient(json.dumps(payload)))

        self.assertEqual(report, heuristic_keyword_report(resume, jd))


if __name__ == "__main__":
    unittest.main()
