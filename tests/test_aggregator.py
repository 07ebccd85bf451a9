import sys
import unittest
from pathlib import Path

from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_scan.schemas import ContentReport, FormatReport, Improvement, KeywordReport  # noqa: E402
from ats_scan.services.aggregator import (  # noqa: E402
    aggregate,
    combine_scores,
    default_keyword_score,
    match_bonus,
)


class CombineScoresTests(unittest.TestCase):
    def test_weighted_with_job_description(self):
        self.assertEqual(combine_scores(80, 60, 50, has_job_description=True), 61)

    def test_high_match_ratio_earns_bonus(self):
        self.assertEqual(combine_scores(80, 60, 50, has_job_description=True, matches=8, missing=2), 66)
        self.assertEqual(match_bonus(7, 3), 0)
        self.assertEqual(match_bonus(0, 0), 0)

    def test_bonus_is_capped_at_100(self):
        self.assertEqual(combine_scores(100, 100, 100, has_job_description=True, matches=5, missing=0), 100)

    def test_without_job_description(self):
        self.assertEqual(combine_scores(80, 60, 60, has_job_description=False), 66)

    def test_default_keyword_score_is_clamped(self):
        self.assertEqual(default_keyword_score(95), 85)
        self.assertEqual(default_keyword_score(10), 40)
        self.assertEqual(default_keyword_score(60), 60)


class AggregateTests(unittest.TestCase):
    def _content(self):
        return ContentReport(
            score=60,
            improvements=[Improvement(priority="medium", category="Content", title="Add metrics")],
        )

    def test_no_job_description_uses_derived_keyword_score(self):
        report = aggregate(FormatReport(score=80), self._content())

        self.assertEqual(report.ats_score, 66)
        self.assertEqual(report.keyword_score, 60)
        self.assertEqual(report.keyword_matches, [])
        self.assertEqual(report.missing_keywords, [])
        self.assertEqual(len(report.improvements), 1)

    def test_missing_keywords_add_an_improvement(self):
        keywords = KeywordReport(
            matches=["python"],
            missing=["kafka", "graphql"],
            score=33,
            suggestions=["Add these key missing terms: kafka, graphql"],
        )

        report = aggregate(FormatReport(score=80), self._content(), keywords)

        self.assertEqual(report.keyword_score, 33)
        self.assertEqual(report.missing_keywords, ["kafka", "graphql"])
        last = report.improvements[-1]
        self.assertEqual(last.priority, "high")
        self.assertEqual(last.category, "Keywords")
        self.assertEqual(last.title, "Add Missing Keywords")
        self.assertEqual(last.description, "Your resume is missing 2 key terms from the job description")
        self.assertEqual(last.suggestions, keywords.suggestions)

    def test_report_serializes_camel_case_and_is_immutable(self):
        report = aggregate(FormatReport(score=80), self._content())

        payload = report.model_dump(by_alias=True)
        self.assertIn("atsScore", payload)
        self.assertIn("missingKeywords", payload)
        with self.assertRaises(ValidationError):
            report.ats_score = 10

    def test_keyword_report_rejects_overlap(self):
        with self.assertRaises(ValidationError):
            KeywordReport(matches=["python"], missing=["python"], score=50)


if __name__ == "__main__":
    unittest.main()
