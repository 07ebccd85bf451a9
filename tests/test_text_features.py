import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_scan.features import (  # noqa: E402
    build_text_features,
    count_bullets,
    find_section_span,
    has_phone,
    is_bullet_like,
    strip_bullet_prefix,
)
from ats_scan.services.format_scorer import score_format  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


class TextFeaturesTests(unittest.TestCase):
    def test_counts_every_bullet_glyph_occurrence(self):
        self.assertEqual(count_bullets("• one · two - three"), 3)
        self.assertEqual(count_bullets("no glyphs here"), 0)

    def test_phone_accepts_dash_dot_and_plain_separators(self):
        self.assertTrue(has_phone("call 555-123-4567"))
        self.assertTrue(has_phone("call 555.123.4567"))
        self.assertTrue(has_phone("call 5551234567"))
        self.assertFalse(has_phone("call 555 12 34"))

    def test_sections_found_uses_lowercase_substrings(self):
        features = build_text_features("Professional SUMMARY\nWork Experience\nSkills")
        self.assertEqual(features.sections_found, {"summary", "experience", "skills"})

    def test_bullet_helpers(self):
        self.assertTrue(is_bullet_like("• Built a thing"))
        self.assertTrue(is_bullet_like("2. Shipped a thing"))
        self.assertFalse(is_bullet_like("1.5M users served"))
        self.assertEqual(strip_bullet_prefix("- Built a thing"), "Built a thing")

    def test_section_span_stops_at_next_heading(self):
        lines = ["Summary", "text", "Experience", "Engineer at Acme", "Education", "BSc"]
        span = find_section_span(lines, ("experience",), ("education", "skills"))
        self.assertIsNotNone(span)
        self.assertEqual((span.start, span.end), (3, 4))
        self.assertIn(3, span)
        self.assertNotIn(4, span)


class FormatScorerTests(unittest.TestCase):
    def test_complete_resume_scores_full_marks(self):
        text = (FIXTURES / "resume_full.txt").read_text(encoding="utf-8")
        report = score_format(text)
        self.assertEqual(report.score, 100)
        self.assertEqual(report.issues, [])
        self.assertEqual(report.suggestions, [])

    def test_sparse_resume_accumulates_every_deduction(self):
        text = (FIXTURES / "resume_short.txt").read_text(encoding="utf-8")
        report = score_format(text)
        self.assertEqual(report.score, 100 - 20 - 15 - 10 - 10 - 15)
        self.assertEqual(
            report.issues,
            [
                "Missing essential sections",
                "Few bullet points detected",
                "No email address found",
                "No phone number found",
                "Resume appears too short",
            ],
        )
        self.assertEqual(len(report.suggestions), len(report.issues))

    def test_long_resume_is_flagged(self):
        body = "Experience Education Skills Summary jane@example.com 555-123-4567 • • • • • "
        report = score_format(body + " word" * 900)
        self.assertEqual(report.score, 90)
        self.assertEqual(report.issues, ["Resume may be too long"])
        self.assertEqual(report.suggestions, ["Consider condensing to 1-2 pages"])

    def test_same_text_gives_same_report(self):
        text = (FIXTURES / "resume_short.txt").read_text(encoding="utf-8")
        self.assertEqual(score_format(text), score_format(text))

    def test_empty_text_takes_every_deduction(self):
        self.assertEqual(score_format("").score, 30)


if __name__ == "__main__":
    unittest.main()
