import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_scan.core.scoring import get_scoring_config, get_scoring_value  # noqa: E402


class ScoringConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("aggregation.with_job.weights.keyword"), 0.40)
        self.assertEqual(get_scoring_value("keywords.no_candidates_score"), 30)

    def test_aggregation_weights_sum_to_one(self):
        for mode in ("no_job", "with_job"):
            weights = get_scoring_value(f"aggregation.{mode}.weights")
            self.assertAlmostEqual(sum(weights.values()), 1.0)

    def test_missing_path_returns_default(self):
        self.assertEqual(get_scoring_value("aggregation.unknown.weight", 7), 7)
        self.assertIsNone(get_scoring_value(""))
        self.assertEqual(get_scoring_value("keywords.max_candidates.nested", "x"), "x")


if __name__ == "__main__":
    unittest.main()
