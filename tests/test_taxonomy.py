import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_scan.taxonomy import get_default_taxonomy_provider  # noqa: E402
from ats_scan.taxonomy.local_taxonomy import LocalTaxonomy  # noqa: E402


class TaxonomyTests(unittest.TestCase):
    def test_variant_normalization_resolves_canonical_skill(self):
        taxonomy = LocalTaxonomy()
        normalized, canonical = taxonomy.normalize_skill("  K8s ")
        self.assertEqual(normalized, "k8s")
        self.assertEqual(canonical, "kubernetes")
        self.assertEqual(taxonomy.normalize_skill("AWS")[1], "amazon web services")
        self.assertIsNone(taxonomy.normalize_skill("basket weaving")[1])

    def test_surface_forms_start_with_canonical_name(self):
        taxonomy = LocalTaxonomy()
        self.assertEqual(taxonomy.surface_forms("React"), ("react", "reactjs", "react.js"))
        self.assertEqual(taxonomy.surface_forms("unknown"), ("unknown",))

    def test_category_markers_respect_word_boundaries(self):
        taxonomy = LocalTaxonomy()
        self.assertIn("language", taxonomy.categories())
        self.assertTrue(taxonomy.in_category("Python", "language"))
        self.assertTrue(taxonomy.in_category("Django REST Framework", "framework"))
        self.assertFalse(taxonomy.in_category("Django", "language"))
        self.assertFalse(taxonomy.in_category("Python", "no-such-category"))

    def test_default_provider_is_cached(self):
        self.assertIs(get_default_taxonomy_provider(), get_default_taxonomy_provider())


if __name__ == "__main__":
    unittest.main()
