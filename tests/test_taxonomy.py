import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.taxonomy import get_default_taxonomy_provider  # noqa: E402
from app.taxonomy.local_taxonomy import LocalTaxonomy  # noqa: E402


class TaxonomyTests(unittest.TestCase):
    def setUp(self):
        self.taxonomy = LocalTaxonomy()

    def test_synonym_lookup_resolves_canonical_term(self):
        self.assertEqual(self.taxonomy.canonical_for("Postgres"), "postgresql")
        self.assertEqual(self.taxonomy.canonical_for("postgresql"), "postgresql")
        self.assertIsNone(self.taxonomy.canonical_for("definitely-not-a-term"))

    def test_category_dictionaries_and_patterns_load(self):
        self.assertEqual(self.taxonomy.category_for("Python"), "hard")
        self.assertEqual(self.taxonomy.category_for("docker"), "tool")
        self.assertEqual(self.taxonomy.category_for("leadership"), "soft")
        self.assertTrue(self.taxonomy.category_patterns())

    def test_stopword_sets(self):
        self.assertIn("the", self.taxonomy.stopwords(include_technical=False))
        self.assertNotIn("experience", self.taxonomy.stopwords(include_technical=False))
        self.assertIn("experience", self.taxonomy.stopwords())

    def test_verb_and_overused_tables_are_read_only(self):
        self.assertIn("strong", self.taxonomy.action_verbs())
        self.assertIn("responsible", self.taxonomy.overused_words())
        with self.assertRaises(TypeError):
            self.taxonomy.overused_words()["new"] = {}  # type: ignore[index]

    def test_default_provider_is_shared(self):
        self.assertIs(get_default_taxonomy_provider(), get_default_taxonomy_provider())


if __name__ == "__main__":
    unittest.main()
