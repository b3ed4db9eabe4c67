import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.terms import normalize_term, normalize_terms, term_key  # noqa: E402


class NormalizerTests(unittest.TestCase):
    def test_synonyms_collapse_to_canonical_spelling(self):
        self.assertEqual(normalize_term("ReactJS"), "react")
        self.assertEqual(normalize_term("Node"), "node.js")
        self.assertEqual(normalize_term("k8s"), "kubernetes")
        self.assertEqual(normalize_term("  Machine   Learning "), "machine learning")

    def test_version_and_file_suffixes_are_stripped(self):
        self.assertEqual(normalize_term("Python 3"), "python")
        self.assertEqual(normalize_term("vue.js"), "vue")

    def test_unknown_terms_get_default_casing(self):
        self.assertEqual(normalize_term("foobarbaz"), "foobarbaz")
        self.assertEqual(normalize_term("data pipelines"), "Data Pipelines")

    def test_empty_input_yields_empty_string(self):
        self.assertEqual(normalize_term(""), "")
        self.assertEqual(normalize_term(None), "")
        self.assertEqual(normalize_term("   "), "")

    def test_normalization_is_idempotent(self):
        samples = ["ReactJS", "Node", "k8s", "data pipelines", "Python 3", "CI/CD", "Postgres", "foobarbaz"]
        for sample in samples:
            once = normalize_term(sample)
            self.assertEqual(normalize_term(once), once, sample)

    def test_normalize_terms_skips_empty_values(self):
        self.assertEqual(normalize_terms(["js", "", "golang"]), ["javascript", "go"])

    def test_term_key_is_case_insensitive(self):
        self.assertEqual(term_key("Data Pipelines"), term_key("data pipelines"))


if __name__ == "__main__":
    unittest.main()
