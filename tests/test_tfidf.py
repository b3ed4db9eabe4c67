import math
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.semantic.tfidf import (  # noqa: E402
    build_vocabulary,
    cosine_similarity,
    document_similarity,
    inverse_document_frequencies,
    term_frequencies,
    tfidf_vectors,
    top_terms,
)


class TfidfTests(unittest.TestCase):
    def test_vocabulary_is_union_in_first_seen_order(self):
        self.assertEqual(build_vocabulary(["b", "a"], ["a", "c"]), ["b", "a", "c"])

    def test_term_frequencies(self):
        self.assertEqual(term_frequencies(["a", "a", "b", "c"]), {"a": 0.5, "b": 0.25, "c": 0.25})
        self.assertEqual(term_frequencies([]), {})

    def test_smoothed_idf_keeps_shared_terms_positive(self):
        idf = inverse_document_frequencies([["a", "b"], ["a"]], ["a", "b"])
        self.assertAlmostEqual(idf["a"], 1.0)
        self.assertAlmostEqual(idf["b"], math.log(3 / 2) + 1)

    def test_vectors_share_vocabulary_dimension(self):
        left, right = tfidf_vectors(["python", "django"], ["python", "flask"])
        self.assertEqual(set(left), {"python", "django", "flask"})
        self.assertEqual(set(left), set(right))
        self.assertEqual(left["flask"], 0.0)

    def test_similarity_bounds(self):
        self.assertAlmostEqual(document_similarity(["python", "sql"], ["python", "sql"]), 1.0)
        self.assertEqual(document_similarity(["python"], ["golang"]), 0.0)
        self.assertEqual(document_similarity([], ["python"]), 0.0)
        self.assertEqual(cosine_similarity({}, {}), 0.0)

    def test_partial_overlap_is_between_zero_and_one(self):
        similarity = document_similarity(["python", "django", "sql"], ["python", "flask"])
        self.assertGreater(similarity, 0.0)
        self.assertLess(similarity, 1.0)

    def test_top_terms_prefers_distinctive_terms(self):
        ranked = top_terms(["python", "python", "kafka", "sql"], ["sql"], limit=2)
        self.assertEqual([term for term, _ in ranked], ["python", "kafka"])
        self.assertEqual(top_terms([], ["sql"]), [])


if __name__ == "__main__":
    unittest.main()
