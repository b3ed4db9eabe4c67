import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.tokenizer import (  # noqa: E402
    candidate_terms,
    filter_stopwords,
    generate_ngrams,
    is_stopword,
    tokenize,
)


class TokenizerTests(unittest.TestCase):
    def test_tokenize_keeps_technical_punctuation(self):
        tokens = tokenize("I know Node.js, C++ and CI/CD.")
        self.assertEqual(tokens, ["know", "node.js", "c++", "and", "ci/cd"])

    def test_tokenize_keeps_leading_dot_for_dotnet(self):
        self.assertIn(".net", tokenize("Shipped .NET services"))

    def test_tokenize_drops_short_and_numeric_tokens(self):
        tokens = tokenize("Go in 2024 with 15 engineers")
        self.assertNotIn("go", tokens)
        self.assertNotIn("2024", tokens)
        self.assertIn("engineers", tokens)

    def test_tokenize_min_length_override(self):
        self.assertEqual(tokenize("go is fun", min_length=2), ["go", "is", "fun"])

    def test_tokenize_empty_input(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize(None), [])

    def test_stopword_filtering_general_and_technical(self):
        tokens = ["the", "python", "experience"]
        self.assertEqual(filter_stopwords(tokens), ["python"])
        self.assertEqual(filter_stopwords(tokens, include_technical=False), ["python", "experience"])
        self.assertTrue(is_stopword("The"))
        self.assertTrue(is_stopword("python", extra=["Python"]))

    def test_generate_ngrams_shortest_first(self):
        self.assertEqual(generate_ngrams(["alpha", "beta", "gamma"]), ["alpha beta", "beta gamma", "alpha beta gamma"])
        self.assertEqual(generate_ngrams(["alpha"]), [])

    def test_candidate_terms_appends_ngrams_after_unigrams(self):
        terms = candidate_terms("python django postgresql")
        self.assertEqual(terms[:3], ["python", "django", "postgresql"])
        self.assertIn("python django", terms)
        self.assertIn("python django postgresql", terms)
        self.assertEqual(candidate_terms("python django", include_ngrams=False), ["python", "django"])


if __name__ == "__main__":
    unittest.main()
