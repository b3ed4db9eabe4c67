import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.rules import ReadabilityRule, evaluate_texts  # noqa: E402
from app.scoring.rules.readability import reading_ease  # noqa: E402


class ReadabilityRuleTests(unittest.TestCase):
    def setUp(self):
        self.rule = ReadabilityRule()

    def test_reading_ease_is_clamped(self):
        self.assertEqual(reading_ease(10, 2.5), 100.0)
        self.assertAlmostEqual(reading_ease(20, 5), 17.335, places=3)
        self.assertEqual(reading_ease(200, 10), 0.0)

    def test_very_short_text(self):
        result = evaluate_texts(self.rule, "Python developer.")
        self.assertAlmostEqual(result.score, 0.6, places=4)
        self.assertEqual(
            {issue.type for issue in result.issues},
            {"too_short", "low_reading_ease", "section_structure"},
        )

    def test_run_on_sentence_with_sections(self):
        text = "Experience\nEducation\n" + " ".join(["cat"] * 300) + "."
        result = evaluate_texts(self.rule, text)
        self.assertAlmostEqual(result.score, 0.85, places=4)
        self.assertEqual({issue.type for issue in result.issues}, {"long_sentences", "low_reading_ease"})
        self.assertEqual([warning.type for warning in result.warnings], ["short"])
        self.assertEqual(result.details["section_count"], 2)

    def test_empty_text_has_zero_reading_ease(self):
        result = evaluate_texts(self.rule, "")
        self.assertEqual(result.details["word_count"], 0)
        self.assertEqual(result.details["reading_ease"], 0.0)


if __name__ == "__main__":
    unittest.main()
