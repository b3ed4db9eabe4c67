import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.rules import FormattingComplianceRule, evaluate_texts  # noqa: E402

CLEAN_RESUME = """Jane Doe
jane@example.com
(555) 123-4567

Experience
- Built APIs with Python
- Led database migrations

Education
- BSc Computer Science
"""


class FormattingComplianceRuleTests(unittest.TestCase):
    def setUp(self):
        self.rule = FormattingComplianceRule()

    def test_clean_resume_scores_full(self):
        result = evaluate_texts(self.rule, CLEAN_RESUME)
        self.assertEqual(result.score, 1.0)
        self.assertEqual(result.issues, ())
        self.assertTrue(result.details["has_email"])
        self.assertTrue(result.details["has_phone"])
        self.assertEqual(result.details["bullet_styles"], {"dash": 3})
        self.assertEqual(len(result.details["section_headers"]), 2)

    def test_missing_contact_info_is_penalized(self):
        text = CLEAN_RESUME.replace("jane@example.com\n", "").replace("(555) 123-4567\n", "")
        result = evaluate_texts(self.rule, text)
        self.assertAlmostEqual(result.score, 0.85, places=4)
        self.assertEqual([issue.type for issue in result.issues], ["contact_info"])
        self.assertEqual(result.issues[0].severity, "high")

    def test_phone_only_warns_about_email(self):
        text = CLEAN_RESUME.replace("jane@example.com\n", "")
        result = evaluate_texts(self.rule, text)
        self.assertEqual(result.score, 1.0)
        self.assertIn("No email address detected", [warning.message for warning in result.warnings])

    def test_mixed_bullets_and_unsupported_format(self):
        text = CLEAN_RESUME + "* Shipped a billing service\n"
        result = evaluate_texts(self.rule, text, metadata={"format": "rtf"})
        self.assertAlmostEqual(result.score, 0.77, places=4)
        self.assertEqual(
            sorted(issue.type for issue in result.issues),
            ["file_format", "inconsistent_bullets"],
        )
        self.assertEqual(result.details["format"], "rtf")

    def test_supported_format_is_not_penalized(self):
        result = evaluate_texts(self.rule, CLEAN_RESUME, metadata={"format": "PDF"})
        self.assertEqual(result.score, 1.0)

    def test_many_special_characters(self):
        text = CLEAN_RESUME + "Tools # $ % ^ & ~\n"
        result = evaluate_texts(self.rule, text)
        self.assertAlmostEqual(result.score, 0.9, places=4)
        self.assertEqual(result.issues[0].type, "special_characters")

    def test_limited_sections_warns(self):
        result = evaluate_texts(self.rule, "jane@example.com\n(555) 123-4567\nBuilt things")
        self.assertIn("section_structure", [warning.type for warning in result.warnings])


if __name__ == "__main__":
    unittest.main()
