import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.rules import SkillAlignmentRule, evaluate_texts  # noqa: E402
from app.scoring.rules.skills import align_category  # noqa: E402


class SkillAlignmentRuleTests(unittest.TestCase):
    def setUp(self):
        self.rule = SkillAlignmentRule()

    def test_identical_skill_sets_align_hard_skills(self):
        text = "React, JavaScript, Node.js, Python"
        result = evaluate_texts(self.rule, text, text)
        self.assertEqual(result.details["hard"]["ratio"], 1.0)
        self.assertEqual(result.details["core_coverage"], 1.0)
        self.assertEqual(result.details["completeness_bonus"], 5.0)
        self.assertEqual(result.issues, ())

    def test_identical_documents_across_categories_score_full(self):
        text = "Python, Docker, leadership"
        result = evaluate_texts(self.rule, text, text)
        for category in ("hard", "tool", "soft"):
            self.assertEqual(result.details[category]["ratio"], 1.0)
        self.assertEqual(result.score, 1.0)

    def test_category_weights_drive_score(self):
        result = evaluate_texts(self.rule, "Python", "Python, Docker, Kubernetes, leadership")
        self.assertAlmostEqual(result.score, 0.6, places=4)
        self.assertEqual(result.details["weights"], {"hard": 0.6, "tool": 0.3, "soft": 0.1})
        self.assertEqual(sorted(result.details["tool"]["missing"]), ["docker", "kubernetes"])
        self.assertEqual(result.issues, ())
        warning_types = [warning.type for warning in result.warnings]
        self.assertIn("missing_tools", warning_types)
        self.assertIn("missing_soft_skills", warning_types)

    def test_missing_hard_skills_is_high_severity_issue(self):
        result = evaluate_texts(self.rule, "Docker", "Python Java Docker")
        self.assertAlmostEqual(result.score, 0.3, places=4)
        self.assertEqual(len(result.issues), 1)
        self.assertEqual(result.issues[0].type, "missing_hard_skills")
        self.assertEqual(result.issues[0].severity, "high")

    def test_align_category_without_requirement_scores_zero(self):
        aligned = align_category({"python": "python"}, {})
        self.assertEqual(aligned["ratio"], 0.0)
        self.assertEqual(aligned["extra"], ["python"])
        self.assertEqual(align_category({}, {})["ratio"], 0.0)

    def test_requirement_without_skill_terms_scores_zero(self):
        result = evaluate_texts(self.rule, "!!! ???", "an ox is on it")
        self.assertEqual(result.score, 0.0)
        self.assertEqual(result.details["completeness_bonus"], 0.0)

    def test_candidate_without_terms_gets_no_free_categories(self):
        result = evaluate_texts(self.rule, "!!! ??? ...", "Python developer needed")
        self.assertEqual(result.score, 0.0)
        self.assertEqual(result.details["tool"]["ratio"], 0.0)
        self.assertEqual(result.details["soft"]["ratio"], 0.0)
        self.assertEqual(result.issues[0].type, "missing_hard_skills")

    def test_align_category_uses_jaccard_ratio(self):
        aligned = align_category({"python": "python", "go": "go"}, {"python": "python", "rust": "rust"})
        self.assertEqual(aligned["common"], ["python"])
        self.assertEqual(aligned["missing"], ["rust"])
        self.assertAlmostEqual(aligned["ratio"], 1 / 3, places=4)


if __name__ == "__main__":
    unittest.main()
