import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.scoring.rules import ImpactMetricsRule, evaluate_texts  # noqa: E402
from app.scoring.rules.impact import find_metrics, step_score  # noqa: E402


class ImpactMetricsRuleTests(unittest.TestCase):
    def setUp(self):
        self.rule = ImpactMetricsRule()

    def test_metrics_and_statement_bonus(self):
        text = "Increased performance by 40%. Reduced costs by $50,000. Led team of 10 developers."
        result = evaluate_texts(self.rule, text)
        self.assertAlmostEqual(result.score, 0.62, places=4)
        self.assertEqual(result.details["metric_types"], ["currency", "percentage", "scale"])
        self.assertEqual(result.details["statement_count"], 1)
        self.assertEqual(result.warnings, ())

    def test_single_time_metric_warns(self):
        result = evaluate_texts(self.rule, "Reduced deployment time by 3 hours")
        self.assertAlmostEqual(result.score, 0.3, places=4)
        self.assertEqual(result.details["metric_types"], ["time"])
        self.assertEqual([warning.type for warning in result.warnings], ["few_metrics"])

    def test_no_metrics_scores_zero(self):
        result = evaluate_texts(self.rule, "Worked on many projects with colleagues")
        self.assertEqual(result.score, 0.0)
        self.assertEqual(result.issues[0].type, "no_metrics")

    def test_duplicate_metrics_counted_once(self):
        metrics = find_metrics("Grew revenue 20%. Cut churn 20%.")
        self.assertEqual(metrics, [{"type": "percentage", "text": "20%"}])

    def test_step_score_thresholds(self):
        self.assertEqual(step_score(0), 0.0)
        self.assertEqual(step_score(2), 30.0)
        self.assertEqual(step_score(5), 60.0)
        self.assertEqual(step_score(10), 85.0)
        self.assertEqual(step_score(11), 100.0)


if __name__ == "__main__":
    unittest.main()
