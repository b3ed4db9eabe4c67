import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import app.core.config as config_package  # noqa: E402
from app.core.config.scoring import _DEFAULT_SCORING_CONFIG_PATH, get_scoring_config, get_scoring_value  # noqa: E402
from app.scoring.weights import ScoringWeights, weight_justification  # noqa: E402


class ScoringConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("weights.keyword_match"), 0.35)
        self.assertEqual(get_scoring_value("missing.path", "fallback"), "fallback")
        self.assertEqual(get_scoring_value("", "fallback"), "fallback")

    def test_default_config_ships_inside_package(self):
        package_dir = Path(config_package.__file__).resolve().parent
        self.assertEqual(_DEFAULT_SCORING_CONFIG_PATH.parent, package_dir)
        self.assertTrue(_DEFAULT_SCORING_CONFIG_PATH.is_file())

    def test_default_weights_sum_to_one(self):
        weights = ScoringWeights.from_config()
        self.assertAlmostEqual(sum(weights.as_dict().values()), 1.0, places=6)
        self.assertEqual(
            weights.as_dict(),
            {
                "keyword_match": 0.35,
                "skill_alignment": 0.25,
                "formatting": 0.20,
                "impact_metrics": 0.10,
                "readability": 0.10,
            },
        )

    def test_weight_justification_lists_every_category(self):
        justification = weight_justification()
        self.assertEqual(justification["keyword_match"]["percentage"], 35.0)
        for item in justification.values():
            self.assertTrue(item["justification"])


if __name__ == "__main__":
    unittest.main()
