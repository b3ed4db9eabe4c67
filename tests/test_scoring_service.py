import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.schemas.messages import ScoringMessage  # noqa: E402
from app.schemas.scoring import KeywordsRequest  # noqa: E402
from app.scoring.engine import get_default_engine  # noqa: E402
from app.services.scoring_service import (  # noqa: E402
    PerformanceTracker,
    clear_cache,
    extract_keywords,
    handle_message,
)

RESUME = """Jane Doe
jane@example.com
(555) 123-4567

Experience
- Worked on Python services
- Increased throughput by 30%

Skills
Python, Django, Docker
"""
JOB = "Python developer with Django, Docker and Kubernetes experience"


def message(message_type, payload=None, request_id="req-1"):
    return ScoringMessage(type=message_type, request_id=request_id, payload=payload or {})


class MessageServiceTests(unittest.TestCase):
    def test_calculate_score(self):
        result = handle_message(message("CALCULATE_SCORE", {"resume_text": RESUME, "job_description": JOB}))
        self.assertEqual(result.type, "SCORE_CALCULATED")
        self.assertEqual(result.request_id, "req-1")
        self.assertIsNone(result.error)
        self.assertGreater(result.payload["overall_score"], 0)
        self.assertEqual(len(result.payload["categories"]), 5)

    def test_repeated_score_is_served_from_cache(self):
        if get_default_engine().cache is None:
            self.skipTest("score cache disabled")
        clear_cache()
        payload = {"resume_text": RESUME + "\nProjects", "job_description": JOB}
        first = handle_message(message("CALCULATE_SCORE", payload))
        second = handle_message(message("CALCULATE_SCORE", payload))
        self.assertFalse(first.performance.cached)
        self.assertTrue(second.performance.cached)
        self.assertEqual(first.payload["overall_score"], second.payload["overall_score"])

    def test_generate_feedback_filtered_by_category(self):
        payload = {"resume_text": RESUME, "job_description": JOB, "category": "action_verbs"}
        result = handle_message(message("generate_feedback", payload))
        self.assertEqual(result.type, "FEEDBACK_GENERATED")
        categories = {item["category"] for item in result.payload["suggestions"]}
        self.assertEqual(categories, {"action_verbs"})

    def test_extract_keywords(self):
        payload = {"text": "Python Django Python", "compare_to": "Python Kubernetes", "max_keywords": 5}
        result = handle_message(message("EXTRACT_KEYWORDS", payload))
        self.assertEqual(result.type, "KEYWORDS_EXTRACTED")
        self.assertEqual(result.payload["keywords"][0], {"term": "python", "frequency": 2, "category": "hard"})
        self.assertIn("python", result.payload["matched"])
        self.assertIn("kubernetes", result.payload["missing"])

    def test_get_performance_and_clear_cache(self):
        handle_message(message("CALCULATE_SCORE", {"resume_text": RESUME, "job_description": JOB + " AWS"}))
        metrics = handle_message(message("GET_PERFORMANCE"))
        self.assertEqual(metrics.type, "PERFORMANCE_METRICS")
        for key in ("total_calculations", "average_duration_ms", "cache_enabled", "cache_size", "cache_hits"):
            self.assertIn(key, metrics.payload)
        cleared = handle_message(message("CLEAR_CACHE", request_id="req-clear"))
        self.assertEqual(cleared.type, "CACHE_CLEARED")
        self.assertEqual(cleared.request_id, "req-clear")
        self.assertIn("cleared_entries", cleared.payload)

    def test_unknown_type_returns_error_envelope(self):
        with self.assertLogs("app.services.scoring_service", level="WARNING"):
            result = handle_message(message("MATCH_EVERYTHING", request_id="req-unknown"))
        self.assertEqual(result.type, "ERROR")
        self.assertEqual(result.request_id, "req-unknown")
        self.assertEqual(result.error.code, "invalid_message")
        self.assertIn("Unknown message type", result.error.message)

    def test_invalid_payload_returns_error_envelope(self):
        result = handle_message(message("EXTRACT_KEYWORDS", {"text": "python", "max_keywords": 0}))
        self.assertEqual(result.type, "ERROR")
        self.assertEqual(result.error.code, "invalid_message")
        self.assertIn("validation error", result.error.message)

    def test_keywords_proximity_and_weighting(self):
        response = extract_keywords(KeywordsRequest(text="python django python", include_proximity=True))
        self.assertLessEqual(len(response.top_weighted), 10)
        self.assertEqual(response.top_weighted[0][0], "python")
        self.assertEqual(response.proximity["python"]["django"], {"distance": 1, "occurrences": 2})
        self.assertIsNone(response.matched)


class PerformanceTrackerTests(unittest.TestCase):
    def test_snapshot_statistics(self):
        tracker = PerformanceTracker()
        self.assertEqual(tracker.snapshot()["average_duration_ms"], 0.0)
        tracker.record(10.0)
        tracker.record(30.0)
        snapshot = tracker.snapshot()
        self.assertEqual(snapshot["total_calculations"], 2)
        self.assertEqual(snapshot["average_duration_ms"], 20.0)
        self.assertEqual(snapshot["min_duration_ms"], 10.0)
        self.assertEqual(snapshot["max_duration_ms"], 30.0)
        tracker.reset()
        self.assertEqual(tracker.snapshot()["total_calculations"], 0)


if __name__ == "__main__":
    unittest.main()
