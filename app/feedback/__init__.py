from .engine import FeedbackEngine, by_category, by_severity, feedback, get_default_feedback_engine

__all__ = ["FeedbackEngine", "feedback", "by_category", "by_severity", "get_default_feedback_engine"]
