from .base import Issue, RuleWarning, ScoringContext, ScoringRule, SubScoreResult, evaluate_texts
from .formatting import FormattingComplianceRule
from .impact import ImpactMetricsRule
from .keyword import KeywordMatchRule, detect_stuffing
from .readability import ReadabilityRule
from .skills import SkillAlignmentRule

RULE_REGISTRY: list[ScoringRule] = [
    KeywordMatchRule(),
    SkillAlignmentRule(),
    FormattingComplianceRule(),
    ImpactMetricsRule(),
    ReadabilityRule(),
]

__all__ = [
    "Issue",
    "RuleWarning",
    "ScoringContext",
    "ScoringRule",
    "SubScoreResult",
    "evaluate_texts",
    "detect_stuffing",
    "KeywordMatchRule",
    "SkillAlignmentRule",
    "FormattingComplianceRule",
    "ImpactMetricsRule",
    "ReadabilityRule",
    "RULE_REGISTRY",
]
