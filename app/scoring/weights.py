from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from app.core.config.scoring import get_scoring_value

_WEIGHT_TOLERANCE = 1e-6

WEIGHT_JUSTIFICATIONS: dict[str, str] = {
    "keyword_match": (
        "Keywords are the primary way ATS systems match resumes to job descriptions. "
        "High weight ensures relevant resumes are identified."
    ),
    "skill_alignment": (
        "Skills directly indicate candidate qualifications. Strong alignment shows fit for the role."
    ),
    "formatting": (
        "ATS systems must parse resumes correctly. Poor formatting can cause information loss or parsing errors."
    ),
    "impact_metrics": (
        "Quantifiable achievements demonstrate value and results. Recruiters and ATS systems value metrics."
    ),
    "readability": (
        "Readable resumes are easier for both ATS systems and humans to process. "
        "Appropriate length ensures completeness without overwhelming."
    ),
}


@dataclass(frozen=True)
class ScoringWeights:
    keyword_match: float = 0.35
    skill_alignment: float = 0.25
    formatting: float = 0.20
    impact_metrics: float = 0.10
    readability: float = 0.10

    def __post_init__(self) -> None:
        values = self.as_dict()
        negative = [name for name, value in values.items() if value < 0]
        if negative:
            raise ValueError(f"Scoring weights must be non-negative: {', '.join(negative)}")
        total = sum(values.values())
        if not math.isclose(total, 1.0, abs_tol=_WEIGHT_TOLERANCE):
            raise ValueError(f"Scoring weights must sum to 1.0, got {total:.6f}")

    @classmethod
    def from_config(cls) -> "ScoringWeights":
        configured = get_scoring_value("weights", None) or {}
        defaults = cls.__dataclass_fields__
        return cls(**{name: float(configured.get(name, defaults[name].default)) for name in defaults})

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    def get(self, name: str) -> float:
        return self.as_dict()[name]


def weight_justification(weights: ScoringWeights | None = None) -> dict[str, dict[str, float | str]]:
    active = weights or ScoringWeights.from_config()
    return {
        name: {
            "weight": value,
            "percentage": round(value * 100, 2),
            "justification": WEIGHT_JUSTIFICATIONS[name],
        }
        for name, value in active.as_dict().items()
    }
