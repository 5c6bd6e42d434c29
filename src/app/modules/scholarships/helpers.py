"""
Scholarship match scoring.

Every open scholarship starts at BASE_SCORE; matching the student's country
and academic level adds to it. Scores are capped at 100.
"""

from dataclasses import dataclass, field
from datetime import date

from app.modules.scholarships.models import Scholarship

BASE_SCORE = 50
COUNTRY_BONUS = 30
LEVEL_BONUS = 20
MAX_SCORE = 100
MAX_MATCHES = 10


@dataclass
class ScholarshipMatch:
    scholarship: Scholarship
    score: int
    reasons: list[str] = field(default_factory=list)


def _same(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and a.strip().lower() == b.strip().lower()


def score_scholarship(
    scholarship: Scholarship,
    country: str | None,
    academic_level: str | None,
) -> ScholarshipMatch:
    score = BASE_SCORE
    reasons = []
    if _same(scholarship.country, country):
        score += COUNTRY_BONUS
        reasons.append("Country match")
    if _same(scholarship.level, academic_level):
        score += LEVEL_BONUS
        reasons.append("Academic level match")
    if scholarship.deadline:
        reasons.append(f"Deadline: {scholarship.deadline.isoformat()}")
    return ScholarshipMatch(scholarship=scholarship, score=min(score, MAX_SCORE), reasons=reasons)


def rank_matches(
    scholarships: list[Scholarship],
    country: str | None,
    academic_level: str | None,
    limit: int = MAX_MATCHES,
) -> list[ScholarshipMatch]:
    """Highest score first; ties go to the earliest deadline, open-ended last."""
    matches = [score_scholarship(s, country, academic_level) for s in scholarships]
    matches.sort(key=lambda m: (-m.score, m.scholarship.deadline or date.max))
    return matches[:limit]
