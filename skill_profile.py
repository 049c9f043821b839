"""
Skill Profile Aggregator

Turns the ChallengeResult ledger into one score per skill dimension.

Aggregation is two-level: each result first collapses to the mean of its own
criteria, then a dimension's score is the mean of those result means. A
dimension without results scores 0, which hosts show as "no evidence yet".
"""
from typing import Dict, Iterable, List

from pydantic import BaseModel, Field

from scenes import SkillDimension, icon_glyph
from state import ChallengeResult
from utils import round_half_up

NO_EVIDENCE_LABEL = "no evidence yet"


class DimensionScore(BaseModel):
    score: float = 0.0
    evidence_count: int = 0
    evidence: List[str] = Field(default_factory=list)

    @property
    def has_evidence(self) -> bool:
        return self.evidence_count > 0


SkillProfile = Dict[str, DimensionScore]


def calculate_skill_profile(
    results: Iterable[ChallengeResult],
    dimensions: Iterable[SkillDimension],
) -> SkillProfile:
    """Recompute the full profile from the ledger. Pure and idempotent."""
    results = list(results)
    profile: SkillProfile = {}

    for dimension in dimensions:
        dim_results = [r for r in results if r.dimension == dimension.id and r.scores]
        if not dim_results:
            profile[dimension.id] = DimensionScore()
            continue

        avg_score = sum(r.mean_score() for r in dim_results) / len(dim_results)
        profile[dimension.id] = DimensionScore(
            score=round_half_up(avg_score, 1),
            evidence_count=len(dim_results),
            evidence=[r.feedback or "Completed challenge" for r in dim_results],
        )

    return profile


def total_evidence(profile: SkillProfile) -> int:
    """Number of results behind the profile, counting only dimensions with evidence."""
    return sum(entry.evidence_count for entry in profile.values() if entry.has_evidence)


def format_dimension_score(entry: DimensionScore) -> str:
    if not entry.has_evidence:
        return NO_EVIDENCE_LABEL
    return f"{entry.score:.1f}"


def get_radar_data(profile: SkillProfile, dimensions: Iterable[SkillDimension]) -> List[Dict]:
    """Chart-ready points on a 0-5 axis, one per dimension."""
    return [
        {
            "dimension": dimension.title.split(" ")[0],
            "score": profile.get(dimension.id, DimensionScore()).score,
            "full_mark": 5,
        }
        for dimension in dimensions
    ]


def profile_summary_lines(profile: SkillProfile, dimensions: Iterable[SkillDimension]) -> List[str]:
    """One text line per dimension, for terminal hosts."""
    lines = []
    for dimension in dimensions:
        entry = profile.get(dimension.id, DimensionScore())
        lines.append(f"{icon_glyph(dimension.icon)} {dimension.title:<18} {format_dimension_score(entry)}")
    return lines


def profile_to_dict(profile: SkillProfile) -> Dict[str, Dict]:
    return {dim_id: entry.model_dump() for dim_id, entry in profile.items()}
