"""
Smart prioritization engine for thermoelectric material candidates.

Every raw property is mapped onto a 0-10 "higher is better" scale, the eight
normalized values are combined with user-adjustable weights into a single
priority score, and candidates are ranked by that score (highest first).

Weights are not required to sum to 1.0. The score simply tracks the weight
sum, which the dashboard surfaces as a "balanced / unbalanced" hint.

Ties keep their input order (stable sort).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Union

from materials import Material, MaterialStatus, SynthesisComplexity, parse_complexity

ZT_CEILING = 3.0
MAX_COST = 5000.0
MAX_SYNTHESIS_DAYS = 30.0
INDUSTRY_STANDARD_ZT = 1.0  # Bismuth telluride

CRITERIA = (
    "efficiency",
    "cost",
    "synthesis_complexity",
    "toxicity",
    "availability",
    "novelty",
    "commercial_viability",
    "synthesis_time",
)

CRITERIA_LABELS: Dict[str, str] = {
    "efficiency": "Efficiency (ZT)",
    "cost": "Cost",
    "synthesis_complexity": "Synthesis Complexity",
    "toxicity": "Toxicity",
    "availability": "Material Availability",
    "novelty": "Novelty",
    "commercial_viability": "Commercial Viability",
    "synthesis_time": "Synthesis Time",
}


@dataclass(frozen=True)
class PriorityWeights:
    efficiency: float = 0.25
    cost: float = 0.15
    synthesis_complexity: float = 0.15
    toxicity: float = 0.10
    availability: float = 0.10
    novelty: float = 0.10
    commercial_viability: float = 0.10
    synthesis_time: float = 0.05

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def total(self) -> float:
        return sum(getattr(self, name) for name in CRITERIA)

    def is_balanced(self, tolerance: float = 0.01) -> bool:
        """Display hint only; scoring never rescales the weights."""
        return abs(self.total() - 1.0) < tolerance


DEFAULT_WEIGHTS = PriorityWeights()


@dataclass(frozen=True)
class ScoreBreakdown:
    """Normalized (unrounded) 0-10 sub-scores behind a priority score."""

    efficiency: float
    cost: float
    synthesis_complexity: float
    toxicity: float
    availability: float
    novelty: float
    commercial_viability: float
    synthesis_time: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def weighted(self, weights: PriorityWeights) -> Dict[str, float]:
        return {name: getattr(self, name) * getattr(weights, name) for name in CRITERIA}


@dataclass(frozen=True)
class ScoredMaterial:
    """
    A Material plus its priority score and breakdown.

    Material fields are readable directly (`scored.predicted_zt`). `rank` is
    the 1-based position within the full ranked pool, or None when the
    material was scored on its own.
    """

    material: Material
    priority_score: float
    breakdown: ScoreBreakdown
    rank: Optional[int] = None

    def __getattr__(self, name: str) -> Any:
        if name == "material":
            raise AttributeError(name)
        return getattr(self.material, name)


# ----------------------------
# Rounding
# ----------------------------

def round_half_up(x: float, digits: int = 2) -> float:
    """Round like JS `toFixed`: ties on the exact binary value go away from zero."""
    return float(Decimal(x).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP))


# ----------------------------
# Normalization (0-10, higher = better)
# ----------------------------

def normalize_zt(zt: float) -> float:
    return min((zt / ZT_CEILING) * 10, 10)


def normalize_cost(cost: float) -> float:
    return max(0, 10 - (cost / MAX_COST) * 10)


_COMPLEXITY_SCORES: Dict[SynthesisComplexity, float] = {
    SynthesisComplexity.LOW: 10,
    SynthesisComplexity.MEDIUM: 6,
    SynthesisComplexity.HIGH: 3,
}


def normalize_complexity(complexity: Union[SynthesisComplexity, str]) -> float:
    # parse_complexity raises ValueError for anything outside Low/Medium/High
    return _COMPLEXITY_SCORES[parse_complexity(complexity)]


def normalize_toxicity(toxicity: float) -> float:
    # No clamping: inputs outside 0-10 are the caller's responsibility.
    return 10 - toxicity


def normalize_synthesis_time(days: float) -> float:
    return max(0, 10 - (days / MAX_SYNTHESIS_DAYS) * 10)


def normalize_material(material: Material) -> ScoreBreakdown:
    return ScoreBreakdown(
        efficiency=normalize_zt(material.predicted_zt),
        cost=normalize_cost(material.estimated_cost),
        synthesis_complexity=normalize_complexity(material.synthesis_complexity),
        toxicity=normalize_toxicity(material.toxicity_score),
        availability=material.availability_score,
        novelty=material.novelty_score,
        commercial_viability=material.commercial_viability,
        synthesis_time=normalize_synthesis_time(material.estimated_synthesis_time),
    )


# ----------------------------
# Scoring / ranking
# ----------------------------

def score_material(material: Material, weights: PriorityWeights = DEFAULT_WEIGHTS) -> ScoredMaterial:
    breakdown = normalize_material(material)
    total = 0.0
    for name in CRITERIA:
        total += getattr(breakdown, name) * getattr(weights, name)
    return ScoredMaterial(material=material, priority_score=round_half_up(total), breakdown=breakdown)


def rank_materials(
    materials: Iterable[Material],
    weights: PriorityWeights = DEFAULT_WEIGHTS,
) -> List[ScoredMaterial]:
    scored = [score_material(m, weights) for m in materials]
    ranked = sorted(scored, key=lambda s: s.priority_score, reverse=True)
    return [replace(s, rank=i) for i, s in enumerate(ranked, 1)]


def calculate_roi(material: Material) -> float:
    """ZT improvement over the industry standard per 1000 spent."""
    zt_improvement = max(0, material.predicted_zt - INDUSTRY_STANDARD_ZT)
    cost_in_thousands = material.estimated_cost / 1000
    if cost_in_thousands == 0:
        return 0.0
    return round_half_up(zt_improvement / cost_in_thousands)


def top_candidates(
    materials: Iterable[Material],
    count: int = 5,
    weights: Optional[PriorityWeights] = None,
) -> List[ScoredMaterial]:
    """Highest-ranked Queued materials; ranks refer to the whole pool."""
    ranked = rank_materials(materials, weights or DEFAULT_WEIGHTS)
    return [s for s in ranked if s.status == MaterialStatus.QUEUED][:count]


# ----------------------------
# Weights from text
# ----------------------------

_CAMEL_TO_CRITERION = {
    "synthesisComplexity": "synthesis_complexity",
    "commercialViability": "commercial_viability",
    "synthesisTime": "synthesis_time",
}


def parse_weights(weights_str: str, base: PriorityWeights = DEFAULT_WEIGHTS) -> PriorityWeights:
    """Parse: 'efficiency=0.4;cost=0.1' (unlisted criteria keep `base`)."""
    out: Dict[str, float] = {}
    known = {f.name for f in fields(PriorityWeights)}
    parts = [p.strip() for p in weights_str.split(";") if p.strip()]
    for p in parts:
        if "=" not in p:
            continue
        k, v = p.split("=", 1)
        k = k.strip()
        k = _CAMEL_TO_CRITERION.get(k, k)
        if k not in known:
            raise ValueError(f"Unknown weight '{k}' (expected one of: {', '.join(CRITERIA)})")
        out[k] = float(v.strip())
    return replace(base, **out)
