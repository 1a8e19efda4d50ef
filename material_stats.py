"""
Dashboard helpers on top of the prioritization engine.

- Pipeline statistics (status counts, average ZT / cost)
- Priority bands and synthesis recommendation
- Flat rows / DataFrame for tables, charts and CSV export
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from materials import Material, MaterialStatus
from prioritization import CRITERIA, PriorityWeights, ScoredMaterial, calculate_roi, round_half_up


def calculate_stats(materials: Sequence[Material]) -> Dict[str, Any]:
    counts = {s: 0 for s in MaterialStatus}
    for m in materials:
        counts[m.status] += 1

    total = len(materials)
    avg_zt = sum(m.predicted_zt for m in materials) / total if total else 0.0
    avg_cost = sum(m.estimated_cost for m in materials) / total if total else 0.0

    return {
        "queued": counts[MaterialStatus.QUEUED],
        "in_synthesis": counts[MaterialStatus.IN_SYNTHESIS],
        "testing": counts[MaterialStatus.TESTING],
        "validated": counts[MaterialStatus.VALIDATED],
        "rejected": counts[MaterialStatus.REJECTED],
        "total": total,
        "avg_zt": round_half_up(avg_zt),
        "avg_cost": round_half_up(avg_cost, 0),
    }


def priority_band(score: float) -> str:
    """Chart / table colour band."""
    if score >= 8:
        return "excellent"
    if score >= 6:
        return "good"
    if score >= 4:
        return "moderate"
    return "low"


RECOMMENDATIONS = {
    "high": (
        "High Priority - Recommended for Synthesis",
        "This material shows strong potential across multiple criteria and should be prioritized for lab synthesis.",
    ),
    "medium": (
        "Medium Priority - Consider for Next Round",
        "This material has moderate potential. Consider synthesizing after higher-priority candidates.",
    ),
    "low": (
        "Low Priority - Review Criteria",
        "This material may require further optimization or should be deprioritized in favor of stronger candidates.",
    ),
}


def recommendation(score: float) -> Dict[str, str]:
    level = "high" if score >= 7 else "medium" if score >= 5 else "low"
    headline, advice = RECOMMENDATIONS[level]
    return {"level": level, "headline": headline, "advice": advice}


def weighted_contributions(scored: ScoredMaterial, weights: PriorityWeights) -> Dict[str, float]:
    return scored.breakdown.weighted(weights)


def score_summary(scored: Sequence[ScoredMaterial]) -> Dict[str, Optional[float]]:
    if not scored:
        return {"highest": None, "average": None, "count": 0}
    scores = [s.priority_score for s in scored]
    return {
        "highest": max(scores),
        "average": round_half_up(sum(scores) / len(scores)),
        "count": len(scores),
    }


def filter_by_status(scored: Iterable[ScoredMaterial], status: str = "all") -> List[ScoredMaterial]:
    if status == "all":
        return list(scored)
    wanted = MaterialStatus(status)
    return [s for s in scored if s.status == wanted]


def format_currency(amount: float) -> str:
    return f"£{amount:,.0f}"


def _parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))


def format_date(value: str) -> str:
    """'2025-01-14' -> '14 Jan 2025'. Unparseable input comes back unchanged."""
    try:
        d = _parse_date(value)
    except ValueError:
        return value
    return f"{d.day} {d:%b %Y}"


def format_relative_time(value: str, now: Optional[datetime] = None) -> str:
    try:
        d = _parse_date(value)
    except ValueError:
        return value
    if now is None:
        now = datetime.now(d.tzinfo)
    elif (now.tzinfo is None) != (d.tzinfo is None):
        d = d.replace(tzinfo=now.tzinfo)

    hours = int((now - d).total_seconds() // 3600)
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return format_date(value)


# ----------------------------
# Tables
# ----------------------------

def scored_rows(scored: Iterable[ScoredMaterial]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for s in scored:
        row: Dict[str, Any] = {
            "rank": s.rank if s.rank is not None else "",
            "id": s.id,
            "name": s.name,
            "formula": s.formula,
            "priority_score": s.priority_score,
            "band": priority_band(s.priority_score),
            "roi": calculate_roi(s.material),
            "status": s.status.value,
            "lab_partner": s.lab_partner or "",
            "predicted_zt": s.predicted_zt,
            "estimated_cost": s.estimated_cost,
            "synthesis_complexity": s.synthesis_complexity.value,
            "estimated_synthesis_time": s.estimated_synthesis_time,
        }
        for name in CRITERIA:
            row[f"{name}_score"] = round_half_up(getattr(s.breakdown, name))
        out.append(row)
    return out


def scored_frame(scored: Iterable[ScoredMaterial]) -> pd.DataFrame:
    df = pd.DataFrame(scored_rows(scored))
    if not df.empty:
        df["priority_score"] = pd.to_numeric(df["priority_score"], errors="coerce").fillna(0.0)
    return df


def chart_frame(scored: Iterable[ScoredMaterial]) -> pd.DataFrame:
    """Priority scores keyed by material id (formulas are not unique)."""
    rows = [{"id": s.id, "formula": s.formula, "priority_score": s.priority_score} for s in scored]
    df = pd.DataFrame(rows, columns=["id", "formula", "priority_score"])
    return df.set_index("id")
