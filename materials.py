"""
Thermoelectric material candidates.

- Material record as produced by the AI generator (static dataset or live feed)
- Synthesis complexity / lab status categories
- Record parsing from CSV rows or JSON objects (camelCase or snake_case keys)

Materials are read-only inputs to the prioritization engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class SynthesisComplexity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class MaterialStatus(str, Enum):
    QUEUED = "Queued"
    IN_SYNTHESIS = "In Synthesis"
    TESTING = "Testing"
    VALIDATED = "Validated"
    REJECTED = "Rejected"


@dataclass(frozen=True)
class Material:
    id: str
    name: str
    formula: str
    predicted_zt: float
    estimated_cost: float
    synthesis_complexity: SynthesisComplexity
    toxicity_score: float
    availability_score: float
    novelty_score: float
    commercial_viability: float
    estimated_synthesis_time: float
    status: MaterialStatus
    generated_date: str
    thermal_conductivity: float = 0.0
    electrical_conductivity: float = 0.0
    lab_partner: Optional[str] = None
    notes: Optional[str] = None


# ----------------------------
# Record parsing
# ----------------------------

# snake_case field -> camelCase key used by the dashboard dataset
FIELD_ALIASES: Dict[str, str] = {
    "predicted_zt": "predictedZT",
    "estimated_cost": "estimatedCost",
    "synthesis_complexity": "synthesisComplexity",
    "toxicity_score": "toxicityScore",
    "availability_score": "availabilityScore",
    "novelty_score": "noveltyScore",
    "commercial_viability": "commercialViability",
    "estimated_synthesis_time": "estimatedSynthesisTime",
    "thermal_conductivity": "thermalConductivity",
    "electrical_conductivity": "electricalConductivity",
    "generated_date": "generatedDate",
    "lab_partner": "labPartner",
}

REQUIRED_NUMBERS = (
    "predicted_zt",
    "estimated_cost",
    "toxicity_score",
    "availability_score",
    "novelty_score",
    "commercial_viability",
    "estimated_synthesis_time",
)


def _pick(record: Dict[str, Any], field: str) -> Any:
    if field in record:
        return record[field]
    return record.get(FIELD_ALIASES.get(field, field))


def _text(x: Any) -> str:
    if x is None:
        return ""
    return str(x).strip()


def _optional_text(x: Any) -> Optional[str]:
    s = _text(x)
    return s or None


def to_float(x: Any, field: str, default: Optional[float] = None) -> float:
    s = _text(x)
    if s == "":
        if default is None:
            raise ValueError(f"Missing value for '{field}'")
        return default
    try:
        return float(s)
    except ValueError:
        raise ValueError(f"Invalid number for '{field}': {x!r}") from None


def parse_complexity(value: Any) -> SynthesisComplexity:
    if isinstance(value, SynthesisComplexity):
        return value
    try:
        return SynthesisComplexity(_text(value))
    except ValueError:
        allowed = ", ".join(c.value for c in SynthesisComplexity)
        raise ValueError(f"Unknown synthesis complexity {value!r} (expected one of: {allowed})") from None


def parse_status(value: Any) -> MaterialStatus:
    if isinstance(value, MaterialStatus):
        return value
    try:
        return MaterialStatus(_text(value))
    except ValueError:
        allowed = ", ".join(s.value for s in MaterialStatus)
        raise ValueError(f"Unknown status {value!r} (expected one of: {allowed})") from None


def material_from_record(record: Dict[str, Any]) -> Material:
    """
    Build a Material from a CSV row or JSON object.

    Both `predictedZT` and `predicted_zt` spellings are accepted. Blank
    optional fields become None; blank required numbers raise ValueError
    naming the material id.
    """
    mid = _text(record.get("id"))
    if not mid:
        raise ValueError(f"Material record without id: {record!r}")

    try:
        numbers = {f: to_float(_pick(record, f), f) for f in REQUIRED_NUMBERS}
        return Material(
            id=mid,
            name=_text(record.get("name")) or mid,
            formula=_text(record.get("formula")),
            synthesis_complexity=parse_complexity(_pick(record, "synthesis_complexity")),
            status=parse_status(record.get("status")),
            generated_date=_text(_pick(record, "generated_date")),
            thermal_conductivity=to_float(_pick(record, "thermal_conductivity"), "thermal_conductivity", 0.0),
            electrical_conductivity=to_float(_pick(record, "electrical_conductivity"), "electrical_conductivity", 0.0),
            lab_partner=_optional_text(_pick(record, "lab_partner")),
            notes=_optional_text(record.get("notes")),
            **numbers,
        )
    except ValueError as e:
        raise ValueError(f"Material {mid}: {e}") from e


def material_to_record(m: Material) -> Dict[str, Any]:
    """camelCase dict, the shape the dashboard dataset uses."""
    return {
        "id": m.id,
        "name": m.name,
        "formula": m.formula,
        "predictedZT": m.predicted_zt,
        "estimatedCost": m.estimated_cost,
        "synthesisComplexity": m.synthesis_complexity.value,
        "toxicityScore": m.toxicity_score,
        "availabilityScore": m.availability_score,
        "noveltyScore": m.novelty_score,
        "commercialViability": m.commercial_viability,
        "estimatedSynthesisTime": m.estimated_synthesis_time,
        "thermalConductivity": m.thermal_conductivity,
        "electricalConductivity": m.electrical_conductivity,
        "status": m.status.value,
        "labPartner": m.lab_partner,
        "generatedDate": m.generated_date,
        "notes": m.notes,
    }
