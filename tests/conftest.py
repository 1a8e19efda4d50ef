"""
Shared test fixtures for the prioritization engine.

`make_material` builds a Material with sensible defaults so each test only
spells out the properties it cares about.
"""

from dataclasses import replace

import pytest

from materials import Material, MaterialStatus, SynthesisComplexity


BASE_MATERIAL = Material(
    id="MAT-000",
    name="Reference Candidate",
    formula="Bi2Te3",
    predicted_zt=1.0,
    estimated_cost=1000,
    synthesis_complexity=SynthesisComplexity.MEDIUM,
    toxicity_score=5,
    availability_score=5,
    novelty_score=5,
    commercial_viability=5,
    estimated_synthesis_time=15,
    status=MaterialStatus.QUEUED,
    generated_date="2025-01-01",
)


@pytest.fixture
def make_material():
    def _make(**overrides):
        return replace(BASE_MATERIAL, **overrides)

    return _make


@pytest.fixture
def tin_selenide(make_material):
    """The worked example: scores 7.52 with the default weights."""
    return make_material(
        id="MAT-001",
        name="Doped Tin Selenide",
        formula="SnSe",
        predicted_zt=2.1,
        estimated_cost=1200,
        synthesis_complexity=SynthesisComplexity.LOW,
        toxicity_score=3,
        availability_score=7,
        novelty_score=8,
        commercial_viability=6,
        estimated_synthesis_time=10,
    )


@pytest.fixture
def mixed_pool(make_material):
    """Five materials across statuses with clearly separated scores."""
    return [
        make_material(id="A", predicted_zt=0.5, status=MaterialStatus.QUEUED),
        make_material(id="B", predicted_zt=2.8, status=MaterialStatus.VALIDATED),
        make_material(id="C", predicted_zt=2.4, status=MaterialStatus.QUEUED),
        make_material(id="D", predicted_zt=1.6, status=MaterialStatus.REJECTED),
        make_material(id="E", predicted_zt=1.2, status=MaterialStatus.QUEUED),
    ]


@pytest.fixture
def sample_csv_row():
    return {
        "id": "MAT-042",
        "name": "Copper Selenide",
        "formula": "Cu2Se",
        "predictedZT": "1.8",
        "estimatedCost": "600",
        "synthesisComplexity": "Low",
        "toxicityScore": "4",
        "availabilityScore": "8",
        "noveltyScore": "5",
        "commercialViability": "6",
        "estimatedSynthesisTime": "8",
        "thermalConductivity": "0.6",
        "electricalConductivity": "7.0e4",
        "status": "Testing",
        "labPartner": "Imperial",
        "generatedDate": "2025-01-11",
        "notes": "",
    }
