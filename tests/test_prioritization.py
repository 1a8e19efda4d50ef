"""
Unit tests for the prioritization engine (normalize, score, rank, ROI, top candidates).
"""
from dataclasses import replace

import pytest

from materials import MaterialStatus, SynthesisComplexity
from prioritization import (
    CRITERIA,
    DEFAULT_WEIGHTS,
    PriorityWeights,
    calculate_roi,
    normalize_complexity,
    normalize_cost,
    normalize_synthesis_time,
    normalize_toxicity,
    normalize_zt,
    parse_weights,
    rank_materials,
    round_half_up,
    score_material,
    top_candidates,
)


# =============================================================================
# NORMALIZATION
# =============================================================================

def test_normalize_zt_is_monotonic_and_saturates():
    values = [normalize_zt(zt / 10) for zt in range(0, 50)]
    assert values == sorted(values)
    assert normalize_zt(0) == 0
    assert normalize_zt(1.5) == pytest.approx(5.0)
    assert normalize_zt(3.0) == 10
    assert normalize_zt(4.2) == 10


def test_normalize_cost_inverts_and_floors_at_zero():
    assert normalize_cost(0) == 10
    assert normalize_cost(2500) == pytest.approx(5.0)
    assert normalize_cost(5000) == 0
    assert normalize_cost(12000) == 0


def test_normalize_complexity_lookup():
    assert normalize_complexity(SynthesisComplexity.LOW) == 10
    assert normalize_complexity(SynthesisComplexity.MEDIUM) == 6
    assert normalize_complexity(SynthesisComplexity.HIGH) == 3
    assert normalize_complexity("Medium") == 6


@pytest.mark.parametrize("bad", ["Extreme", "low", "", None])
def test_normalize_complexity_rejects_unknown_category(bad):
    with pytest.raises(ValueError, match="synthesis complexity"):
        normalize_complexity(bad)


def test_normalize_toxicity_is_not_clamped():
    assert normalize_toxicity(3) == 7
    assert normalize_toxicity(0) == 10
    # out-of-range input passes straight through
    assert normalize_toxicity(12) == -2


def test_normalize_synthesis_time():
    assert normalize_synthesis_time(0) == 10
    assert normalize_synthesis_time(15) == pytest.approx(5.0)
    assert normalize_synthesis_time(45) == 0


# =============================================================================
# SCORING
# =============================================================================

def test_worked_example_scores_7_52(tin_selenide):
    scored = score_material(tin_selenide, DEFAULT_WEIGHTS)

    b = scored.breakdown
    assert b.efficiency == pytest.approx(7.0)
    assert b.cost == pytest.approx(7.6)
    assert b.synthesis_complexity == 10
    assert b.toxicity == 7
    assert b.availability == 7
    assert b.novelty == 8
    assert b.commercial_viability == 6
    assert b.synthesis_time == pytest.approx(6.6667, abs=1e-4)

    assert scored.priority_score == 7.52


def test_score_defaults_to_default_weights(tin_selenide):
    assert score_material(tin_selenide) == score_material(tin_selenide, DEFAULT_WEIGHTS)


def test_score_is_idempotent_and_does_not_mutate(tin_selenide):
    before = replace(tin_selenide)
    first = score_material(tin_selenide)
    second = score_material(tin_selenide)
    assert first == second
    assert tin_selenide == before
    assert first.material is tin_selenide
    assert first.rank is None


def test_scored_material_exposes_material_fields(tin_selenide):
    scored = score_material(tin_selenide)
    assert scored.formula == "SnSe"
    assert scored.predicted_zt == 2.1
    assert scored.status == MaterialStatus.QUEUED


@pytest.mark.parametrize("criterion", CRITERIA)
def test_zero_weight_removes_criterion_influence(make_material, criterion):
    weights = replace(DEFAULT_WEIGHTS, **{criterion: 0.0})
    low = make_material(
        predicted_zt=0.0, estimated_cost=5000, synthesis_complexity=SynthesisComplexity.HIGH,
        toxicity_score=10, availability_score=0, novelty_score=0, commercial_viability=0,
        estimated_synthesis_time=30,
    )
    high = make_material(
        predicted_zt=3.0, estimated_cost=0, synthesis_complexity=SynthesisComplexity.LOW,
        toxicity_score=0, availability_score=10, novelty_score=10, commercial_viability=10,
        estimated_synthesis_time=0,
    )
    field = {
        "efficiency": "predicted_zt",
        "cost": "estimated_cost",
        "synthesis_complexity": "synthesis_complexity",
        "toxicity": "toxicity_score",
        "availability": "availability_score",
        "novelty": "novelty_score",
        "commercial_viability": "commercial_viability",
        "synthesis_time": "estimated_synthesis_time",
    }[criterion]
    # only the zero-weighted property differs
    variant = replace(low, **{field: getattr(high, field)})

    assert score_material(low, weights).priority_score == score_material(variant, weights).priority_score


def test_unbalanced_weights_scale_the_score(tin_selenide):
    doubled = PriorityWeights(**{k: v * 2 for k, v in DEFAULT_WEIGHTS.as_dict().items()})
    assert not doubled.is_balanced()
    assert score_material(tin_selenide, doubled).priority_score == pytest.approx(15.05, abs=0.01)


def test_weighted_contributions_sum_to_score(tin_selenide):
    scored = score_material(tin_selenide)
    contrib = scored.breakdown.weighted(DEFAULT_WEIGHTS)
    assert set(contrib) == set(CRITERIA)
    assert round(sum(contrib.values()), 2) == scored.priority_score


def test_default_weights_are_balanced():
    assert DEFAULT_WEIGHTS.total() == pytest.approx(1.0)
    assert DEFAULT_WEIGHTS.is_balanced()


# =============================================================================
# RANKING
# =============================================================================

def test_rank_is_sorted_descending(mixed_pool):
    ranked = rank_materials(mixed_pool)
    scores = [s.priority_score for s in ranked]
    assert scores == sorted(scores, reverse=True)
    assert [s.id for s in ranked] == ["B", "C", "D", "E", "A"]
    assert [s.rank for s in ranked] == [1, 2, 3, 4, 5]


def test_rank_keeps_input_order_for_ties(make_material):
    pool = [
        make_material(id="first"),
        make_material(id="top", predicted_zt=2.5),
        make_material(id="second"),
        make_material(id="third"),
    ]
    ranked = rank_materials(pool)
    assert [s.id for s in ranked] == ["top", "first", "second", "third"]


def test_rank_reacts_to_weights(make_material):
    cheap = make_material(id="cheap", predicted_zt=1.0, estimated_cost=100)
    efficient = make_material(id="efficient", predicted_zt=2.5, estimated_cost=4500)

    by_cost = PriorityWeights(efficiency=0.0, cost=1.0, synthesis_complexity=0, toxicity=0,
                              availability=0, novelty=0, commercial_viability=0, synthesis_time=0)
    by_zt = replace(by_cost, efficiency=1.0, cost=0.0)

    assert rank_materials([efficient, cheap], by_cost)[0].id == "cheap"
    assert rank_materials([cheap, efficient], by_zt)[0].id == "efficient"


def test_rank_empty():
    assert rank_materials([]) == []


# =============================================================================
# ROI
# =============================================================================

def test_roi_basic(tin_selenide):
    # (2.1 - 1.0) / 1.2
    assert calculate_roi(tin_selenide) == 0.92


@pytest.mark.parametrize("zt", [0.0, 0.8, 1.0])
def test_roi_zero_without_improvement(make_material, zt):
    assert calculate_roi(make_material(predicted_zt=zt, estimated_cost=500)) == 0


def test_roi_zero_cost_is_guarded(make_material):
    assert calculate_roi(make_material(predicted_zt=2.5, estimated_cost=0)) == 0


def test_roi_rounds_exact_halves_up(make_material):
    # 0.5 / 4 is exactly 0.125
    assert calculate_roi(make_material(predicted_zt=1.5, estimated_cost=4000)) == 0.13


def test_score_rounds_exact_halves_up(make_material):
    weights = PriorityWeights(**{**{name: 0.0 for name in CRITERIA}, "efficiency": 0.025})
    # normalized ZT 5.0 * 0.025 = 0.125
    assert score_material(make_material(predicted_zt=1.5), weights).priority_score == 0.13


@pytest.mark.parametrize(
    "value, digits, expected",
    [
        (0.125, 2, 0.13),
        (-0.125, 2, -0.13),
        (2.5, 0, 3.0),
        (7.5233, 2, 7.52),
        # 2.675 is stored just below the half
        (2.675, 2, 2.67),
    ],
)
def test_round_half_up(value, digits, expected):
    assert round_half_up(value, digits) == expected


# =============================================================================
# TOP CANDIDATES
# =============================================================================

def test_top_candidates_only_queued(mixed_pool):
    top = top_candidates(mixed_pool, 3)
    assert all(s.status == MaterialStatus.QUEUED for s in top)
    assert [s.id for s in top] == ["C", "E", "A"]


def test_top_candidates_keep_full_pool_rank(mixed_pool):
    top = top_candidates(mixed_pool, 2)
    assert [s.rank for s in top] == [2, 4]


def test_top_candidates_length(make_material, mixed_pool):
    assert len(top_candidates(mixed_pool, 3)) == 3
    assert len(top_candidates(mixed_pool)) == 3  # only three are Queued
    none_queued = [make_material(id="x", status=MaterialStatus.TESTING)]
    assert top_candidates(none_queued, 3) == []


def test_top_candidates_uses_given_weights(make_material):
    cheap = make_material(id="cheap", predicted_zt=1.0, estimated_cost=100)
    efficient = make_material(id="efficient", predicted_zt=2.5, estimated_cost=4500)
    only_zt = parse_weights("efficiency=1;cost=0;synthesis_complexity=0;toxicity=0;availability=0;"
                            "novelty=0;commercial_viability=0;synthesis_time=0")
    assert top_candidates([cheap, efficient], 1, only_zt)[0].id == "efficient"


# =============================================================================
# WEIGHT PARSING
# =============================================================================

def test_parse_weights_overrides_defaults():
    w = parse_weights("efficiency=0.4; cost=0.05 ;synthesisTime=0.2")
    assert w.efficiency == 0.4
    assert w.cost == 0.05
    assert w.synthesis_time == 0.2
    assert w.novelty == DEFAULT_WEIGHTS.novelty


def test_parse_weights_skips_malformed_parts():
    assert parse_weights("efficiency;;") == DEFAULT_WEIGHTS


def test_parse_weights_rejects_unknown_names():
    with pytest.raises(ValueError, match="Unknown weight"):
        parse_weights("sparkle=0.5")
