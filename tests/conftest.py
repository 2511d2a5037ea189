"""Shared fixtures for the riskworkup test suite."""

from __future__ import annotations

import pytest

from riskworkup.scoring.calculator import RiskBundleInput
from riskworkup.scoring.rules import (
    InputWeight,
    RiskCalculationConfig,
    ScoringOperator,
    ScoringRule,
    Threshold,
)

ASSESSMENT_ID = "123e4567-e89b-12d3-a456-426614174000"


@pytest.fixture
def assessment_id():
    return ASSESSMENT_ID


@pytest.fixture
def stress_config():
    """Two factors feeding an AVERAGE overall rule."""
    return RiskCalculationConfig(
        version="v1.0.0",
        factor_rules=[
            ScoringRule("stress", "Stress", ScoringOperator.SUM, ["q1", "q2"]),
            ScoringRule(
                "sleep",
                "Sleep",
                ScoringOperator.WEIGHTED_SUM,
                ["s1", "s2"],
                weights=[InputWeight("s1", 0.7), InputWeight("s2", 0.3)],
            ),
        ],
        overall_rule=ScoringRule("overall", "Overall", ScoringOperator.AVERAGE, ["stress", "sleep"]),
    )


@pytest.fixture
def single_factor_config():
    """Factory: wrap one factor rule with a pass-through SUM overall rule."""

    def _make(rule: ScoringRule) -> RiskCalculationConfig:
        return RiskCalculationConfig(
            version="v1.0.0",
            factor_rules=[rule],
            overall_rule=ScoringRule("overall", "Overall", ScoringOperator.SUM, [rule.key]),
        )

    return _make


@pytest.fixture
def make_input():
    def _make(answers, algorithm_version="v1.0.0"):
        return RiskBundleInput(
            assessment_id=ASSESSMENT_ID,
            answers=answers,
            algorithm_version=algorithm_version,
        )

    return _make


@pytest.fixture
def quartile_thresholds():
    return [
        Threshold(0, 0, "LOW"),
        Threshold(25, 25, "MODERATE"),
        Threshold(50, 50, "HIGH"),
        Threshold(75, 75, "CRITICAL"),
    ]
