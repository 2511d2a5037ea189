import pytest

from riskworkup.core.config import ScoringSettings
from riskworkup.core.errors import MissingAnswerError, ScoringErrorCode
from riskworkup.scoring.evaluator import evaluate, normalize, step_threshold
from riskworkup.scoring.rules import InputWeight, ScoringRule, Threshold


INPUTS = {"q1": 10, "q2": 5, "q3": 30}


# ---------------------------------------------------------------------------
# Aggregating operators
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "operator, expected",
    [
        ("SUM", 45),
        ("AVERAGE", 15),
        ("MAX", 30),
        ("MIN", 5),
    ],
)
def test_aggregating_operators(operator, expected):
    rule = ScoringRule("r", "R", operator, ["q1", "q2", "q3"])
    assert evaluate(rule, INPUTS) == pytest.approx(expected)


@pytest.mark.parametrize("operator", ["SUM", "AVERAGE", "MIN", "MAX"])
def test_no_inputs_scores_zero(operator):
    rule = ScoringRule("r", "R", operator, [])
    assert evaluate(rule, INPUTS) == 0


def test_weighted_sum():
    rule = ScoringRule(
        "r", "R", "WEIGHTED_SUM", ["q1", "q2"],
        weights=[InputWeight("q1", 0.7), InputWeight("q2", 0.3)],
    )
    assert evaluate(rule, INPUTS) == pytest.approx(8.5)


def test_weighted_sum_extra_weight_for_absent_input_is_missing_answer():
    rule = ScoringRule(
        "r", "R", "WEIGHTED_SUM", ["q1"],
        weights=[InputWeight("q1", 1.0), InputWeight("ghost", 1.0)],
    )
    with pytest.raises(MissingAnswerError) as exc_info:
        evaluate(rule, INPUTS)
    assert exc_info.value.question_id == "ghost"


# ---------------------------------------------------------------------------
# NORMALIZE
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value, expected", [(5, 50), (20, 100), (-5, 0), (0, 0), (10, 100)])
def test_normalize_rescales_and_clamps(value, expected):
    rule = ScoringRule("r", "R", "NORMALIZE", ["x"], min_value=0, max_value=10)
    assert evaluate(rule, {"x": value}) == pytest.approx(expected)


def test_normalize_sums_multiple_inputs():
    rule = ScoringRule("r", "R", "NORMALIZE", ["a", "b"], min_value=0, max_value=10)
    assert evaluate(rule, {"a": 2, "b": 3}) == pytest.approx(50)


def test_normalize_honours_target_range_from_settings():
    settings = ScoringSettings(normalize_floor=0.0, normalize_ceiling=10.0)
    rule = ScoringRule("r", "R", "NORMALIZE", ["x"], min_value=0, max_value=4)
    assert evaluate(rule, {"x": 1}, settings) == pytest.approx(2.5)


def test_normalize_helper_offset_range():
    assert normalize(15, 10, 20) == pytest.approx(50)


# ---------------------------------------------------------------------------
# THRESHOLD
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value, expected", [(60, 50), (80, 75), (75, 75), (0, 0), (24.9, 0)])
def test_threshold_step_function(quartile_thresholds, value, expected):
    rule = ScoringRule("r", "R", "THRESHOLD", ["x"], thresholds=quartile_thresholds)
    assert evaluate(rule, {"x": value}) == expected


def test_threshold_below_every_step_returns_lowest_score():
    table = [Threshold(10, 1, "LOW"), Threshold(20, 2, "MODERATE")]
    assert step_threshold(5, table) == 1


def test_threshold_table_order_does_not_matter(quartile_thresholds):
    shuffled = list(reversed(quartile_thresholds))
    assert step_threshold(60, shuffled) == step_threshold(60, quartile_thresholds) == 50


def test_empty_threshold_table_scores_zero():
    assert step_threshold(42, []) == 0


# ---------------------------------------------------------------------------
# Missing inputs
# ---------------------------------------------------------------------------

def test_missing_answer_names_first_missing_id():
    rule = ScoringRule("stress", "Stress", "SUM", ["q1", "missing_a", "missing_b"])
    with pytest.raises(MissingAnswerError) as exc_info:
        evaluate(rule, INPUTS)
    err = exc_info.value
    assert err.code == ScoringErrorCode.MISSING_ANSWER
    assert err.details == {"questionId": "missing_a", "ruleKey": "stress"}
    assert "missing_a" in err.message


def test_evaluate_does_not_mutate_inputs():
    inputs = dict(INPUTS)
    evaluate(ScoringRule("r", "R", "SUM", ["q1", "q2"]), inputs)
    assert inputs == INPUTS


def test_normalize_empty_source_range_scores_floor():
    assert normalize(5, 10, 10) == 0
    rule = ScoringRule("r", "R", "NORMALIZE", ["x"], min_value=10, max_value=10)
    assert evaluate(rule, {"x": 12}) == 0
