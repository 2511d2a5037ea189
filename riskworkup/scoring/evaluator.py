"""
scoring/evaluator.py
--------------------
Deterministic rule evaluator.

:func:`evaluate` resolves a rule's inputs from a name → number mapping and
applies the rule's operator.  Operators are dispatched through a registry
keyed by :class:`~riskworkup.scoring.rules.ScoringOperator`; importing this
module fails if any operator lacks an implementation, so a new operator
cannot ship without its evaluation semantics.

Operator semantics
------------------
* SUM          — arithmetic sum; no inputs → 0.
* AVERAGE      — arithmetic mean; no inputs → 0.
* MIN / MAX    — minimum / maximum; no inputs → 0.
* WEIGHTED_SUM — Σ value × weight over the rule's declared weights.
* NORMALIZE    — rescale the input from [min_value, max_value] to the
                 configured target range (default [0, 100]) and clamp.
* THRESHOLD    — score of the highest threshold whose ``value`` is <= the
                 input; below every threshold → the lowest threshold's score.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional

from riskworkup.core.config import DEFAULT_SETTINGS, ScoringSettings
from riskworkup.core.errors import MissingAnswerError
from riskworkup.scoring.rules import ScoringOperator, ScoringRule, Threshold

logger = logging.getLogger(__name__)

OperatorFn = Callable[[ScoringRule, List[float], Mapping[str, float], ScoringSettings], float]

_OPERATOR_REGISTRY: Dict[ScoringOperator, OperatorFn] = {}


def register_operator(operator: ScoringOperator) -> Callable[[OperatorFn], OperatorFn]:
    """Decorator binding an implementation to *operator* in the dispatch registry."""

    def decorator(fn: OperatorFn) -> OperatorFn:
        if operator in _OPERATOR_REGISTRY:
            raise ValueError(f"Operator {operator.value} already has an implementation.")
        _OPERATOR_REGISTRY[operator] = fn
        return fn

    return decorator


# ---------------------------------------------------------------------------
# Operator implementations
# ---------------------------------------------------------------------------

@register_operator(ScoringOperator.SUM)
def _sum(rule, values, inputs, settings):
    return sum(values)


@register_operator(ScoringOperator.AVERAGE)
def _average(rule, values, inputs, settings):
    if not values:
        return 0
    return sum(values) / len(values)


@register_operator(ScoringOperator.MIN)
def _min(rule, values, inputs, settings):
    return min(values) if values else 0


@register_operator(ScoringOperator.MAX)
def _max(rule, values, inputs, settings):
    return max(values) if values else 0


@register_operator(ScoringOperator.WEIGHTED_SUM)
def _weighted_sum(rule, values, inputs, settings):
    total = 0
    for w in rule.weights or ():
        if w.input_id not in inputs:
            raise MissingAnswerError(w.input_id, rule.key)
        total += inputs[w.input_id] * w.weight
    return total


@register_operator(ScoringOperator.NORMALIZE)
def _normalize(rule, values, inputs, settings):
    return normalize(
        sum(values),
        rule.min_value,
        rule.max_value,
        floor=settings.normalize_floor,
        ceiling=settings.normalize_ceiling,
    )


@register_operator(ScoringOperator.THRESHOLD)
def _threshold(rule, values, inputs, settings):
    return step_threshold(sum(values), rule.thresholds or ())


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def normalize(
    value: float,
    min_value: float,
    max_value: float,
    floor: float = 0.0,
    ceiling: float = 100.0,
) -> float:
    """
    Linearly rescale *value* from ``[min_value, max_value]`` to
    ``[floor, ceiling]`` and clamp to that range.

    Examples::

        normalize(5, 0, 10)    # 50.0
        normalize(20, 0, 10)   # 100.0 (clamped)
        normalize(-5, 0, 10)   # 0.0   (clamped)
        normalize(5, 10, 10)   # 0.0   (empty source range)
    """
    span = max_value - min_value
    if span == 0:
        return floor
    scaled = floor + (value - min_value) / span * (ceiling - floor)
    return max(floor, min(ceiling, scaled))


def step_threshold(value: float, thresholds) -> float:
    """
    Read *value* off a step function defined by *thresholds*.

    Args:
        value:      Position on the step function.
        thresholds: Iterable of :class:`~riskworkup.scoring.rules.Threshold`.

    Returns:
        Score of the threshold with the largest ``value`` that is ``<= value``.
        If *value* is below every threshold, the lowest threshold's score.
        An empty table scores 0.
    """
    # sorted() is stable, so equal threshold values keep declaration order
    ordered: List[Threshold] = sorted(thresholds, key=lambda t: t.value)
    if not ordered:
        return 0
    for step in reversed(ordered):
        if value >= step.value:
            return step.score
    return ordered[0].score


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_inputs(rule: ScoringRule, inputs: Mapping[str, float]) -> List[float]:
    """
    Look up every id in ``rule.question_ids``, in declaration order.

    Raises:
        MissingAnswerError: Naming the first id absent from *inputs*.
    """
    values: List[float] = []
    for question_id in rule.question_ids:
        if question_id not in inputs:
            raise MissingAnswerError(question_id, rule.key)
        values.append(inputs[question_id])
    return values


def evaluate(
    rule: ScoringRule,
    inputs: Mapping[str, float],
    settings: Optional[ScoringSettings] = None,
) -> float:
    """
    Compute the numeric output of *rule* against *inputs*.

    The rule is assumed to have passed
    :func:`~riskworkup.scoring.rules.validate_scoring_rule`.

    Args:
        rule:     The scoring rule to apply.
        inputs:   Mapping of input name → numeric value.
        settings: Optional :class:`~riskworkup.core.config.ScoringSettings`
                  (normalize target range).

    Returns:
        The rule's numeric output.

    Raises:
        MissingAnswerError: If any referenced input is absent.
    """
    cfg = settings or DEFAULT_SETTINGS
    values = resolve_inputs(rule, inputs)
    score = _OPERATOR_REGISTRY[rule.operator](rule, values, inputs, cfg)
    logger.debug("Rule %r (%s) evaluated to %r", rule.key, rule.operator.value, score)
    return score


_unimplemented = [op.value for op in ScoringOperator if op not in _OPERATOR_REGISTRY]
if _unimplemented:  # pragma: no cover
    raise ImportError(f"Scoring operators without an implementation: {_unimplemented}")
