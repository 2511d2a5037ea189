"""
scoring/rules.py
----------------
Scoring rule model and static validator.

A :class:`ScoringRule` names an operator, the inputs it reads, and any
operator-specific parameters.  Before anything is evaluated, every rule of a
:class:`RiskCalculationConfig` is checked for structural soundness:

* WEIGHTED_SUM — weights must cover every id in ``question_ids``.
* THRESHOLD    — needs a non-empty threshold table and at most one input.
* NORMALIZE    — needs both bounds, with ``min_value < max_value``.
* SUM / AVERAGE / MIN / MAX — no extra requirements.

Unknown operator names never reach the validator: :class:`ScoringOperator`
refuses them at construction time (see :meth:`ScoringOperator.parse`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from riskworkup.core.errors import ScoringErrorCode, UnknownOperatorError


class ScoringOperator(str, Enum):
    SUM = "SUM"
    WEIGHTED_SUM = "WEIGHTED_SUM"
    AVERAGE = "AVERAGE"
    MIN = "MIN"
    MAX = "MAX"
    THRESHOLD = "THRESHOLD"
    NORMALIZE = "NORMALIZE"

    @classmethod
    def parse(cls, value: Any) -> "ScoringOperator":
        """
        Convert a raw operator name into a :class:`ScoringOperator`.

        Raises:
            UnknownOperatorError: If *value* is not one of the supported operators.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownOperatorError(value) from None


@dataclass(frozen=True)
class InputWeight:
    input_id: str
    weight: float


@dataclass(frozen=True)
class Threshold:
    """One step of a THRESHOLD table: inputs ``>= value`` score ``score``."""

    value: float
    score: float
    risk_level: str


@dataclass(frozen=True)
class ScoringRule:
    """
    A single scoring step.

    Attributes:
        key:          Unique identifier within its configuration.  Factor keys
                      become addressable inputs for the overall rule.
        label:        Display name; not used in computation.
        operator:     The :class:`ScoringOperator` to apply.
        question_ids: Ordered input names read by the rule.
        weights:      Required for WEIGHTED_SUM.
        thresholds:   Required for THRESHOLD.
        min_value:    Required for NORMALIZE.
        max_value:    Required for NORMALIZE.
    """

    key: str
    label: str
    operator: ScoringOperator
    question_ids: Tuple[str, ...] = ()
    weights: Optional[Tuple[InputWeight, ...]] = None
    thresholds: Optional[Tuple[Threshold, ...]] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", ScoringOperator.parse(self.operator))
        object.__setattr__(self, "question_ids", tuple(self.question_ids))
        if self.weights is not None:
            object.__setattr__(self, "weights", tuple(self.weights))
        if self.thresholds is not None:
            object.__setattr__(self, "thresholds", tuple(self.thresholds))


@dataclass(frozen=True)
class RiskCalculationConfig:
    """
    Versioned scoring configuration: many factor rules plus one overall rule.

    ``version`` is opaque and never interpreted by the calculator.
    """

    version: str
    factor_rules: Tuple[ScoringRule, ...]
    overall_rule: ScoringRule

    def __post_init__(self) -> None:
        object.__setattr__(self, "factor_rules", tuple(self.factor_rules))


# ---------------------------------------------------------------------------
# Validation outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationOutcome:
    valid: bool
    error: Optional[str] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class ConfigValidationOutcome:
    valid: bool
    errors: Tuple[str, ...] = field(default_factory=tuple)


_VALID = ValidationOutcome(valid=True)


def _invalid(error: str, code: str) -> ValidationOutcome:
    return ValidationOutcome(valid=False, error=error, code=code)


# ---------------------------------------------------------------------------
# Rule validation
# ---------------------------------------------------------------------------

def validate_scoring_rule(rule: ScoringRule) -> ValidationOutcome:
    """
    Check that *rule* carries the parameters its operator needs.

    Args:
        rule: The rule to check.

    Returns:
        A :class:`ValidationOutcome`.  On failure ``error`` holds a message and
        ``code`` one of the :class:`~riskworkup.core.errors.ScoringErrorCode`
        constants.
    """
    op = rule.operator

    if op is ScoringOperator.WEIGHTED_SUM:
        if not rule.weights:
            return _invalid(
                "WEIGHTED_SUM operator requires weights",
                ScoringErrorCode.MISSING_WEIGHTS,
            )
        weighted_ids = {w.input_id for w in rule.weights}
        missing = [qid for qid in rule.question_ids if qid not in weighted_ids]
        if missing:
            return _invalid(
                "WEIGHTED_SUM weights missing for: " + ", ".join(missing),
                ScoringErrorCode.MISSING_WEIGHTS,
            )
        return _VALID

    if op is ScoringOperator.THRESHOLD:
        if not rule.thresholds:
            return _invalid(
                "THRESHOLD operator requires thresholds",
                ScoringErrorCode.MISSING_THRESHOLDS,
            )
        if len(rule.question_ids) > 1:
            return _invalid(
                "THRESHOLD operator accepts at most one input, got "
                f"{len(rule.question_ids)}",
                ScoringErrorCode.VALIDATION_FAILED,
            )
        return _VALID

    if op is ScoringOperator.NORMALIZE:
        if rule.min_value is None or rule.max_value is None:
            return _invalid(
                "NORMALIZE operator requires minValue and maxValue",
                ScoringErrorCode.MISSING_NORMALIZATION_BOUNDS,
            )
        if rule.min_value >= rule.max_value:
            return _invalid(
                "NORMALIZE minValue must be less than maxValue "
                f"(got {rule.min_value} >= {rule.max_value})",
                ScoringErrorCode.INVALID_NORMALIZATION_BOUNDS,
            )
        return _VALID

    # SUM, AVERAGE, MIN, MAX
    return _VALID


def validate_risk_calculation_config(config: RiskCalculationConfig) -> ConfigValidationOutcome:
    """
    Validate every rule of *config* and collect all errors.

    Factor rule errors come first, prefixed with the rule's key, followed by
    the overall rule's error (prefixed ``"Overall rule: "``) and finally any
    duplicate factor keys.  Nothing is evaluated.

    Args:
        config: The configuration to check.

    Returns:
        A :class:`ConfigValidationOutcome` listing every problem found.
    """
    errors: List[str] = []

    for rule in config.factor_rules:
        outcome = validate_scoring_rule(rule)
        if not outcome.valid:
            errors.append(f"{rule.key}: {outcome.error}")

    overall = validate_scoring_rule(config.overall_rule)
    if not overall.valid:
        errors.append(f"Overall rule: {overall.error}")

    seen = set()
    for rule in config.factor_rules:
        if rule.key in seen:
            errors.append(f"Duplicate factor rule key: {rule.key}")
        seen.add(rule.key)

    return ConfigValidationOutcome(valid=not errors, errors=tuple(errors))
