"""
scoring/calculator.py
---------------------
Risk bundle calculator: orchestrates factor rules and the overall rule.

Algorithm (single pass, fully deterministic)
--------------------------------------------
1. Validate the configuration; any error fails the whole call.
2. Evaluate each factor rule, in order, against the raw answers.
3. Build an inputs ledger: the raw answers extended with ``factor key →
   factor score``.  A factor score overrides a raw answer of the same name.
4. Evaluate the overall rule against the ledger.
5. Classify the overall score into a risk level.
6. Return a :class:`~riskworkup.core.result_schema.RiskBundleV1`.

Failures are returned inside a
:class:`~riskworkup.core.result_schema.RiskBundleResult`, never raised, and
never accompanied by partial output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from riskworkup.core.config import DEFAULT_SETTINGS, ScoringSettings
from riskworkup.core.errors import ConfigValidationError, ScoringError
from riskworkup.core.result_schema import (
    RiskBundleResult,
    RiskBundleV1,
    RiskFactor,
    RiskScore,
)
from riskworkup.scoring.evaluator import evaluate
from riskworkup.scoring.risk_model import get_risk_level_from_score
from riskworkup.scoring.rules import (
    RiskCalculationConfig,
    validate_risk_calculation_config,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskBundleInput:
    """
    Answers for one assessment plus pass-through metadata.

    Attributes:
        assessment_id:     Assessment identifier.
        answers:           Input name → numeric answer.
        algorithm_version: Opaque algorithm version string.
        funnel_version:    Optional opaque funnel version.
        job_id:            Optional processing job identifier.
    """

    assessment_id: str
    answers: Mapping[str, float]
    algorithm_version: str
    funnel_version: Optional[str] = None
    job_id: Optional[str] = None


def build_inputs_ledger(
    answers: Mapping[str, float],
    factors: List[RiskFactor],
) -> Mapping[str, float]:
    """
    Return a read-only view of *answers* extended with factor scores.

    The caller's mapping is copied, never mutated.
    """
    ledger: Dict[str, float] = dict(answers)
    for factor in factors:
        if factor.key in ledger:
            logger.debug("Factor %r overrides a raw answer of the same name", factor.key)
        ledger[factor.key] = factor.score
    return MappingProxyType(ledger)


def compute_risk_bundle(
    bundle_input: RiskBundleInput,
    config: RiskCalculationConfig,
    settings: Optional[ScoringSettings] = None,
) -> RiskBundleResult:
    """
    Compute a risk bundle from assessment answers and a scoring configuration.

    Args:
        bundle_input: The :class:`RiskBundleInput` for one assessment.
        config:       A :class:`~riskworkup.scoring.rules.RiskCalculationConfig`.
        settings:     Optional :class:`~riskworkup.core.config.ScoringSettings`.

    Returns:
        A :class:`~riskworkup.core.result_schema.RiskBundleResult`: either the
        bundle, or the first configuration/evaluation error encountered.

    Raises:
        ValueError: If *settings* has unordered cut-points or an empty
                    normalize range.

    Example::

        result = compute_risk_bundle(
            RiskBundleInput("a-1", answers={"q1": 3, "q2": 4}, algorithm_version="v1.0.0"),
            config,
        )
        if result.success:
            print(result.data.risk_score.overall)
    """
    cfg = settings or DEFAULT_SETTINGS
    cfg.validate()

    # 1. Fail closed on any structural problem
    validation = validate_risk_calculation_config(config)
    if not validation.valid:
        return RiskBundleResult.fail(
            ConfigValidationError(
                list(validation.errors),
                details={"configVersion": config.version},
            )
        )

    try:
        # 2. Factor rules against raw answers
        factors: List[RiskFactor] = []
        for rule in config.factor_rules:
            score = evaluate(rule, bundle_input.answers, cfg)
            factors.append(
                RiskFactor(
                    key=rule.key,
                    label=rule.label,
                    score=score,
                    risk_level=get_risk_level_from_score(score, cfg),
                )
            )

        # 3-4. Overall rule against answers + factor outputs
        ledger = build_inputs_ledger(bundle_input.answers, factors)
        overall = evaluate(config.overall_rule, ledger, cfg)
    except ScoringError as exc:
        return RiskBundleResult.fail(exc)

    # 5-6. Classify and assemble
    risk_score = RiskScore(
        overall=overall,
        risk_level=get_risk_level_from_score(overall, cfg),
        factors=tuple(factors),
    )
    bundle = RiskBundleV1(
        assessment_id=bundle_input.assessment_id,
        algorithm_version=bundle_input.algorithm_version,
        risk_score=risk_score,
        funnel_version=bundle_input.funnel_version,
        job_id=bundle_input.job_id,
    )
    logger.debug(
        "Risk bundle for %s: overall=%r level=%s",
        bundle_input.assessment_id, overall, risk_score.risk_level.value,
    )
    return RiskBundleResult.ok(bundle)
