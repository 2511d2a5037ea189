"""scoring sub-package — rule model, validator, evaluator, and risk bundle calculator."""

from riskworkup.scoring.rules import (
    ConfigValidationOutcome,
    InputWeight,
    RiskCalculationConfig,
    ScoringOperator,
    ScoringRule,
    Threshold,
    ValidationOutcome,
    validate_risk_calculation_config,
    validate_scoring_rule,
)
from riskworkup.scoring.evaluator import evaluate
from riskworkup.scoring.risk_model import get_risk_level_from_score
from riskworkup.scoring.calculator import RiskBundleInput, compute_risk_bundle
from riskworkup.scoring.loader import config_from_dict, load_config

__all__ = [
    "ScoringOperator",
    "ScoringRule",
    "InputWeight",
    "Threshold",
    "RiskCalculationConfig",
    "ValidationOutcome",
    "ConfigValidationOutcome",
    "validate_scoring_rule",
    "validate_risk_calculation_config",
    "evaluate",
    "get_risk_level_from_score",
    "RiskBundleInput",
    "compute_risk_bundle",
    "config_from_dict",
    "load_config",
]
