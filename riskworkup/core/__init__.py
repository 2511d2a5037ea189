"""core sub-package — settings, errors, result objects, and hashing."""

from riskworkup.core.config import ScoringSettings, DEFAULT_SETTINGS
from riskworkup.core.errors import (
    ScoringErrorCode,
    ScoringError,
    ConfigValidationError,
    MissingAnswerError,
    UnknownOperatorError,
    ConfigParseError,
)
from riskworkup.core.result_schema import (
    RiskLevel,
    RiskFactor,
    RiskScore,
    RiskBundleV1,
    RiskBundleResult,
    FollowUpQuestion,
    DataSufficiencyResult,
)
from riskworkup.core.hashing import generate_evidence_pack_hash, verify_evidence_pack_hash
from riskworkup.core.config_hashing import compute_config_hash

__all__ = [
    "ScoringSettings",
    "DEFAULT_SETTINGS",
    "ScoringErrorCode",
    "ScoringError",
    "ConfigValidationError",
    "MissingAnswerError",
    "UnknownOperatorError",
    "ConfigParseError",
    "RiskLevel",
    "RiskFactor",
    "RiskScore",
    "RiskBundleV1",
    "RiskBundleResult",
    "FollowUpQuestion",
    "DataSufficiencyResult",
    "generate_evidence_pack_hash",
    "verify_evidence_pack_hash",
    "compute_config_hash",
]
