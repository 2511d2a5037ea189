"""
riskworkup — Deterministic clinical scoring & workup core v0.1
"""

__version__ = "0.1.0"
__author__ = "riskworkup"

from riskworkup.core.config import ScoringSettings, DEFAULT_SETTINGS
from riskworkup.scoring.calculator import RiskBundleInput, compute_risk_bundle
from riskworkup.workup import EvidencePack, check_data_sufficiency, perform_workup_check

__all__ = [
    "ScoringSettings",
    "DEFAULT_SETTINGS",
    "RiskBundleInput",
    "compute_risk_bundle",
    "EvidencePack",
    "check_data_sufficiency",
    "perform_workup_check",
    "__version__",
]
