"""
scoring/risk_model.py
---------------------
Classification of numeric scores into risk levels.

Cut-points (defaults, configurable through
:class:`~riskworkup.core.config.ScoringSettings`)::

    score >= 75  → CRITICAL
    score >= 50  → HIGH
    score >= 25  → MODERATE
    otherwise    → LOW
"""

from __future__ import annotations

from typing import Optional

from riskworkup.core.config import DEFAULT_SETTINGS, ScoringSettings
from riskworkup.core.result_schema import RiskLevel


def get_risk_level_from_score(
    score: float,
    settings: Optional[ScoringSettings] = None,
) -> RiskLevel:
    """
    Map a score to its :class:`~riskworkup.core.result_schema.RiskLevel`.

    Args:
        score:    Numeric score, typically in ``[0, 100]``.
        settings: Optional settings overriding the default cut-points.

    Returns:
        The matching risk level.  Boundaries are inclusive on the upper level.

    Examples::

        get_risk_level_from_score(20)   # RiskLevel.LOW
        get_risk_level_from_score(25)   # RiskLevel.MODERATE
        get_risk_level_from_score(80)   # RiskLevel.CRITICAL
    """
    cfg = settings or DEFAULT_SETTINGS
    if score >= cfg.critical_threshold:
        return RiskLevel.CRITICAL
    if score >= cfg.high_threshold:
        return RiskLevel.HIGH
    if score >= cfg.moderate_threshold:
        return RiskLevel.MODERATE
    return RiskLevel.LOW
