"""
core/result_schema.py
---------------------
Structured, typed result objects returned by the scoring and workup engines.

Classes
-------
* :class:`RiskLevel`             — closed set of risk classifications.
* :class:`RiskFactor`            — score produced by one factor rule.
* :class:`RiskScore`             — overall score, its level, and every factor.
* :class:`RiskBundleV1`          — the versioned bundle handed back to callers.
* :class:`RiskBundleResult`      — success/error wrapper around a bundle.
* :class:`FollowUpQuestion`      — question asked when evidence is missing.
* :class:`DataSufficiencyResult` — outcome of a data sufficiency check.

Every object here is a frozen value: it is created fresh per call and owned
by the caller once returned.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from riskworkup.core.errors import ScoringError


class RiskLevel(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# ---------------------------------------------------------------------------
# Risk bundle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RiskFactor:
    """
    Score computed by a single factor rule.

    Attributes:
        key:        Factor rule key (also addressable by the overall rule).
        label:      Display label copied from the rule.
        score:      Numeric factor score.
        risk_level: The factor score classified with the overall cut-points.
    """

    key: str
    label: str
    score: float
    risk_level: RiskLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "score": self.score,
            "risk_level": self.risk_level.value,
        }


@dataclass(frozen=True)
class RiskScore:
    overall: float
    risk_level: RiskLevel
    factors: Tuple[RiskFactor, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "risk_level": self.risk_level.value,
            "factors": [f.to_dict() for f in self.factors],
        }


@dataclass(frozen=True)
class RiskBundleV1:
    """
    Versioned risk bundle for one assessment.

    The bundle intentionally carries no timestamp: identical inputs must
    produce byte-identical bundles.

    Attributes:
        assessment_id:       Identifier supplied by the caller.
        algorithm_version:   Opaque algorithm version string, passed through.
        risk_score:          The computed :class:`RiskScore`.
        funnel_version:      Optional opaque funnel version, passed through.
        job_id:              Optional processing job identifier, passed through.
        risk_bundle_version: Schema version of this object (always ``"v1"``).
    """

    assessment_id: str
    algorithm_version: str
    risk_score: RiskScore
    funnel_version: Optional[str] = None
    job_id: Optional[str] = None
    risk_bundle_version: str = "v1"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "risk_bundle_version": self.risk_bundle_version,
            "assessment_id": self.assessment_id,
            "algorithm_version": self.algorithm_version,
            "funnel_version": self.funnel_version,
            "job_id": self.job_id,
            "risk_score": self.risk_score.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)


@dataclass(frozen=True)
class RiskBundleResult:
    """
    Explicit success-or-error value returned by
    :func:`~riskworkup.scoring.calculator.compute_risk_bundle`.

    Exactly one of ``data`` and ``error`` is set.  Use :meth:`unwrap` when an
    exception is more convenient than branching on ``success``.
    """

    success: bool
    data: Optional[RiskBundleV1] = None
    error: Optional[ScoringError] = None

    @classmethod
    def ok(cls, bundle: RiskBundleV1) -> "RiskBundleResult":
        return cls(success=True, data=bundle)

    @classmethod
    def fail(cls, error: ScoringError) -> "RiskBundleResult":
        return cls(success=False, error=error)

    def unwrap(self) -> RiskBundleV1:
        """
        Return the bundle or raise the carried error.

        Raises:
            ScoringError: If the calculation failed.
        """
        if self.error is not None:
            raise self.error
        assert self.data is not None
        return self.data

    def to_dict(self) -> Dict[str, Any]:
        if self.success and self.data is not None:
            return {"success": True, "data": self.data.to_dict()}
        assert self.error is not None
        return {"success": False, "error": self.error.to_dict()}

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True, default=str)


# ---------------------------------------------------------------------------
# Data sufficiency
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FollowUpQuestion:
    """
    A data-collection question attached to a sufficiency rule.

    Attributes:
        id:            Stable question identifier.
        field_key:     Evidence field the question fills in.
        question_text: Text shown to the patient, authored with the ruleset.
        input_type:    UI input hint (``"scale"``, ``"text"``, ...).
        priority:      Higher values are asked first.
    """

    id: str
    field_key: str
    question_text: str
    input_type: str
    priority: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "field_key": self.field_key,
            "question_text": self.question_text,
            "input_type": self.input_type,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class DataSufficiencyResult:
    """
    Outcome of :func:`~riskworkup.workup.sufficiency.check_data_sufficiency`.

    Attributes:
        is_sufficient:       ``True`` when no rule reported missing data.
        missing_data_fields: Field keys of failed rules, in ruleset order.
        follow_up_questions: Questions for the failed rules, highest priority first.
        evidence_pack_hash:  SHA-256 fingerprint of the evaluated evidence pack.
        ruleset_version:     Version of the applied ruleset, ``None`` if none matched.
    """

    is_sufficient: bool
    missing_data_fields: Tuple[str, ...]
    follow_up_questions: Tuple[FollowUpQuestion, ...]
    evidence_pack_hash: str
    ruleset_version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_sufficient": self.is_sufficient,
            "missing_data_fields": list(self.missing_data_fields),
            "follow_up_questions": [q.to_dict() for q in self.follow_up_questions],
            "evidence_pack_hash": self.evidence_pack_hash,
            "ruleset_version": self.ruleset_version,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
