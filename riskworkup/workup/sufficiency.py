"""
workup/sufficiency.py
---------------------
Data sufficiency checker.

Runs the funnel's ruleset against an evidence pack and reports which
evidence fields are missing, together with follow-up questions sorted by
descending priority.  A funnel without a ruleset is always sufficient.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List

from riskworkup.core.hashing import generate_evidence_pack_hash
from riskworkup.core.result_schema import DataSufficiencyResult, FollowUpQuestion
from riskworkup.workup.evidence import EvidencePack
from riskworkup.workup.rulesets import get_ruleset_for_funnel

logger = logging.getLogger(__name__)


class WorkupStatus(str, Enum):
    READY_FOR_REVIEW = "ready_for_review"
    NEEDS_MORE_DATA = "needs_more_data"


def check_data_sufficiency(evidence_pack: EvidencePack) -> DataSufficiencyResult:
    """
    Evaluate the funnel's ruleset against *evidence_pack*.

    Steps
    -----
    1. Resolve the ruleset from ``evidence_pack.funnel_slug``.  None found →
       sufficient, no follow-ups.
    2. Run each rule in order; a failed check records its ``field_key`` and
       follow-up question.
    3. Sort follow-ups by ``priority`` descending (stable: ties keep rule order).
    4. Hash the evidence pack regardless of the outcome.

    Args:
        evidence_pack: The :class:`~riskworkup.workup.evidence.EvidencePack` to check.

    Returns:
        A :class:`~riskworkup.core.result_schema.DataSufficiencyResult`.
    """
    evidence_hash = generate_evidence_pack_hash(evidence_pack)
    ruleset = get_ruleset_for_funnel(evidence_pack.funnel_slug)

    if ruleset is None:
        logger.debug("No sufficiency ruleset for funnel %r", evidence_pack.funnel_slug)
        return DataSufficiencyResult(
            is_sufficient=True,
            missing_data_fields=(),
            follow_up_questions=(),
            evidence_pack_hash=evidence_hash,
        )

    missing: List[str] = []
    questions: List[FollowUpQuestion] = []
    for rule in ruleset.rules:
        if not rule.check(evidence_pack):
            missing.append(rule.field_key)
            questions.append(rule.follow_up_question)

    questions.sort(key=lambda q: q.priority, reverse=True)

    return DataSufficiencyResult(
        is_sufficient=not missing,
        missing_data_fields=tuple(missing),
        follow_up_questions=tuple(questions),
        evidence_pack_hash=evidence_hash,
        ruleset_version=ruleset.version,
    )


def determine_workup_status(evidence_pack: EvidencePack) -> WorkupStatus:
    """Return ``ready_for_review`` when the evidence is sufficient, else ``needs_more_data``."""
    result = check_data_sufficiency(evidence_pack)
    if result.is_sufficient:
        return WorkupStatus.READY_FOR_REVIEW
    return WorkupStatus.NEEDS_MORE_DATA
