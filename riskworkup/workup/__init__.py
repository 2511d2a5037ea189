"""workup sub-package — evidence packs, sufficiency rulesets, and the workup check."""

import logging

from riskworkup.core.hashing import generate_evidence_pack_hash, verify_evidence_pack_hash
from riskworkup.core.result_schema import DataSufficiencyResult
from riskworkup.workup.evidence import EvidencePack, create_evidence_pack
from riskworkup.workup.rulesets import (
    STRESS_ASSESSMENT_RULESET_V1,
    DataSufficiencyRule,
    DataSufficiencyRuleset,
    get_ruleset_for_funnel,
    get_ruleset_version,
)
from riskworkup.workup.sufficiency import (
    WorkupStatus,
    check_data_sufficiency,
    determine_workup_status,
)

logger = logging.getLogger(__name__)


def perform_workup_check(evidence_pack: EvidencePack) -> DataSufficiencyResult:
    """
    Run the complete workup check for one assessment.

    Returns the sufficiency result; map it to a status with
    :func:`determine_workup_status` or ``result.is_sufficient``.
    """
    result = check_data_sufficiency(evidence_pack)
    logger.debug(
        "Workup check for %s: sufficient=%s missing=%s",
        evidence_pack.assessment_id, result.is_sufficient, list(result.missing_data_fields),
    )
    return result


__all__ = [
    "EvidencePack",
    "create_evidence_pack",
    "DataSufficiencyRule",
    "DataSufficiencyRuleset",
    "STRESS_ASSESSMENT_RULESET_V1",
    "get_ruleset_for_funnel",
    "get_ruleset_version",
    "WorkupStatus",
    "check_data_sufficiency",
    "determine_workup_status",
    "perform_workup_check",
    "generate_evidence_pack_hash",
    "verify_evidence_pack_hash",
]
