"""
workup/rulesets.py
------------------
Funnel-specific data sufficiency rulesets.

A ruleset is a versioned list of boolean presence checks.  Each check that
fails names a missing evidence field and carries a follow-up question used to
collect it.  Rulesets contain data-collection language only; they never
describe findings.

Built-in rulesets
-----------------
* :data:`STRESS_ASSESSMENT_RULESET_V1` — ``stress-assessment`` (alias ``stress``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from riskworkup.core.result_schema import FollowUpQuestion
from riskworkup.workup.evidence import EvidencePack

EvidenceCheck = Callable[[EvidencePack], bool]


@dataclass(frozen=True)
class DataSufficiencyRule:
    """
    One presence check.

    Attributes:
        id:                 Rule identifier.
        field_key:          Evidence field reported as missing when the check fails.
        description:        What the check looks for.
        check:              Predicate over the evidence pack; ``True`` means present.
        follow_up_question: Question collected when the check fails.
    """

    id: str
    field_key: str
    description: str
    check: EvidenceCheck
    follow_up_question: FollowUpQuestion


@dataclass(frozen=True)
class DataSufficiencyRuleset:
    funnel_slug: str
    version: str
    rules: Tuple[DataSufficiencyRule, ...]


# ---------------------------------------------------------------------------
# Check builders
# ---------------------------------------------------------------------------

def _is_answered(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def has_answer_with_prefix(prefix: str) -> EvidenceCheck:
    """Return a check passing when any answer key starting with *prefix* is answered."""

    def check(pack: EvidencePack) -> bool:
        return any(
            key.startswith(prefix) and _is_answered(value)
            for key, value in pack.answers.items()
        )

    return check


# ---------------------------------------------------------------------------
# Stress assessment
# ---------------------------------------------------------------------------

STRESS_ASSESSMENT_RULESET_V1 = DataSufficiencyRuleset(
    funnel_slug="stress-assessment",
    version="1.0.0",
    rules=(
        DataSufficiencyRule(
            id="stress-sleep-quality",
            field_key="sleep_quality",
            description="At least one sleep question (sleep_q*) is answered.",
            check=has_answer_with_prefix("sleep_q"),
            follow_up_question=FollowUpQuestion(
                id="followup-sleep-quality",
                field_key="sleep_quality",
                question_text="Wie würden Sie Ihre Schlafqualität in den letzten zwei Wochen bewerten?",
                input_type="scale",
                priority=8,
            ),
        ),
        DataSufficiencyRule(
            id="stress-triggers",
            field_key="stress_triggers",
            description="At least one stress question (stress_q*) is answered.",
            check=has_answer_with_prefix("stress_q"),
            follow_up_question=FollowUpQuestion(
                id="followup-stress-triggers",
                field_key="stress_triggers",
                question_text="Welche Situationen lösen bei Ihnen aktuell am häufigsten Stress aus?",
                input_type="text",
                priority=10,
            ),
        ),
    ),
)


# Normalised slug / alias → ruleset
RULESET_REGISTRY: Dict[str, DataSufficiencyRuleset] = {
    "stress-assessment": STRESS_ASSESSMENT_RULESET_V1,
    "stress": STRESS_ASSESSMENT_RULESET_V1,
}


def get_ruleset_for_funnel(funnel_slug: Optional[str]) -> Optional[DataSufficiencyRuleset]:
    """
    Look up the ruleset for a funnel slug.

    The slug is trimmed and lowercased before lookup.  Unknown slugs return
    ``None``: a funnel without a ruleset simply has no requirements.

    Args:
        funnel_slug: Funnel identifier or alias.

    Returns:
        The matching :class:`DataSufficiencyRuleset`, or ``None``.
    """
    if not funnel_slug:
        return None
    return RULESET_REGISTRY.get(funnel_slug.strip().lower())


def get_ruleset_version(funnel_slug: Optional[str]) -> Optional[str]:
    """Return the version of the ruleset for *funnel_slug*, or ``None``."""
    ruleset = get_ruleset_for_funnel(funnel_slug)
    return ruleset.version if ruleset is not None else None
