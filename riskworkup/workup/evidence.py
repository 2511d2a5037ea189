"""
workup/evidence.py
------------------
The evidence pack: a snapshot of one assessment's answers plus auxiliary
flags, used for sufficiency checking and change detection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

logger = logging.getLogger(__name__)

AnswerValue = Union[int, float, str, bool]


@dataclass(frozen=True)
class EvidencePack:
    """
    Immutable snapshot of an assessment's evidence.

    Attributes:
        assessment_id:          Assessment identifier.
        funnel_slug:            Funnel the assessment belongs to; selects the ruleset.
        answers:                Question id → answer value.
        has_uploaded_documents: Whether the patient uploaded documents.
        has_wearable_data:      Whether wearable data is attached.
    """

    assessment_id: str
    funnel_slug: str
    answers: Mapping[str, AnswerValue] = field(default_factory=dict)
    has_uploaded_documents: bool = False
    has_wearable_data: bool = False

    def __post_init__(self) -> None:
        # Detach from the caller's dict; keys are question ids, always str.
        answers = {str(key): value for key, value in self.answers.items()}
        object.__setattr__(self, "answers", MappingProxyType(answers))


def create_evidence_pack(
    assessment_id: str,
    funnel_slug: str,
    answer_rows: Iterable[Mapping[str, Any]],
    has_uploaded_documents: Optional[bool] = None,
    has_wearable_data: Optional[bool] = None,
) -> EvidencePack:
    """
    Assemble an :class:`EvidencePack` from persisted answer rows.

    Each row is a mapping with ``question_id`` and ``answer_value`` keys, the
    shape returned by the answers table.  Rows without a question id are
    skipped; when a question id repeats, the last row wins.

    Args:
        assessment_id:          Assessment identifier.
        funnel_slug:            Funnel slug of the assessment.
        answer_rows:            Iterable of persisted answer rows.
        has_uploaded_documents: Optional documents flag.
        has_wearable_data:      Optional wearable flag.

    Returns:
        A new :class:`EvidencePack`.
    """
    answers = {}
    for row in answer_rows:
        question_id = row.get("question_id")
        if not question_id:
            logger.debug("Skipping answer row without question_id: %r", row)
            continue
        answers[str(question_id)] = row.get("answer_value")

    return EvidencePack(
        assessment_id=assessment_id,
        funnel_slug=funnel_slug,
        answers=answers,
        has_uploaded_documents=bool(has_uploaded_documents),
        has_wearable_data=bool(has_wearable_data),
    )
