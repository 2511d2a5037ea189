"""
core/errors.py
--------------
Error codes and exception types shared by the scoring pipeline.

Every failure carries a stable machine-readable ``code`` so that callers
(API handlers, the CLI) can map it to a user-facing response without parsing
the message text.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ScoringErrorCode:
    """String constants identifying each failure family."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    MISSING_ANSWER = "MISSING_ANSWER"
    UNKNOWN_OPERATOR = "UNKNOWN_OPERATOR"
    MISSING_WEIGHTS = "MISSING_WEIGHTS"
    MISSING_THRESHOLDS = "MISSING_THRESHOLDS"
    MISSING_NORMALIZATION_BOUNDS = "MISSING_NORMALIZATION_BOUNDS"
    INVALID_NORMALIZATION_BOUNDS = "INVALID_NORMALIZATION_BOUNDS"
    PARSE_ERROR = "PARSE_ERROR"


class ScoringError(Exception):
    """
    Base class for all riskworkup failures.

    Attributes:
        code:    One of the :class:`ScoringErrorCode` constants.
        message: Human-readable description.
        details: Structured context (rule key, question id, ...).
    """

    code: str = ScoringErrorCode.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details: Dict[str, Any] = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigValidationError(ScoringError):
    """Raised when a scoring configuration is structurally invalid."""

    code = ScoringErrorCode.VALIDATION_FAILED

    def __init__(self, errors: List[str], details: Optional[Dict[str, Any]] = None) -> None:
        self.errors = list(errors)
        merged = {"errors": list(errors)}
        merged.update(details or {})
        super().__init__(
            f"Invalid scoring configuration ({len(errors)} issue(s)): " + "; ".join(errors),
            details=merged,
        )


class MissingAnswerError(ScoringError):
    """Raised when a rule references an input id absent from the inputs map."""

    code = ScoringErrorCode.MISSING_ANSWER

    def __init__(self, question_id: str, rule_key: str) -> None:
        self.question_id = question_id
        self.rule_key = rule_key
        super().__init__(
            f"Missing answer for question {question_id!r} in rule {rule_key!r}",
            details={"questionId": question_id, "ruleKey": rule_key},
        )


class UnknownOperatorError(ScoringError):
    """Raised at the parse boundary for operator names outside the closed set."""

    code = ScoringErrorCode.UNKNOWN_OPERATOR

    def __init__(self, operator: Any) -> None:
        self.operator = operator
        super().__init__(
            f"Unknown operator: {operator!r}",
            details={"operator": operator},
        )


class ConfigParseError(ScoringError):
    """Raised when a configuration document cannot be turned into typed rules."""

    code = ScoringErrorCode.PARSE_ERROR
