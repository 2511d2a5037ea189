"""
core/config.py
--------------
Centralized scoring settings for the riskworkup SDK.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringSettings:
    """
    Tunable constants used by the risk bundle calculator.

    Attributes:
        critical_threshold: Overall score at or above which the level is CRITICAL.
        high_threshold:     Overall score at or above which the level is HIGH.
        moderate_threshold: Overall score at or above which the level is MODERATE.
        normalize_floor:    Lower bound of the NORMALIZE target range.
        normalize_ceiling:  Upper bound of the NORMALIZE target range.
    """

    critical_threshold: float = 75.0
    high_threshold: float = 50.0
    moderate_threshold: float = 25.0

    normalize_floor: float = 0.0
    normalize_ceiling: float = 100.0

    def validate(self) -> None:
        """Validate that cut-points are ordered and the normalize range is non-empty."""
        if not self.moderate_threshold < self.high_threshold < self.critical_threshold:
            raise ValueError(
                "Risk level thresholds must satisfy moderate < high < critical, got "
                f"{self.moderate_threshold} / {self.high_threshold} / {self.critical_threshold}"
            )
        if self.normalize_floor >= self.normalize_ceiling:
            raise ValueError("normalize_floor must be less than normalize_ceiling.")


# Singleton default settings; callers may override by passing their own instance.
DEFAULT_SETTINGS = ScoringSettings()
