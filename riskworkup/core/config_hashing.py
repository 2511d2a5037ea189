"""
core/config_hashing.py
----------------------
Deterministic hashing of a
:class:`~riskworkup.scoring.rules.RiskCalculationConfig` so that any change
to scoring rules is detectable by the caller (e.g. to decide whether stored
risk bundles must be recomputed).
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from riskworkup.scoring.rules import RiskCalculationConfig


def _config_to_serialisable(config: "RiskCalculationConfig") -> Dict[str, Any]:
    """
    Convert a configuration to a plain, JSON-serialisable dictionary with
    deterministically sorted keys at every nesting level.

    Rule order and ``question_ids`` order are preserved: both are significant
    for evaluation.
    """
    raw: Dict[str, Any] = dataclasses.asdict(config)

    def _normalise(obj: Any) -> Any:
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, dict):
            return {k: _normalise(obj[k]) for k in sorted(obj)}
        if isinstance(obj, (list, tuple)):
            return [_normalise(i) for i in obj]
        return obj

    return _normalise(raw)


def compute_config_hash(config: "RiskCalculationConfig") -> str:
    """
    Compute a deterministic SHA-256 hash of a scoring configuration.

    Args:
        config: The configuration to hash.

    Returns:
        Lowercase hex digest string (64 characters).

    Example::

        h1 = compute_config_hash(load_config("stress.yaml"))
        h2 = compute_config_hash(load_config("stress.yaml"))
        # h1 == h2
    """
    serialisable = _config_to_serialisable(config)
    canonical_json = json.dumps(serialisable, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
