"""
scoring/loader.py
-----------------
Parse boundary for scoring configurations.

Turns a plain mapping (or a YAML / JSON file) into a typed
:class:`~riskworkup.scoring.rules.RiskCalculationConfig`.  This is where
unknown operator names are rejected; everything downstream works with the
closed :class:`~riskworkup.scoring.rules.ScoringOperator` set.

Expected document structure (YAML shown; camelCase and snake_case keys are
both accepted)::

    version: "v1.0.0"
    factorRules:
      - key: stress
        label: Stress
        operator: WEIGHTED_SUM
        questionIds: [q1, q2]
        weights:
          - {inputId: q1, weight: 0.7}
          - {inputId: q2, weight: 0.3}
    overallRule:
      key: overall
      label: Overall
      operator: SUM
      questionIds: [stress]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from riskworkup.core.errors import ConfigParseError
from riskworkup.scoring.rules import (
    InputWeight,
    RiskCalculationConfig,
    ScoringOperator,
    ScoringRule,
    Threshold,
)

logger = logging.getLogger(__name__)


def _pick(data: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first present key among *names* (camelCase / snake_case aliases)."""
    for name in names:
        if name in data:
            return data[name]
    return default


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigParseError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


def _as_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigParseError(f"{where} must be a number, got {value!r}")
    return value


def _parse_weights(raw: Any, rule_key: str) -> Optional[List[InputWeight]]:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise ConfigParseError(f"Rule {rule_key!r}: weights must be a list")
    weights = []
    for i, item in enumerate(raw):
        item = _require_mapping(item, f"Rule {rule_key!r} weights[{i}]")
        input_id = _pick(item, "inputId", "input_id", "questionId", "question_id")
        if not input_id:
            raise ConfigParseError(f"Rule {rule_key!r} weights[{i}] is missing inputId")
        weights.append(
            InputWeight(
                input_id=str(input_id),
                weight=_as_number(item.get("weight"), f"Rule {rule_key!r} weights[{i}].weight"),
            )
        )
    return weights


def _parse_thresholds(raw: Any, rule_key: str) -> Optional[List[Threshold]]:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise ConfigParseError(f"Rule {rule_key!r}: thresholds must be a list")
    thresholds = []
    for i, item in enumerate(raw):
        item = _require_mapping(item, f"Rule {rule_key!r} thresholds[{i}]")
        where = f"Rule {rule_key!r} thresholds[{i}]"
        thresholds.append(
            Threshold(
                value=_as_number(item.get("value"), f"{where}.value"),
                score=_as_number(item.get("score"), f"{where}.score"),
                risk_level=str(_pick(item, "riskLevel", "risk_level", default="")),
            )
        )
    return thresholds


def rule_from_dict(data: Mapping[str, Any]) -> ScoringRule:
    """
    Build a :class:`~riskworkup.scoring.rules.ScoringRule` from a mapping.

    Raises:
        ConfigParseError:     On missing keys or wrongly typed values.
        UnknownOperatorError: If ``operator`` is not a supported operator.
    """
    data = _require_mapping(data, "Scoring rule")
    key = data.get("key")
    if not key:
        raise ConfigParseError("Scoring rule is missing a 'key'")

    question_ids = _pick(data, "questionIds", "question_ids", default=[])
    if not isinstance(question_ids, list):
        raise ConfigParseError(f"Rule {key!r}: questionIds must be a list")
    if len(set(question_ids)) != len(question_ids):
        raise ConfigParseError(f"Rule {key!r}: questionIds must be unique")

    min_value = _pick(data, "minValue", "min_value")
    max_value = _pick(data, "maxValue", "max_value")

    return ScoringRule(
        key=str(key),
        label=str(data.get("label", key)),
        operator=ScoringOperator.parse(data.get("operator")),
        question_ids=tuple(str(q) for q in question_ids),
        weights=_parse_weights(data.get("weights"), key),
        thresholds=_parse_thresholds(data.get("thresholds"), key),
        min_value=None if min_value is None else _as_number(min_value, f"Rule {key!r} minValue"),
        max_value=None if max_value is None else _as_number(max_value, f"Rule {key!r} maxValue"),
    )


def config_from_dict(data: Mapping[str, Any]) -> RiskCalculationConfig:
    """
    Build a :class:`~riskworkup.scoring.rules.RiskCalculationConfig` from a mapping.

    Parsing only checks shape and types.  Operator-specific requirements
    (weights, thresholds, bounds) are left to
    :func:`~riskworkup.scoring.rules.validate_risk_calculation_config`.

    Raises:
        ConfigParseError:     If the document is malformed.
        UnknownOperatorError: If any rule names an unknown operator.
    """
    data = _require_mapping(data, "Scoring configuration")

    if "version" not in data:
        raise ConfigParseError("Scoring configuration missing top-level 'version' key.")

    raw_factors = _pick(data, "factorRules", "factor_rules", default=[])
    if not isinstance(raw_factors, list):
        raise ConfigParseError("'factorRules' must be a list")

    raw_overall = _pick(data, "overallRule", "overall_rule")
    if raw_overall is None:
        raise ConfigParseError("Scoring configuration missing 'overallRule' section.")

    return RiskCalculationConfig(
        version=str(data["version"]),
        factor_rules=tuple(rule_from_dict(r) for r in raw_factors),
        overall_rule=rule_from_dict(raw_overall),
    )


def load_document(path: Union[str, Path]) -> Any:
    """
    Read a YAML or JSON document from disk.

    ``.json`` files are parsed with :mod:`json`; anything else with
    :func:`yaml.safe_load` (a superset of JSON).

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigParseError:  If the file cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigParseError(f"Failed to parse {path.name}: {exc}") from exc


def load_config(path: Union[str, Path]) -> RiskCalculationConfig:
    """
    Load a scoring configuration from a YAML or JSON file.

    Args:
        path: Path to the configuration document.

    Returns:
        The typed :class:`~riskworkup.scoring.rules.RiskCalculationConfig`.
    """
    config = config_from_dict(load_document(path))
    logger.debug(
        "Loaded scoring config %s from %s (%d factor rules)",
        config.version, path, len(config.factor_rules),
    )
    return config


def answers_from_dict(data: Mapping[str, Any]) -> Dict[str, float]:
    """
    Coerce a raw answers mapping into ``{name: number}``.

    Raises:
        ConfigParseError: If any value is not numeric.
    """
    data = _require_mapping(data, "Answers")
    return {str(k): _as_number(v, f"Answer {k!r}") for k, v in data.items()}
