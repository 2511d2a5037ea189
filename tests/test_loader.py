import json
import textwrap

import pytest

from riskworkup.core.config_hashing import compute_config_hash
from riskworkup.core.errors import ConfigParseError, ScoringErrorCode, UnknownOperatorError
from riskworkup.scoring.loader import answers_from_dict, config_from_dict, load_config
from riskworkup.scoring.rules import ScoringOperator, validate_risk_calculation_config


STRESS_YAML = textwrap.dedent("""\
    version: "v1.0.0"
    factorRules:
      - key: stress
        label: Stress
        operator: WEIGHTED_SUM
        questionIds: [q1, q2]
        weights:
          - {inputId: q1, weight: 0.7}
          - {inputId: q2, weight: 0.3}
      - key: sleep
        label: Sleep
        operator: THRESHOLD
        questionIds: [s1]
        thresholds:
          - {value: 0, score: 10, riskLevel: LOW}
          - {value: 5, score: 60, riskLevel: HIGH}
    overallRule:
      key: overall
      label: Overall
      operator: NORMALIZE
      questionIds: [stress, sleep]
      minValue: 0
      maxValue: 100
""")


@pytest.fixture
def yaml_config(tmp_path):
    path = tmp_path / "stress.yaml"
    path.write_text(STRESS_YAML, encoding="utf-8")
    return path


def test_load_yaml_config(yaml_config):
    config = load_config(yaml_config)

    assert config.version == "v1.0.0"
    assert [r.key for r in config.factor_rules] == ["stress", "sleep"]
    stress, sleep = config.factor_rules
    assert stress.operator is ScoringOperator.WEIGHTED_SUM
    assert stress.question_ids == ("q1", "q2")
    assert [(w.input_id, w.weight) for w in stress.weights] == [("q1", 0.7), ("q2", 0.3)]
    assert sleep.thresholds[1].risk_level == "HIGH"
    assert config.overall_rule.min_value == 0
    assert config.overall_rule.max_value == 100
    assert validate_risk_calculation_config(config).valid is True


def test_load_json_config_with_snake_case_keys(tmp_path):
    doc = {
        "version": "v2",
        "factor_rules": [{"key": "f", "label": "F", "operator": "SUM", "question_ids": ["q1"]}],
        "overall_rule": {"key": "overall", "operator": "MAX", "question_ids": ["f"]},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(doc), encoding="utf-8")

    config = load_config(path)
    assert config.factor_rules[0].question_ids == ("q1",)
    assert config.overall_rule.operator is ScoringOperator.MAX
    assert config.overall_rule.label == "overall"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_unparseable_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("version: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigParseError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ScoringErrorCode.PARSE_ERROR


def test_unknown_operator_rejected_at_parse():
    doc = {
        "version": "v1",
        "factorRules": [{"key": "f", "operator": "POWER", "questionIds": ["q1"]}],
        "overallRule": {"key": "overall", "operator": "SUM", "questionIds": ["f"]},
    }
    with pytest.raises(UnknownOperatorError):
        config_from_dict(doc)


@pytest.mark.parametrize(
    "doc, fragment",
    [
        ({"overallRule": {"key": "o", "operator": "SUM"}}, "version"),
        ({"version": "v1"}, "overallRule"),
        ({"version": "v1", "factorRules": {}, "overallRule": {"key": "o", "operator": "SUM"}}, "must be a list"),
        ({"version": "v1", "overallRule": {"operator": "SUM"}}, "key"),
        ({"version": "v1", "overallRule": {"key": "o", "operator": "SUM", "questionIds": ["a", "a"]}}, "unique"),
        (
            {"version": "v1", "overallRule": {"key": "o", "operator": "NORMALIZE", "minValue": "low", "maxValue": 1}},
            "must be a number",
        ),
    ],
)
def test_malformed_documents(doc, fragment):
    with pytest.raises(ConfigParseError, match=fragment):
        config_from_dict(doc)


def test_structural_problems_are_left_to_the_validator():
    doc = {"version": "v1", "overallRule": {"key": "o", "operator": "WEIGHTED_SUM", "questionIds": ["q1"]}}
    config = config_from_dict(doc)
    outcome = validate_risk_calculation_config(config)
    assert outcome.valid is False
    assert outcome.errors[0].startswith("Overall rule: ")


def test_answers_from_dict():
    assert answers_from_dict({"q1": 1, "q2": 2.5}) == {"q1": 1, "q2": 2.5}
    with pytest.raises(ConfigParseError):
        answers_from_dict({"q1": "three"})
    with pytest.raises(ConfigParseError):
        answers_from_dict({"q1": True})


# ---------------------------------------------------------------------------
# Config hashing
# ---------------------------------------------------------------------------

def test_config_hash_is_stable(yaml_config):
    first = compute_config_hash(load_config(yaml_config))
    second = compute_config_hash(load_config(yaml_config))
    assert first == second
    assert len(first) == 64


def test_config_hash_detects_changes(yaml_config, tmp_path):
    changed = tmp_path / "changed.yaml"
    changed.write_text(STRESS_YAML.replace("weight: 0.3", "weight: 0.4"), encoding="utf-8")
    assert compute_config_hash(load_config(yaml_config)) != compute_config_hash(load_config(changed))


def test_config_hash_same_for_yaml_and_json(yaml_config, tmp_path):
    import yaml

    as_json = tmp_path / "stress.json"
    as_json.write_text(json.dumps(yaml.safe_load(STRESS_YAML)), encoding="utf-8")
    assert compute_config_hash(load_config(yaml_config)) == compute_config_hash(load_config(as_json))
