import json

import pytest

from riskworkup import EvidencePack, perform_workup_check
from riskworkup.core.hashing import generate_evidence_pack_hash
from riskworkup.workup import (
    STRESS_ASSESSMENT_RULESET_V1,
    WorkupStatus,
    check_data_sufficiency,
    create_evidence_pack,
    determine_workup_status,
    get_ruleset_for_funnel,
    get_ruleset_version,
)

DIAGNOSTIC_TERMS = [
    "diagnose",
    "diagnosis",
    "krankheit",
    "störung",
    "syndrom",
    "behandlung",
    "therapie",
    "medikament",
    "arbeitsdiagnose",
    "differentialdiagnose",
]

COMPLETE_ANSWERS = {"stress_q1": 3, "stress_q2": "Arbeit", "sleep_q1": 4}


def _pack(answers, slug="stress-assessment", **flags):
    return EvidencePack("a-1", slug, answers=answers, **flags)


# ---------------------------------------------------------------------------
# Ruleset lookup
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("slug", ["stress-assessment", "stress", "  Stress-Assessment ", "STRESS"])
def test_ruleset_lookup_normalises_slug(slug):
    assert get_ruleset_for_funnel(slug) is STRESS_ASSESSMENT_RULESET_V1


@pytest.mark.parametrize("slug", ["cardio", "", None])
def test_unknown_funnel_has_no_ruleset(slug):
    assert get_ruleset_for_funnel(slug) is None
    assert get_ruleset_version(slug) is None


def test_ruleset_version():
    assert get_ruleset_version("stress-assessment") == "1.0.0"


def test_follow_up_text_names_what_is_collected():
    texts = {r.field_key: r.follow_up_question.question_text for r in STRESS_ASSESSMENT_RULESET_V1.rules}
    assert "Schlafqualität" in texts["sleep_quality"]
    assert "Stress" in texts["stress_triggers"]


# ---------------------------------------------------------------------------
# Sufficiency
# ---------------------------------------------------------------------------

def test_complete_evidence_is_sufficient():
    pack = _pack(COMPLETE_ANSWERS)
    result = check_data_sufficiency(pack)

    assert result.is_sufficient is True
    assert result.missing_data_fields == ()
    assert result.follow_up_questions == ()
    assert result.ruleset_version == "1.0.0"
    assert result.evidence_pack_hash == generate_evidence_pack_hash(pack)


def test_missing_sleep_answers():
    result = check_data_sufficiency(_pack({"stress_q1": 3}))

    assert result.is_sufficient is False
    assert result.missing_data_fields == ("sleep_quality",)
    assert len(result.follow_up_questions) == 1
    assert result.follow_up_questions[0].field_key == "sleep_quality"


def test_empty_evidence_sorted_by_priority():
    result = check_data_sufficiency(_pack({}))

    assert result.missing_data_fields == ("sleep_quality", "stress_triggers")
    priorities = [q.priority for q in result.follow_up_questions]
    assert priorities == sorted(priorities, reverse=True)
    assert result.follow_up_questions[0].field_key == "stress_triggers"


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_blank_answers_do_not_count(blank):
    result = check_data_sufficiency(_pack({"stress_q1": 3, "sleep_q1": blank}))
    assert result.missing_data_fields == ("sleep_quality",)


@pytest.mark.parametrize("value", [0, False])
def test_falsy_but_present_answers_count(value):
    result = check_data_sufficiency(_pack({"stress_q1": value, "sleep_q1": value}))
    assert result.is_sufficient is True


def test_unknown_funnel_is_sufficient_but_still_hashed():
    pack = _pack({}, slug="unknown-funnel")
    result = check_data_sufficiency(pack)

    assert result.is_sufficient is True
    assert result.missing_data_fields == ()
    assert result.ruleset_version is None
    assert len(result.evidence_pack_hash) == 64


def test_results_never_contain_diagnostic_language():
    for answers in ({}, {"stress_q1": 1}, COMPLETE_ANSWERS):
        payload = check_data_sufficiency(_pack(answers)).to_json().lower()
        for term in DIAGNOSTIC_TERMS:
            assert term not in payload, term


def test_same_evidence_same_result():
    assert check_data_sufficiency(_pack({"stress_q1": 1})) == check_data_sufficiency(_pack({"stress_q1": 1}))


def test_result_json_keeps_umlauts():
    payload = json.loads(check_data_sufficiency(_pack({})).to_json())
    texts = [q["question_text"] for q in payload["follow_up_questions"]]
    assert any("Schlafqualität" in t for t in texts)


# ---------------------------------------------------------------------------
# Workup status
# ---------------------------------------------------------------------------

def test_workup_status():
    assert determine_workup_status(_pack(COMPLETE_ANSWERS)) is WorkupStatus.READY_FOR_REVIEW
    assert determine_workup_status(_pack({})) is WorkupStatus.NEEDS_MORE_DATA
    assert WorkupStatus.NEEDS_MORE_DATA.value == "needs_more_data"


def test_perform_workup_check_matches_sufficiency():
    pack = _pack({"sleep_q1": 2})
    assert perform_workup_check(pack) == check_data_sufficiency(pack)


# ---------------------------------------------------------------------------
# Evidence pack assembly
# ---------------------------------------------------------------------------

def test_create_evidence_pack_from_rows():
    rows = [
        {"question_id": "stress_q1", "answer_value": 2},
        {"question_id": "sleep_q1", "answer_value": 1},
        {"question_id": "stress_q1", "answer_value": 4},
        {"question_id": None, "answer_value": 9},
    ]
    pack = create_evidence_pack("a-1", "stress", rows)

    assert dict(pack.answers) == {"stress_q1": 4, "sleep_q1": 1}
    assert pack.has_uploaded_documents is False
    assert pack.has_wearable_data is False


def test_create_evidence_pack_flags():
    pack = create_evidence_pack("a-1", "stress", [], has_uploaded_documents=True, has_wearable_data=None)
    assert pack.has_uploaded_documents is True
    assert pack.has_wearable_data is False


def test_evidence_pack_is_immutable():
    pack = _pack({"stress_q1": 1})
    with pytest.raises(TypeError):
        pack.answers["stress_q2"] = 2
    with pytest.raises(AttributeError):
        pack.funnel_slug = "other"
