import dataclasses
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from models.errors import InputMissing
from models.field_matcher import AadhaarMode, MatchStrategy
from models.identity import (
    NOT_FOUND,
    ClaimedIdentity,
    IdType,
    RecognizedDocument,
    VerificationStatus,
)
from models.verification_engine import (
    RunState,
    VerificationConfig,
    VerificationEngine,
    VerificationRun,
    verify_identity,
)

AUXILIARY_KEYS = {"father_name", "issue_date", "gender", "mobile", "address"}

SCENARIO_TEXT = "Asha Rao\n12/05/1990\nABCDE1234F"


def test_scenario_a_pan_success(pan_claim):
    result = verify_identity(pan_claim, SCENARIO_TEXT)
    assert result.status is VerificationStatus.SUCCESS
    assert result.mismatched_fields == ()
    assert result.extracted_fields["name"] == "Asha Rao"
    assert result.extracted_fields["dob"] == "12/05/1990"
    assert result.extracted_fields["pan"] == "ABCDE1234F"


def test_scenario_b_wrong_dob(pan_claim):
    result = verify_identity(pan_claim, SCENARIO_TEXT.replace("12/05/1990", "13/05/1990"))
    assert result.status is VerificationStatus.MISMATCH
    assert set(result.mismatched_fields) == {"DOB"}
    assert result.extracted_fields["dob"] == NOT_FOUND
    assert result.extracted_fields["name"] == "Asha Rao"
    assert result.extracted_fields["pan"] == "ABCDE1234F"


def test_scenario_c_aadhaar_last_four_missing():
    claim = ClaimedIdentity("Asha Rao", date(1990, 5, 12), IdType.AADHAAR, "4321")
    text = "Asha Rao\nDOB: 12/05/1990\nFemale\nVID 9123 4567 8901 4321\nMobile 9876543210"
    config = VerificationConfig(aadhaar_mode=AadhaarMode.LAST_FOUR)
    result = verify_identity(claim, text, config)
    assert "Aadhaar" in result.mismatched_fields
    assert result.extracted_fields["aadhaar"] == NOT_FOUND
    assert not AUXILIARY_KEYS & set(result.extracted_fields)


def test_pan_success_includes_auxiliary_fields(pan_claim, pan_text):
    result = verify_identity(pan_claim, pan_text)
    assert result.is_success
    assert result.extracted_fields["father_name"] == "Ramesh Rao"
    assert result.extracted_fields["issue_date"] == "03/07/2015"
    assert result.extracted_fields["mobile"] == "N/A"


def test_aadhaar_full_number_success(aadhaar_claim, aadhaar_text):
    result = verify_identity(aadhaar_claim, aadhaar_text)
    assert result.is_success
    assert result.extracted_fields["aadhaar"] == "5678 9012 4321"
    assert result.extracted_fields["gender"] == "Female"
    assert result.extracted_fields["mobile"] == "9876543210"
    assert result.extracted_fields["father_name"] == "N/A"


def test_aadhaar_last_four_success(aadhaar_text):
    claim = ClaimedIdentity("Asha Rao", date(1990, 5, 12), IdType.AADHAAR, "4321")
    result = verify_identity(claim, aadhaar_text,
                             VerificationConfig(aadhaar_mode="last_four"))
    assert result.is_success
    assert result.extracted_fields["aadhaar"] == "XXXX XXXX 4321"


def test_mismatches_follow_evaluation_order(pan_claim):
    result = verify_identity(pan_claim, "nothing useful here")
    assert result.mismatched_fields == ("Name", "DOB", "PAN")
    assert set(result.extracted_fields) == {"name", "dob", "pan"}


def test_auxiliary_fields_absent_on_any_mismatch(aadhaar_claim, aadhaar_text):
    text = aadhaar_text.replace("Asha Rao", "Priya Menon")
    result = verify_identity(aadhaar_claim, text)
    assert result.mismatched_fields == ("Name",)
    assert not AUXILIARY_KEYS & set(result.extracted_fields)


def test_badly_formatted_pan_is_a_mismatch_not_an_error(pan_claim):
    claim = dataclasses.replace(pan_claim, id_number="ABCDE12345")
    result = verify_identity(claim, SCENARIO_TEXT + "\nABCDE12345")
    assert result.mismatched_fields == ("PAN",)


def test_name_strategy_is_configurable(pan_claim):
    text = SCENARIO_TEXT.replace("Asha Rao", "Asha Ra0")
    assert not verify_identity(pan_claim, text).is_success
    approx = VerificationConfig(name_strategy=MatchStrategy.APPROXIMATE)
    assert verify_identity(pan_claim, text, approx).is_success


def test_exact_line_rejects_partial_name(pan_claim):
    claim = dataclasses.replace(pan_claim, name="Rao")
    assert verify_identity(claim, SCENARIO_TEXT).mismatched_fields == ("Name",)
    substring = VerificationConfig(name_strategy="substring")
    assert verify_identity(claim, SCENARIO_TEXT, substring).is_success


@pytest.mark.parametrize("raw_text", [None, "", "   \n  "])
def test_missing_text_is_a_precondition_failure(pan_claim, raw_text):
    with pytest.raises(InputMissing):
        verify_identity(pan_claim, raw_text)


def test_result_is_immutable(pan_claim):
    result = verify_identity(pan_claim, SCENARIO_TEXT)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.status = VerificationStatus.MISMATCH
    with pytest.raises(TypeError):
        result.extracted_fields["name"] = "Someone"


def test_result_to_dict(pan_claim):
    body = verify_identity(pan_claim, SCENARIO_TEXT.replace("ABCDE1234F", "")).to_dict()
    assert body["status"] == "MISMATCH"
    assert body["mismatched_fields"] == ["PAN"]
    assert body["extracted_fields"]["pan"] == NOT_FOUND


def test_run_transitions_once(pan_claim):
    run = VerificationRun(pan_claim, RecognizedDocument(SCENARIO_TEXT), VerificationConfig())
    assert run.state is RunState.IDLE
    run.execute()
    assert run.state is RunState.SUCCESS
    with pytest.raises(RuntimeError):
        run.execute()


def test_config_rejects_bad_threshold():
    with pytest.raises(ValueError):
        VerificationConfig(approximate_threshold=2.0)


def test_engine_is_safe_to_share_between_threads(pan_claim):
    engine = VerificationEngine()
    good = SCENARIO_TEXT
    bad = SCENARIO_TEXT.replace("12/05/1990", "13/05/1990")
    texts = [good, bad] * 20
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda t: engine.verify(pan_claim, t), texts))
    assert [r.is_success for r in results] == [True, False] * 20


def test_date_split_across_lines_is_not_a_birth_date(pan_claim):
    text = "Asha Rao\nFlat 12\n05\n1990 Road\nABCDE1234F"
    result = verify_identity(pan_claim, text)
    assert result.mismatched_fields == ("DOB",)


def test_aadhaar_claim_with_irregular_spacing(aadhaar_text):
    claim = ClaimedIdentity("Asha Rao", date(1990, 5, 12), IdType.AADHAAR, "5678 90124321")
    assert verify_identity(claim, aadhaar_text).is_success
