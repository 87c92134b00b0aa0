import pytest

from models.auxiliary_extractor import extract_auxiliary_fields
from models.identity import NOT_APPLICABLE, NOT_FOUND, IdType


def test_pan_fields(pan_text):
    fields = extract_auxiliary_fields(IdType.PAN, pan_text)
    assert fields["father_name"] == "Ramesh Rao"
    assert fields["issue_date"] == "03/07/2015"
    assert fields["mobile"] == NOT_APPLICABLE
    assert fields["gender"] == NOT_APPLICABLE


@pytest.mark.parametrize("text, expected", [
    ("Father's Name: Ramesh Rao", "Ramesh Rao"),
    ("FATHERS NAME\nRAMESH  RAO", "RAMESH RAO"),
    ("Father’s Name - Ramesh", "Ramesh"),
    ("S/O Ramesh Rao", "Ramesh Rao"),
    ("S / O: Ramesh Rao", "Ramesh Rao"),
])
def test_pan_father_name_labels(text, expected):
    assert extract_auxiliary_fields(IdType.PAN, text)["father_name"] == expected


def test_pan_father_label_wins_over_son_of():
    text = "S/O Someone Else\nFather's Name: Ramesh Rao"
    assert extract_auxiliary_fields(IdType.PAN, text)["father_name"] == "Ramesh Rao"


def test_pan_missing_fields():
    fields = extract_auxiliary_fields(IdType.PAN, "Asha Rao\nABCDE1234F")
    assert fields["father_name"] == NOT_FOUND
    assert fields["issue_date"] == NOT_FOUND


def test_aadhaar_fields(aadhaar_text):
    fields = extract_auxiliary_fields(IdType.AADHAAR, aadhaar_text)
    assert fields == {
        "gender": "Female",
        "mobile": "9876543210",
        "address": "12 MG Road, Bengaluru 560001",
        "father_name": NOT_APPLICABLE,
    }


@pytest.mark.parametrize("text, expected", [
    ("MALE", "Male"),
    ("Sex: female", "Female"),
    ("Gender / OTHER", "Other"),
    ("Maletown", NOT_FOUND),
])
def test_aadhaar_gender(text, expected):
    assert extract_auxiliary_fields(IdType.AADHAAR, text)["gender"] == expected


@pytest.mark.parametrize("text, expected", [
    ("Mobile 9876543210", "9876543210"),
    ("5876543210", NOT_FOUND),          # must start with 6-9
    ("98765432101", NOT_FOUND),         # 11 digits
    ("5678 9012 4321", NOT_FOUND),
])
def test_aadhaar_mobile(text, expected):
    assert extract_auxiliary_fields(IdType.AADHAAR, text)["mobile"] == expected


def test_first_match_wins():
    text = "Mobile 9876543210\nAlt 9123456780"
    assert extract_auxiliary_fields(IdType.AADHAAR, text)["mobile"] == "9876543210"


def test_never_raises_on_empty_text():
    fields = extract_auxiliary_fields(IdType.AADHAAR, "")
    assert fields["gender"] == NOT_FOUND
    assert fields["mobile"] == NOT_FOUND


@pytest.mark.parametrize("text", [
    "Father's Name\n\n12/05/1990",
    "Father's Name:\n   \nRamesh Rao",
    "S/O\n\nRamesh Rao",
])
def test_pan_father_name_skips_no_blank_lines(text):
    assert extract_auxiliary_fields(IdType.PAN, text)["father_name"] == NOT_FOUND


def test_aadhaar_mobile_ascii_digits_only():
    text = "Mobile ९८७६५४३२१०"
    assert extract_auxiliary_fields(IdType.AADHAAR, text)["mobile"] == NOT_FOUND
