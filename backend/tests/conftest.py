from datetime import date

import pytest

from models.identity import ClaimedIdentity, IdType


PAN_CARD_TEXT = """INCOME TAX DEPARTMENT
GOVT. OF INDIA
Asha Rao
Father's Name
Ramesh Rao
12/05/1990
Permanent Account Number
ABCDE1234F
Date of Issue: 03-07-2015
"""

AADHAAR_CARD_TEXT = """Government of India
Asha Rao
DOB: 12/05/1990
Female
Mobile No: 9876543210
5678 9012 4321
Address: 12 MG Road, Bengaluru 560001
"""


@pytest.fixture
def pan_text():
    return PAN_CARD_TEXT


@pytest.fixture
def aadhaar_text():
    return AADHAAR_CARD_TEXT


@pytest.fixture
def pan_claim():
    return ClaimedIdentity(
        name="Asha Rao",
        date_of_birth=date(1990, 5, 12),
        id_type=IdType.PAN,
        id_number="ABCDE1234F",
    )


@pytest.fixture
def aadhaar_claim():
    return ClaimedIdentity(
        name="Asha Rao",
        date_of_birth=date(1990, 5, 12),
        id_type=IdType.AADHAAR,
        id_number="5678 9012 4321",
    )
