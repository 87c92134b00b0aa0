from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models.field_matcher import AadhaarMode, MatchStrategy
from models.identity import IdType, VerificationStatus


class ClaimSchema(BaseModel):
    name: str = Field(..., min_length=1)
    date_of_birth: date
    id_type: IdType
    id_number: str = Field(..., min_length=1)


class MatchOptionsSchema(BaseModel):
    # None = use the server default
    name_strategy: Optional[MatchStrategy] = None
    aadhaar_mode: Optional[AadhaarMode] = None
    approximate_threshold: Optional[float] = Field(None, ge=0.0, le=1.0)


class VerifyTextRequest(ClaimSchema, MatchOptionsSchema):
    raw_text: Optional[str] = None


class VerificationOut(BaseModel):
    status: VerificationStatus
    mismatched_fields: List[str]
    extracted_fields: Dict[str, str]
    name_strategy: MatchStrategy
    aadhaar_mode: Optional[AadhaarMode] = None
    raw_text: Optional[str] = None


class VerificationConfigOut(BaseModel):
    name_strategy: MatchStrategy
    approximate_threshold: float
    aadhaar_mode: AadhaarMode
