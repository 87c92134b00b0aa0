import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from models.errors import InputMissing, RecognitionFailure
from models.field_matcher import AadhaarMode, MatchStrategy
from models.identity import IdType
from schemas.verify_schemas import (
    VerificationConfigOut,
    VerificationOut,
    VerifyTextRequest,
)
from services.verification_service import (
    current_config,
    verify_image_submission,
    verify_text_submission,
)

router = APIRouter(prefix="/verify", tags=["verify"])
logger = logging.getLogger("idverify.routes")


@router.get("/config", response_model=VerificationConfigOut)
def get_verification_config():
    return current_config()


@router.post("/text", response_model=VerificationOut, response_model_exclude_none=True)
def verify_text(payload: VerifyTextRequest):
    """Verify a claim against text the caller already recognised."""
    try:
        return verify_text_submission(payload, payload.raw_text)
    except InputMissing as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Text verification failed")
        raise HTTPException(status_code=500, detail="Verification failed") from exc


# Sync endpoint: FastAPI runs it in the threadpool, so OCR never blocks the loop
@router.post("/image", response_model=VerificationOut, response_model_exclude_none=True)
def verify_image(
    image: Optional[UploadFile] = File(None),
    name: str = Form(..., min_length=1),
    date_of_birth: date = Form(...),
    id_type: IdType = Form(...),
    id_number: str = Form(..., min_length=1),
    name_strategy: Optional[MatchStrategy] = Form(None),
    aadhaar_mode: Optional[AadhaarMode] = Form(None),
    approximate_threshold: Optional[float] = Form(None, ge=0.0, le=1.0),
):
    """Recognise the uploaded card image and verify the claim against it."""
    payload = VerifyTextRequest(
        name=name,
        date_of_birth=date_of_birth,
        id_type=id_type,
        id_number=id_number,
        name_strategy=name_strategy,
        aadhaar_mode=aadhaar_mode,
        approximate_threshold=approximate_threshold,
    )
    try:
        content = image.file.read() if image is not None else None
        return verify_image_submission(content, payload)
    except InputMissing as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RecognitionFailure as exc:
        logger.warning("Recognition failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Image verification failed")
        raise HTTPException(status_code=500, detail="Verification failed") from exc
