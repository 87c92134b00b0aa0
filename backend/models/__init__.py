# PAN / Aadhaar Card Verification Models
# This package contains:
#   - errors: Verification error types
#   - identity: Claim, document and result types
#   - text_normalizer: Normalization and date-token extraction
#   - field_validator: PAN / Aadhaar format checks
#   - field_matcher: Line-match strategies and per-field matchers
#   - auxiliary_extractor: Father's name, gender, mobile, address
#   - verification_engine: Claim vs. card text, IDLE -> SUCCESS / MISMATCH
#   - text_recognizer: EasyOCR recognition
#   - id_card_ocr_model: Bridge for the verification service
