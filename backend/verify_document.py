"""
Verify a claimed identity against a card from the command line.

Examples:
    python verify_document.py --text ocr.txt --name "Asha Rao" --dob 1990-05-12 \
        --id-type pan --id-number ABCDE1234F
    python verify_document.py --image card.jpg --name "Asha Rao" --dob 1990-05-12 \
        --id-type aadhaar --id-number 4321 --aadhaar-mode last_four

Exit status: 0 all fields matched, 1 mismatch, 2 input or recognition error.
"""

import argparse
import json
import logging
import os
import sys
from datetime import date

from models.errors import VerificationError
from models.field_matcher import AadhaarMode, MatchStrategy
from models.id_card_ocr_model import recognize_card
from models.identity import ClaimedIdentity, IdType
from models.verification_engine import VerificationConfig, verify_identity

EXIT_SUCCESS = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PAN / Aadhaar card verification")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="File holding already-recognised card text")
    source.add_argument("--image", help="Card image to run OCR on")
    parser.add_argument("--name", required=True)
    parser.add_argument("--dob", required=True, type=date.fromisoformat,
                        help="Date of birth, YYYY-MM-DD")
    parser.add_argument("--id-type", required=True,
                        choices=[t.value for t in IdType])
    parser.add_argument("--id-number", required=True)
    parser.add_argument("--name-strategy", default=MatchStrategy.EXACT_LINE.value,
                        choices=[s.value for s in MatchStrategy])
    parser.add_argument("--aadhaar-mode", default=AadhaarMode.FULL_NUMBER.value,
                        choices=[m.value for m in AadhaarMode])
    parser.add_argument("--threshold", type=float, default=0.3,
                        help="Max edit-distance ratio for the approximate strategy")
    parser.add_argument("--show-text", action="store_true",
                        help="Include the recognised text in the output")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())

    claim = ClaimedIdentity(
        name=args.name,
        date_of_birth=args.dob,
        id_type=IdType(args.id_type),
        id_number=args.id_number,
    )
    try:
        config = VerificationConfig(
            name_strategy=args.name_strategy,
            approximate_threshold=args.threshold,
            aadhaar_mode=args.aadhaar_mode,
        )
        if args.text:
            with open(args.text, encoding="utf-8") as f:
                raw_text = f.read()
        else:
            raw_text = recognize_card(args.image)
        result = verify_identity(claim, raw_text, config)
    except (OSError, ValueError, VerificationError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR

    out = result.to_dict()
    if args.show_text:
        out["raw_text"] = raw_text
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return EXIT_SUCCESS if result.is_success else EXIT_MISMATCH


if __name__ == "__main__":
    sys.exit(main())
