"""Exceptions raised around the verification core.

Expected outcomes (missing fields, badly formatted claims) are never
raised; they are encoded in the ``VerificationResult``.  Only conditions
that make a verification impossible propagate as exceptions.
"""


class VerificationError(Exception):
    """Base class for failures that prevent a verification from running."""


class InputMissing(VerificationError):
    """No image or no document text was supplied."""


class RecognitionFailure(VerificationError):
    """The recognition engine could not turn the image into text."""
