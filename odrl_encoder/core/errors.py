"""
Domain-specific exceptions for the ODRL policy encoder.

All encode errors are synchronous and fatal to the call that raised them:
no partial document is ever returned. Callers map them onto their own
error categories.
"""

from typing import Any


class PolicyEncodingError(Exception):
    """Base exception for all policy encoding errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnsupportedVariantError(PolicyEncodingError):
    """
    Raised when a value outside a closed variant set reaches the encoder.

    Examples:
    - Policy type that is not SET, OFFER or CONTRACT
    - Constraint that is neither atomic nor multiplicity
    - Expression that is not a literal

    Indicates version skew between the policy producer and the encoder.
    """

    pass


class EncodingDepthExceededError(UnsupportedVariantError):
    """
    Raised when constraint or duty nesting is too deep to encode.

    Examples:
    - Duty consequence chain longer than the configured limit
    - A constraint that (directly or indirectly) contains itself
    """

    pass


class ParticipantResolutionError(PolicyEncodingError):
    """
    Raised when the participant-IRI resolver fails.

    A resolver returning no mapping is not an error; the field is omitted.
    """

    pass
