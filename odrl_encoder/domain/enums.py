"""
Domain enums for the ODRL policy model.

These closed sets are matched exhaustively by the encoder; adding a member
requires a matching case there.
"""

from enum import Enum

from odrl_encoder.domain.vocabulary import ODRL_SCHEMA


class PolicyType(str, Enum):
    """Kind of policy being expressed."""

    SET = "SET"
    OFFER = "OFFER"
    CONTRACT = "CONTRACT"  # Encoded as an ODRL Agreement


class MultiplicityKind(str, Enum):
    """Logical combinator of a multiplicity constraint."""

    AND = "AND"
    OR = "OR"
    XONE = "XONE"  # Exactly one of


class Operator(str, Enum):
    """
    Operators for atomic constraints.

    Values are the names used by the policy store; `iri` is the ODRL
    representation written to the document.
    """

    EQ = "EQ"  # Equal
    NEQ = "NEQ"  # Not equal
    GT = "GT"  # Greater than
    GEQ = "GEQ"  # Greater than or equal
    LT = "LT"  # Less than
    LEQ = "LEQ"  # Less than or equal
    IN = "IN"  # Is part of
    HAS_PART = "HAS_PART"
    IS_A = "IS_A"
    IS_ALL_OF = "IS_ALL_OF"
    IS_ANY_OF = "IS_ANY_OF"
    IS_NONE_OF = "IS_NONE_OF"

    @property
    def iri(self) -> str:
        """ODRL IRI of this operator."""
        return ODRL_SCHEMA + _OPERATOR_TERMS[self]


_OPERATOR_TERMS = {
    Operator.EQ: "eq",
    Operator.NEQ: "neq",
    Operator.GT: "gt",
    Operator.GEQ: "gteq",
    Operator.LT: "lt",
    Operator.LEQ: "lteq",
    Operator.IN: "isPartOf",
    Operator.HAS_PART: "hasPart",
    Operator.IS_A: "isA",
    Operator.IS_ALL_OF: "isAllOf",
    Operator.IS_ANY_OF: "isAnyOf",
    Operator.IS_NONE_OF: "isNoneOf",
}
