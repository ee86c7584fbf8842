"""
Immutable policy model consumed by the encoder.

Policies are produced by the policy store or the negotiation layer. Payloads
may use camelCase keys (``leftExpression``, ``includedIn``) or the
snake_case field names; sequences are stored as tuples.

Constraint payloads carry a ``constraintType`` discriminator (``atomic`` or
``multiplicity``), expression payloads an ``expressionType`` (``literal``).
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from odrl_encoder.domain.enums import MultiplicityKind, Operator, PolicyType


class PolicyNode(BaseModel):
    """Base for all policy model types."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )


# =============================================================================
# Expressions
# =============================================================================


class LiteralExpression(PolicyNode):
    expression_type: Literal["literal"] = "literal"
    value: str | int | float | bool


# Closed set; extend with a discriminated union when a second variant appears
Expression = LiteralExpression


# =============================================================================
# Constraints
# =============================================================================


class AtomicConstraint(PolicyNode):
    """Comparison of two expressions, e.g. ``businessPartnerNumber GT 1.0``."""

    constraint_type: Literal["atomic"] = "atomic"
    left_expression: Expression
    operator: Operator
    right_expression: Expression


class MultiplicityConstraint(PolicyNode):
    """Logical AND / OR / XONE over member constraints."""

    constraint_type: Literal["multiplicity"] = "multiplicity"
    kind: MultiplicityKind
    constraints: tuple[Constraint, ...] = ()


Constraint = Annotated[
    AtomicConstraint | MultiplicityConstraint,
    Field(discriminator="constraint_type"),
]

MultiplicityConstraint.model_rebuild()


# =============================================================================
# Rules
# =============================================================================


class Action(PolicyNode):
    type: str
    included_in: str | None = None
    # Action refinement
    constraint: Constraint | None = None


class Rule(PolicyNode):
    """Shape shared by permissions, prohibitions and duties."""

    action: Action | None = None
    constraints: tuple[Constraint, ...] = ()


class Permission(Rule):
    duties: tuple[Duty, ...] = ()


class Prohibition(Rule):
    pass


class Duty(Rule):
    """
    An obligation. ``consequence`` is the duty that applies if this one is
    not fulfilled; consequences form a chain.
    """

    consequence: Duty | None = None


Permission.model_rebuild()


# =============================================================================
# Policy
# =============================================================================


class Policy(PolicyNode):
    type: PolicyType = PolicyType.SET
    permissions: tuple[Permission, ...] = ()
    prohibitions: tuple[Prohibition, ...] = ()
    obligations: tuple[Duty, ...] = ()
    # Participant identifiers, resolved to IRIs at encode time
    assignee: str | None = None
    assigner: str | None = None
    # Asset IRI
    target: str | None = None
