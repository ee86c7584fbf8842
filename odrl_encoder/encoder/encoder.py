"""
Policy encoder: ODRL policy model -> JSON-LD expanded-form document.

Walks a Policy and produces a tree of dicts, lists and strings that a
JSON-LD serialization layer or negotiation client writes to the wire.

Output shape rules:
- permission / prohibition / obligation arrays are always present
- assignee / assigner / target appear only when set (and resolved)
- a rule's constraint array appears only when the rule has constraints
- duty and consequence appear only when present; consequence is a single
  object, not an array
- operators and participants are arrays holding one {"@id": iri} object

Each encode stamps the document with a fresh random @id, so two encodes of
equal policies differ in that one field only.
"""

import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Never, NoReturn

from odrl_encoder.core.config import settings
from odrl_encoder.core.errors import (
    EncodingDepthExceededError,
    ParticipantResolutionError,
    UnsupportedVariantError,
)
from odrl_encoder.core.observability import metrics
from odrl_encoder.core.telemetry import get_tracer
from odrl_encoder.domain.enums import MultiplicityKind, Operator, PolicyType
from odrl_encoder.domain.models import (
    Action,
    AtomicConstraint,
    Constraint,
    Duty,
    Expression,
    LiteralExpression,
    MultiplicityConstraint,
    Permission,
    Policy,
    Prohibition,
    Rule,
)
from odrl_encoder.domain.vocabulary import (
    ID,
    ODRL_ACTION_ATTRIBUTE,
    ODRL_ACTION_TYPE_ATTRIBUTE,
    ODRL_AND_CONSTRAINT_ATTRIBUTE,
    ODRL_ASSIGNEE_ATTRIBUTE,
    ODRL_ASSIGNER_ATTRIBUTE,
    ODRL_CONSEQUENCE_ATTRIBUTE,
    ODRL_CONSTRAINT_ATTRIBUTE,
    ODRL_DUTY_ATTRIBUTE,
    ODRL_INCLUDED_IN_ATTRIBUTE,
    ODRL_LEFT_OPERAND_ATTRIBUTE,
    ODRL_OBLIGATION_ATTRIBUTE,
    ODRL_OPERATOR_ATTRIBUTE,
    ODRL_OR_CONSTRAINT_ATTRIBUTE,
    ODRL_PERMISSION_ATTRIBUTE,
    ODRL_POLICY_TYPE_AGREEMENT,
    ODRL_POLICY_TYPE_OFFER,
    ODRL_POLICY_TYPE_SET,
    ODRL_PROHIBITION_ATTRIBUTE,
    ODRL_REFINEMENT_ATTRIBUTE,
    ODRL_RIGHT_OPERAND_ATTRIBUTE,
    ODRL_SCHEMA,
    ODRL_TARGET_ATTRIBUTE,
    ODRL_XONE_CONSTRAINT_ATTRIBUTE,
    TYPE,
    VALUE,
)
from odrl_encoder.encoder.participants import ParticipantIriResolver, as_participant_id_mapper

logger = logging.getLogger(__name__)


def encode_policy(
    policy: Policy,
    participant_id_mapper: ParticipantIriResolver,
    *,
    max_depth: int | None = None,
) -> dict[str, Any]:
    """
    Encode a Policy as a JSON-LD expanded-form document.

    Args:
        policy: Policy to encode (never mutated)
        participant_id_mapper: Resolver for assignee/assigner IRIs, either an
                               object with ``to_iri()`` or a plain function.
                               Returning None omits the field.
        max_depth: Maximum nesting of rules and constraints. Defaults to
                   ``settings.encoder_max_depth``.

    Returns:
        Document dict with a fresh ``@id``

    Raises:
        UnsupportedVariantError: Policy type, rule, constraint or expression
                                 outside the known variants
        EncodingDepthExceededError: Nesting deeper than max_depth, or cyclic
        ParticipantResolutionError: The resolver raised
        ValueError: max_depth is less than 1

    Example Output:
        {
            "@id": "6f1c...",
            "@type": "http://www.w3.org/ns/odrl/2/Offer",
            "http://www.w3.org/ns/odrl/2/permission": [
                {
                    "http://www.w3.org/ns/odrl/2/action": {
                        "http://www.w3.org/ns/odrl/2/type": "use"
                    }
                }
            ],
            "http://www.w3.org/ns/odrl/2/prohibition": [],
            "http://www.w3.org/ns/odrl/2/obligation": []
        }
    """
    if max_depth is not None and max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")

    start_time = time.perf_counter()
    visitor = _PolicyVisitor(
        as_participant_id_mapper(participant_id_mapper),
        settings.encoder_max_depth if max_depth is None else max_depth,
    )

    with get_tracer().start_as_current_span("odrl.encode_policy") as span:
        try:
            document = visitor.visit_policy(policy)
        except Exception:
            _record_encoder_metrics("error", time.perf_counter() - start_time, 0, 0)
            raise

        rule_count = (
            len(policy.permissions) + len(policy.prohibitions) + len(policy.obligations)
        )
        span.set_attribute("odrl.policy_type", PolicyType(policy.type).value)
        span.set_attribute("odrl.rule_count", rule_count)

    duration = time.perf_counter() - start_time
    logger.info(
        "Encoded %s policy %s: %d rules, depth=%d, duration=%.6fs",
        PolicyType(policy.type).value,
        document[ID],
        rule_count,
        visitor.deepest,
        duration,
    )
    _record_encoder_metrics("success", duration, rule_count, visitor.deepest)

    return document


def _record_encoder_metrics(status: str, duration: float, rule_count: int, depth: int) -> None:
    metrics.encoder_encodes_total.labels(status=status).inc()
    metrics.encoder_duration_seconds.observe(duration)

    if status == "success":
        metrics.encoder_rules_count.observe(rule_count)
        metrics.encoder_max_nesting_depth.observe(depth)


class _PolicyVisitor:
    """
    Walks the policy model, one instance per encode call.

    Every rule and constraint visit goes through ``_descend``, which bounds
    nesting and rejects nodes that contain themselves. ``path`` arguments are
    JSONPath-like locations used in error details.
    """

    def __init__(self, participant_id_mapper, max_depth: int) -> None:
        self._participant_id_mapper = participant_id_mapper
        self._max_depth = max_depth
        # id() of every node on the current recursion path
        self._active: list[int] = []
        self.deepest = 0

    @contextmanager
    def _descend(self, node: object, path: str) -> Iterator[None]:
        if id(node) in self._active:
            raise EncodingDepthExceededError(
                f"Cyclic policy structure at {path}",
                details={"path": path, "type": type(node).__name__},
            )
        if len(self._active) >= self._max_depth:
            raise EncodingDepthExceededError(
                f"Policy nesting exceeds maximum depth of {self._max_depth} at {path}",
                details={"path": path, "max_depth": self._max_depth},
            )

        self._active.append(id(node))
        self.deepest = max(self.deepest, len(self._active))
        try:
            yield
        finally:
            self._active.pop()

    # -------------------------------------------------------------------------
    # Policy
    # -------------------------------------------------------------------------

    def visit_policy(self, policy: Policy) -> dict[str, Any]:
        if not isinstance(policy, Policy):
            raise UnsupportedVariantError(
                f"Cannot encode {type(policy).__name__} as a policy",
                details={"path": "$", "type": type(policy).__name__},
            )

        policy_type = _policy_type_iri(policy.type)
        assignee = self._resolve_participant(policy.assignee, "assignee")
        assigner = self._resolve_participant(policy.assigner, "assigner")

        document: dict[str, Any] = {
            ID: str(uuid.uuid4()),
            TYPE: policy_type,
            ODRL_PERMISSION_ATTRIBUTE: [
                self.visit_rule(permission, Permission, f"$.permission[{i}]")
                for i, permission in enumerate(policy.permissions)
            ],
            ODRL_PROHIBITION_ATTRIBUTE: [
                self.visit_rule(prohibition, Prohibition, f"$.prohibition[{i}]")
                for i, prohibition in enumerate(policy.prohibitions)
            ],
            ODRL_OBLIGATION_ATTRIBUTE: [
                self.visit_rule(duty, Duty, f"$.obligation[{i}]")
                for i, duty in enumerate(policy.obligations)
            ],
        }

        if assignee is not None:
            document[ODRL_ASSIGNEE_ATTRIBUTE] = _id_array(assignee)
        if assigner is not None:
            document[ODRL_ASSIGNER_ATTRIBUTE] = _id_array(assigner)
        if policy.target is not None:
            document[ODRL_TARGET_ATTRIBUTE] = _id_array(policy.target)

        return document

    def _resolve_participant(self, participant_id: str | None, field: str) -> str | None:
        if participant_id is None:
            return None

        try:
            iri = self._participant_id_mapper.to_iri(participant_id)
        except Exception as e:
            raise ParticipantResolutionError(
                f"Failed to resolve {field} '{participant_id}' to an IRI",
                details={"path": f"$.{field}", "participant_id": participant_id, "error": str(e)},
            ) from e

        if iri is None:
            logger.debug("No IRI mapping for %s '%s', omitting it", field, participant_id)
        return iri

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def visit_rule(self, rule: Rule, kind: type[Rule], path: str) -> dict[str, Any]:
        """Encode ``rule``, which must be a ``kind`` at this position."""
        if not isinstance(rule, kind):
            _unsupported(rule, path)

        with self._descend(rule, path):
            match rule:
                case Permission():
                    return self._visit_permission(rule, path)
                case Prohibition():
                    return self._visit_rule_body(rule, path)
                case Duty():
                    return self._visit_duty(rule, path)
                case _:
                    _unsupported(rule, path)

    def _visit_permission(self, permission: Permission, path: str) -> dict[str, Any]:
        encoded = self._visit_rule_body(permission, path)
        if permission.duties:
            encoded[ODRL_DUTY_ATTRIBUTE] = [
                self.visit_rule(duty, Duty, f"{path}.duty[{i}]")
                for i, duty in enumerate(permission.duties)
            ]
        return encoded

    def _visit_duty(self, duty: Duty, path: str) -> dict[str, Any]:
        encoded = self._visit_rule_body(duty, path)
        if duty.consequence is not None:
            encoded[ODRL_CONSEQUENCE_ATTRIBUTE] = self.visit_rule(
                duty.consequence, Duty, f"{path}.consequence"
            )
        return encoded

    def _visit_rule_body(self, rule: Rule, path: str) -> dict[str, Any]:
        """Action and constraints, shared by every rule kind."""
        encoded: dict[str, Any] = {
            ODRL_ACTION_ATTRIBUTE: self._visit_action(rule.action, f"{path}.action"),
        }
        if rule.constraints:
            encoded[ODRL_CONSTRAINT_ATTRIBUTE] = [
                self.visit_constraint(constraint, f"{path}.constraint[{i}]")
                for i, constraint in enumerate(rule.constraints)
            ]
        return encoded

    def _visit_action(self, action: Action | None, path: str) -> dict[str, Any]:
        if action is None:
            return {}

        encoded: dict[str, Any] = {ODRL_ACTION_TYPE_ATTRIBUTE: action.type}
        if action.included_in is not None:
            encoded[ODRL_INCLUDED_IN_ATTRIBUTE] = action.included_in
        if action.constraint is not None:
            encoded[ODRL_REFINEMENT_ATTRIBUTE] = self.visit_constraint(
                action.constraint, f"{path}.refinement"
            )
        return encoded

    # -------------------------------------------------------------------------
    # Constraints and expressions
    # -------------------------------------------------------------------------

    def visit_constraint(self, constraint: Constraint, path: str) -> dict[str, Any]:
        with self._descend(constraint, path):
            match constraint:
                case AtomicConstraint():
                    return {
                        ODRL_LEFT_OPERAND_ATTRIBUTE: self.visit_expression(
                            constraint.left_expression, f"{path}.leftOperand"
                        ),
                        ODRL_OPERATOR_ATTRIBUTE: _id_array(
                            _operator_iri(constraint.operator, f"{path}.operator")
                        ),
                        ODRL_RIGHT_OPERAND_ATTRIBUTE: self.visit_expression(
                            constraint.right_expression, f"{path}.rightOperand"
                        ),
                    }
                case MultiplicityConstraint():
                    attribute = _multiplicity_attribute(constraint.kind, path)
                    member_path = f"{path}.{attribute.removeprefix(ODRL_SCHEMA)}"
                    return {
                        attribute: [
                            self.visit_constraint(member, f"{member_path}[{i}]")
                            for i, member in enumerate(constraint.constraints)
                        ]
                    }
                case _:
                    _unsupported(constraint, path)

    def visit_expression(self, expression: Expression, path: str) -> dict[str, Any]:
        match expression:
            case LiteralExpression():
                return {VALUE: _literal_to_string(expression.value)}
            case _:
                _unsupported(expression, path)


def _policy_type_iri(policy_type: PolicyType) -> str:
    match policy_type:
        case PolicyType.SET:
            return ODRL_POLICY_TYPE_SET
        case PolicyType.OFFER:
            return ODRL_POLICY_TYPE_OFFER
        case PolicyType.CONTRACT:
            return ODRL_POLICY_TYPE_AGREEMENT
        case _:
            _unsupported(policy_type, "$.type")


def _multiplicity_attribute(kind: MultiplicityKind, path: str) -> str:
    match kind:
        case MultiplicityKind.AND:
            return ODRL_AND_CONSTRAINT_ATTRIBUTE
        case MultiplicityKind.OR:
            return ODRL_OR_CONSTRAINT_ATTRIBUTE
        case MultiplicityKind.XONE:
            return ODRL_XONE_CONSTRAINT_ATTRIBUTE
        case _:
            _unsupported(kind, path)


def _operator_iri(operator: Operator, path: str) -> str:
    if not isinstance(operator, Operator):
        raise UnsupportedVariantError(
            f"Unsupported operator {operator!r} at {path}",
            details={"path": path, "operator": repr(operator)},
        )
    return operator.iri


def _literal_to_string(value: str | int | float | bool) -> str:
    # Booleans use JSON spelling rather than Python's "True"/"False"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _id_array(iri: str) -> list[dict[str, str]]:
    return [{ID: iri}]


def _unsupported(node: Never, path: str) -> NoReturn:
    """
    Reject a value outside a closed variant set.

    Typed ``Never`` so a type checker reports any ``match`` that does not
    handle every variant before falling through to here.
    """
    raise UnsupportedVariantError(
        f"Unsupported {type(node).__name__} at {path}",
        details={"path": path, "type": type(node).__name__, "value": repr(node)},
    )
