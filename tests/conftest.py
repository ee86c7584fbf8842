"""
Pytest configuration and shared fixtures for encoder tests.

Provides:
- AnyIO backend selection for ``@pytest.mark.anyio`` tests
- Policy model builders (atomic constraints, duty chains)
- Participant resolver and sample policy fixtures
- ``odrl`` helper for building full ODRL property IRIs
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Add project root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402 (import after path setup)

from odrl_encoder.domain.enums import Operator, PolicyType  # noqa: E402
from odrl_encoder.domain.models import (  # noqa: E402
    Action,
    AtomicConstraint,
    Duty,
    LiteralExpression,
    Permission,
    Policy,
)
from odrl_encoder.domain.vocabulary import ODRL_SCHEMA  # noqa: E402
from odrl_encoder.encoder import StaticParticipantIdMapper  # noqa: E402

SUPPLIER_BPN = "BPNL00000000SUPP"
CONSUMER_BPN = "BPNL00000000CONS"
SUPPLIER_IRI = "did:web:supplier.example"
CONSUMER_IRI = "did:web:consumer.example"


def odrl(term: str) -> str:
    """Full ODRL IRI for a vocabulary term."""
    return ODRL_SCHEMA + term


def make_atomic(
    left: str = "businessPartnerNumber",
    operator: Operator = Operator.EQ,
    right: str | int | float | bool = "BPNL00000000CONS",
) -> AtomicConstraint:
    return AtomicConstraint(
        left_expression=LiteralExpression(value=left),
        operator=operator,
        right_expression=LiteralExpression(value=right),
    )


def make_duty_chain(length: int, action_type: str = "notify") -> Duty:
    """Duty followed by ``length - 1`` consequences; the last has none."""
    duty = Duty(action=Action(type=f"{action_type}-{length - 1}"))
    for level in range(length - 2, -1, -1):
        duty = Duty(action=Action(type=f"{action_type}-{level}"), consequence=duty)
    return duty


# =============================================================================
# AnyIO
# =============================================================================
# Per AnyIO testing docs: https://anyio.readthedocs.io/en/stable/testing.html
@pytest.fixture
def anyio_backend():
    return "asyncio"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def participant_mapper() -> StaticParticipantIdMapper:
    return StaticParticipantIdMapper({SUPPLIER_BPN: SUPPLIER_IRI, CONSUMER_BPN: CONSUMER_IRI})


@pytest.fixture
def offer_policy() -> Policy:
    """Offer with one 'use' permission limited to BPNs greater than 1.0."""
    return Policy(
        type=PolicyType.OFFER,
        permissions=[
            Permission(
                action=Action(type="use"),
                constraints=[
                    make_atomic("businessPartnerNumber", Operator.GT, 1.0),
                ],
            )
        ],
    )
