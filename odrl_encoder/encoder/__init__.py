"""
JSON-LD encoder for ODRL usage policies.

This package turns immutable policy models into JSON-LD expanded-form
documents for contract negotiation.

Key Components:
- encoder: Recursive policy -> document transformation
- participants: Participant-IRI resolvers injected per encode
- serializer: JSON output and structural fingerprints

Design Principles:
- Purity: Encoding never mutates input and keeps no state between calls
- Closed variants: Unknown policy, rule, constraint or expression kinds fail fast
- Shape fidelity: Empty collections are emitted or omitted exactly as ODRL
  consumers expect
"""

from odrl_encoder.encoder.encoder import encode_policy
from odrl_encoder.encoder.participants import (
    CallableParticipantIdMapper,
    NoOpParticipantIdMapper,
    ParticipantIdMapper,
    StaticParticipantIdMapper,
    as_participant_id_mapper,
)
from odrl_encoder.encoder.serializer import (
    canonicalize_json,
    structural_fingerprint,
    to_json_pretty,
    to_json_string,
)

__all__ = [
    "encode_policy",
    "ParticipantIdMapper",
    "NoOpParticipantIdMapper",
    "StaticParticipantIdMapper",
    "CallableParticipantIdMapper",
    "as_participant_id_mapper",
    "to_json_string",
    "to_json_pretty",
    "canonicalize_json",
    "structural_fingerprint",
]
