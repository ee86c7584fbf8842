"""
Unit tests for document serialization and fingerprints.
"""

import json

import pytest

from odrl_encoder.domain.enums import PolicyType
from odrl_encoder.domain.models import Action, Permission, Policy
from odrl_encoder.encoder import (
    NoOpParticipantIdMapper,
    canonicalize_json,
    encode_policy,
    structural_fingerprint,
    to_json_pretty,
    to_json_string,
)
from tests.conftest import odrl


class TestJsonOutput:
    """Wire serialization keeps encoder key order."""

    @pytest.mark.anyio
    async def test_compact_output_preserves_key_order(self, offer_policy):
        document = encode_policy(offer_policy, NoOpParticipantIdMapper())

        text = to_json_string(document)

        assert text.startswith('{"@id":')
        assert list(json.loads(text)) == list(document)
        assert "\n" not in text

    @pytest.mark.anyio
    async def test_pretty_output_parses_to_same_document(self, offer_policy):
        document = encode_policy(offer_policy, NoOpParticipantIdMapper())

        text = to_json_pretty(document)

        assert "\n  " in text
        assert json.loads(text) == document

    @pytest.mark.anyio
    async def test_non_ascii_kept(self):
        assert to_json_string({"@value": "Zürich"}) == '{"@value":"Zürich"}'


class TestCanonicalize:
    """Canonical form sorts keys and keeps list order."""

    @pytest.mark.anyio
    async def test_nested_keys_sorted(self):
        canonical = canonicalize_json({"z": 1, "a": {"c": 2, "b": [{"y": 1, "x": 2}]}})

        assert list(canonical) == ["a", "z"]
        assert list(canonical["a"]) == ["b", "c"]
        assert list(canonical["a"]["b"][0]) == ["x", "y"]

    @pytest.mark.anyio
    async def test_list_order_preserved(self):
        assert canonicalize_json([3, 1, 2]) == [3, 1, 2]


class TestStructuralFingerprint:
    """Fingerprints ignore the generated @id only."""

    @pytest.mark.anyio
    async def test_equal_policies_share_fingerprint(self, offer_policy):
        first = encode_policy(offer_policy, NoOpParticipantIdMapper())
        second = encode_policy(offer_policy, NoOpParticipantIdMapper())

        assert first["@id"] != second["@id"]
        assert structural_fingerprint(first) == structural_fingerprint(second)

    @pytest.mark.anyio
    async def test_fingerprint_is_sha256_hex(self, offer_policy):
        fingerprint = structural_fingerprint(encode_policy(offer_policy, NoOpParticipantIdMapper()))

        assert len(fingerprint) == 64
        int(fingerprint, 16)

    @pytest.mark.anyio
    async def test_different_policies_differ(self):
        use = Policy(permissions=[Permission(action=Action(type="use"))])
        offer = Policy(type=PolicyType.OFFER, permissions=[Permission(action=Action(type="use"))])

        assert structural_fingerprint(
            encode_policy(use, NoOpParticipantIdMapper())
        ) != structural_fingerprint(encode_policy(offer, NoOpParticipantIdMapper()))

    @pytest.mark.anyio
    async def test_rule_order_changes_fingerprint(self):
        """Test that reordering permissions is a structural change."""
        read = Permission(action=Action(type="read"))
        use = Permission(action=Action(type="use"))

        first = encode_policy(Policy(permissions=[read, use]), NoOpParticipantIdMapper())
        second = encode_policy(Policy(permissions=[use, read]), NoOpParticipantIdMapper())

        assert first[odrl("permission")] != second[odrl("permission")]
        assert structural_fingerprint(first) != structural_fingerprint(second)
