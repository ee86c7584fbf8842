"""
Unit tests for the odrl-encode command.

Tests cover:
- Compact, pretty and fingerprint output
- Participant mapping sources
- Exit codes for invalid input and encoding failures
"""

import io
import json
import logging

import pytest

from cli.encode import EXIT_ENCODING_ERROR, EXIT_INVALID_INPUT, build_parser, main
from odrl_encoder.core.config import settings
from tests.conftest import CONSUMER_BPN, CONSUMER_IRI, SUPPLIER_BPN, odrl

POLICY_PAYLOAD = {
    "type": "OFFER",
    "permissions": [
        {
            "action": {"type": "use"},
            "constraints": [
                {
                    "constraintType": "atomic",
                    "leftExpression": {"value": "businessPartnerNumber"},
                    "operator": "EQ",
                    "rightExpression": {"value": CONSUMER_BPN},
                }
            ],
        }
    ],
    "assignee": CONSUMER_BPN,
    "assigner": SUPPLIER_BPN,
}


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def policy_file(tmp_path):
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(POLICY_PAYLOAD), encoding="utf-8")
    return path


class TestOutput:
    """Successful encodes print the document."""

    @pytest.mark.anyio
    async def test_compact_output(self, policy_file, capsys):
        main([str(policy_file), "--identity-participants"])

        out = capsys.readouterr().out.strip()
        document = json.loads(out)
        assert "\n" not in out
        assert document["@type"] == odrl("Offer")
        assert document[odrl("assignee")] == [{"@id": CONSUMER_BPN}]

    @pytest.mark.anyio
    async def test_pretty_output(self, policy_file, capsys):
        main([str(policy_file), "--identity-participants", "--pretty"])

        out = capsys.readouterr().out
        assert '\n  "@id"' in out
        json.loads(out)

    @pytest.mark.anyio
    async def test_fingerprint_is_stable(self, policy_file, capsys):
        main([str(policy_file), "--identity-participants", "--fingerprint"])
        first = capsys.readouterr().out.strip()
        main([str(policy_file), "--identity-participants", "--fingerprint"])
        second = capsys.readouterr().out.strip()

        assert len(first) == 64
        assert first == second

    @pytest.mark.anyio
    async def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"type": "SET"})))

        main(["-", "--identity-participants"])

        document = json.loads(capsys.readouterr().out)
        assert document["@type"] == odrl("Set")
        assert document[odrl("permission")] == []


class TestParticipantSources:
    """Where the command gets participant IRIs from."""

    @pytest.mark.anyio
    async def test_participant_map_file(self, policy_file, tmp_path, capsys):
        mapping = tmp_path / "participants.json"
        mapping.write_text(json.dumps({CONSUMER_BPN: CONSUMER_IRI}), encoding="utf-8")

        main([str(policy_file), "--participant-map", str(mapping)])

        document = json.loads(capsys.readouterr().out)
        assert document[odrl("assignee")] == [{"@id": CONSUMER_IRI}]
        assert odrl("assigner") not in document

    @pytest.mark.anyio
    async def test_participant_map_from_settings(self, policy_file, monkeypatch, capsys):
        monkeypatch.setattr(settings, "participant_iri_map", {SUPPLIER_BPN: "did:web:s.example"})

        main([str(policy_file)])

        document = json.loads(capsys.readouterr().out)
        assert document[odrl("assigner")] == [{"@id": "did:web:s.example"}]
        assert odrl("assignee") not in document

    @pytest.mark.anyio
    async def test_participant_map_must_be_object(self, policy_file, tmp_path):
        mapping = tmp_path / "participants.json"
        mapping.write_text("[]", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main([str(policy_file), "--participant-map", str(mapping)])

        assert exc_info.value.code == EXIT_INVALID_INPUT

    @pytest.mark.anyio
    @pytest.mark.parametrize("mapping", [{CONSUMER_BPN: 1}, {CONSUMER_BPN: None}])
    async def test_participant_map_values_must_be_strings(
        self, mapping, policy_file, tmp_path, capsys
    ):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps(mapping), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main([str(policy_file), "--participant-map", str(path)])

        assert exc_info.value.code == EXIT_INVALID_INPUT
        assert capsys.readouterr().out == ""

    @pytest.mark.anyio
    async def test_map_and_identity_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["p.json", "--identity-participants", "--participant-map", "m"]
            )


class TestExitCodes:
    """Failures exit non-zero without printing a document."""

    @pytest.mark.anyio
    async def test_invalid_payload(self, tmp_path, capsys):
        path = tmp_path / "policy.json"
        path.write_text(json.dumps({"type": "BOGUS"}), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main([str(path), "--identity-participants"])

        assert exc_info.value.code == EXIT_INVALID_INPUT
        assert capsys.readouterr().out == ""

    @pytest.mark.anyio
    async def test_malformed_json(self, tmp_path):
        path = tmp_path / "policy.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])

        assert exc_info.value.code == EXIT_INVALID_INPUT

    @pytest.mark.anyio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing.json")])

        assert exc_info.value.code == EXIT_INVALID_INPUT

    @pytest.mark.anyio
    async def test_encoding_error(self, policy_file, monkeypatch, capsys):
        """Test that nesting beyond the configured depth exits with the encoding error code."""
        monkeypatch.setattr(settings, "encoder_max_depth", 1)

        with pytest.raises(SystemExit) as exc_info:
            main([str(policy_file), "--identity-participants"])

        assert exc_info.value.code == EXIT_ENCODING_ERROR
        assert capsys.readouterr().out == ""
