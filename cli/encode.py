"""CLI: Encode a policy payload as a JSON-LD expanded-form document.

Examples:
    odrl-encode policy.json --pretty
    cat policy.json | odrl-encode - --participant-map participants.json
    odrl-encode policy.json --identity-participants --fingerprint
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from odrl_encoder.core.config import settings
from odrl_encoder.core.errors import PolicyEncodingError
from odrl_encoder.core.observability import (
    configure_structured_logging,
    generate_correlation_id,
    set_correlation_id,
)
from odrl_encoder.domain.models import Policy
from odrl_encoder.encoder import (
    NoOpParticipantIdMapper,
    ParticipantIdMapper,
    StaticParticipantIdMapper,
    encode_policy,
    structural_fingerprint,
    to_json_pretty,
    to_json_string,
)

logger = logging.getLogger(__name__)

EXIT_ENCODING_ERROR = 1
EXIT_INVALID_INPUT = 2

# Same shape as settings.participant_iri_map
_PARTICIPANT_MAP_ADAPTER = TypeAdapter(dict[str, str])


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _build_participant_mapper(args: argparse.Namespace) -> ParticipantIdMapper:
    if args.identity_participants:
        return NoOpParticipantIdMapper()
    if args.participant_map:
        mapping = _PARTICIPANT_MAP_ADAPTER.validate_json(
            Path(args.participant_map).read_text(encoding="utf-8")
        )
        return StaticParticipantIdMapper(mapping)
    return StaticParticipantIdMapper(settings.participant_iri_map)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="odrl-encode",
        description="Encode an ODRL policy payload as a JSON-LD expanded-form document",
    )
    parser.add_argument("policy", help="Policy JSON file, or '-' to read stdin")
    participants = parser.add_mutually_exclusive_group()
    participants.add_argument(
        "--participant-map",
        metavar="FILE",
        help="JSON object mapping participant ids to IRIs (default: PARTICIPANT_IRI_MAP)",
    )
    participants.add_argument(
        "--identity-participants",
        action="store_true",
        help="Use participant ids as IRIs unchanged",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--pretty", action="store_true", help="Indent the output")
    output.add_argument(
        "--fingerprint",
        action="store_true",
        help="Print the structural fingerprint instead of the document",
    )
    parser.add_argument(
        "--log-level",
        default=settings.app_log_level,
        help=f"Log level (default: {settings.app_log_level})",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    configure_structured_logging(args.log_level, structured=settings.observability_structured_logs)
    set_correlation_id(generate_correlation_id())

    try:
        policy = Policy.model_validate_json(_read_text(args.policy))
        participant_id_mapper = _build_participant_mapper(args)
    except (OSError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        kind = "invalid input payload" if isinstance(e, ValidationError) else "cannot read input"
        logger.error("%s: %s", kind, e)
        raise SystemExit(EXIT_INVALID_INPUT) from e

    try:
        document = encode_policy(policy, participant_id_mapper)
    except PolicyEncodingError as e:
        logger.error("Policy encoding failed: %s", e.message, extra={"details": e.details})
        raise SystemExit(EXIT_ENCODING_ERROR) from e

    if args.fingerprint:
        print(structural_fingerprint(document))
    elif args.pretty:
        print(to_json_pretty(document))
    else:
        print(to_json_string(document))


if __name__ == "__main__":
    main()
