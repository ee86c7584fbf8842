"""
Participant-IRI resolvers.

The encoder resolves ``Policy.assignee`` and ``Policy.assigner`` through a
resolver passed in per call. A resolver returning ``None`` means "no
mapping" and the field is left out of the document.
"""

from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class ParticipantIdMapper(Protocol):
    """Maps an internal participant identifier to a globally unique IRI."""

    def to_iri(self, participant_id: str) -> str | None: ...


class NoOpParticipantIdMapper:
    """Uses participant identifiers as IRIs unchanged."""

    def to_iri(self, participant_id: str) -> str | None:
        return participant_id


class StaticParticipantIdMapper:
    """
    Resolves participants from a fixed mapping.

    Example:
        >>> mapper = StaticParticipantIdMapper({"BPNL000000000001": "did:web:a.example"})
        >>> mapper.to_iri("BPNL000000000001")
        'did:web:a.example'
        >>> mapper.to_iri("BPNL000000000002") is None
        True
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = dict(mapping)

    def to_iri(self, participant_id: str) -> str | None:
        return self._mapping.get(participant_id)


class CallableParticipantIdMapper:
    """Adapts a plain ``participant_id -> iri | None`` function."""

    def __init__(self, resolve: Callable[[str], str | None]) -> None:
        self._resolve = resolve

    def to_iri(self, participant_id: str) -> str | None:
        return self._resolve(participant_id)


ParticipantIriResolver = ParticipantIdMapper | Callable[[str], str | None]


def as_participant_id_mapper(resolver: ParticipantIriResolver) -> ParticipantIdMapper:
    """
    Normalize a resolver argument to a ParticipantIdMapper.

    Raises:
        TypeError: If the resolver is neither a mapper nor callable
    """
    if isinstance(resolver, ParticipantIdMapper):
        return resolver
    if callable(resolver):
        return CallableParticipantIdMapper(resolver)
    raise TypeError(
        f"participant resolver must provide to_iri() or be callable, got {type(resolver).__name__}"
    )
