"""Errors raised by graph bookkeeping and type inference."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chanflow._typeexpr import UnificationError

    from ._channel import NodePin


class GraphConsistencyError(RuntimeError):
    """A structural invariant of the graph was broken by the caller."""


class TypeIncompatibilityError(Exception):
    """Pins sharing a channel have types that cannot be unified.

    Attributes:
        summary: Short human-readable description.
        source: The underlying unification failure.
        channel: Name of the channel where the conflict was found.
        pin: The pin whose type conflicted with the channel's type.

    """

    def __init__(self, summary: str, source: UnificationError, channel: str, pin: NodePin) -> None:
        self.summary = summary
        self.source = source
        self.channel = channel
        self.pin = pin
        super().__init__(f"{summary}: channel '{channel}' at pin {pin}: {source}")
