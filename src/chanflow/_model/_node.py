"""Nodes: named, wired instances of a part."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chanflow._parts import imports_of, pins_of

if TYPE_CHECKING:
    from chanflow._parts import Part, PinDefinition
    from chanflow._typeexpr import Type

NIL_CHANNEL = "nil"
"""Connection value of a pin that is not wired to any channel."""


@dataclass(slots=True, eq=False)
class Node:
    """A named instance of a part within a graph.

    Attributes:
        name: Unique name within the graph; also the scope of the node's
            type parameters.
        part: The computation the node runs.
        connections: Pin name to channel name, or ``NIL_CHANNEL``.
        multiplicity: Number of concurrent instances in the generated program.
        wait: Whether the program waits for this node's instances to finish.
        enabled: Whether the generator should emit this node.
        x: Layout coordinate, preserved but not interpreted.
        y: Layout coordinate, preserved but not interpreted.
        pin_types: Resolved type of each connected pin. Rebuilt by every
            inference pass.
        type_params: Resolved type parameters (identifier to type text),
            published by every successful inference pass for code generation.

    """

    name: str
    part: Part
    connections: dict[str, str] = field(default_factory=dict)
    multiplicity: int = 1
    wait: bool = True
    enabled: bool = True
    x: float = 0.0
    y: float = 0.0
    pin_types: dict[str, Type] = field(default_factory=dict, init=False, repr=False)
    type_params: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.multiplicity < 1:
            msg = f"Node '{self.name}' multiplicity must be at least 1, got {self.multiplicity}"
            raise ValueError(msg)

    def pins(self) -> dict[str, PinDefinition]:
        return pins_of(self.part)

    def imports(self) -> tuple[str, ...]:
        return imports_of(self.part)

    def refresh_connections(self) -> None:
        """Align connections with the part's current pin set.

        Declared pins missing from ``connections`` become unconnected, and
        entries for pins the part no longer declares are dropped.
        """
        pins = self.pins()
        self.connections = {name: self.connections.get(name) or NIL_CHANNEL for name in pins}

    def connected_channel(self, pin: str) -> str | None:
        """Name of the channel ``pin`` is wired to, or None if unconnected."""
        channel = self.connections.get(pin, NIL_CHANNEL)
        if channel in ("", NIL_CHANNEL):
            return None
        return channel

    def pin_type(self, pin: str) -> Type | None:
        """Resolved type of a connected pin after inference, otherwise None."""
        return self.pin_types.get(pin)

    def clear_types(self) -> None:
        self.pin_types = {}
        self.type_params = {}
