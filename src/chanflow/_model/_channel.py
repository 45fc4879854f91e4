"""Channels and the pins wired to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chanflow._typeexpr import Type


@dataclass(frozen=True, slots=True, order=True)
class NodePin:
    """A (node name, pin name) pair."""

    node: str
    pin: str

    def __str__(self) -> str:
        return f"{self.node}.{self.pin}"


@dataclass(slots=True, eq=False)
class Channel:
    """A capacity-bounded conduit shared by two or more pins.

    Attributes:
        name: Unique name within the graph.
        cap: Buffer capacity; 0 means unbuffered.
        pins: Cache of pins currently wired to this channel. Derived from
            node connections by ``Graph.refresh_channels_pins``.
        type: Resolved type, set by ``Graph.infer_types`` and None otherwise.

    """

    name: str
    cap: int = 0
    pins: set[NodePin] = field(default_factory=set, init=False, repr=False)
    type: Type | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.cap < 0:
            msg = f"Channel '{self.name}' capacity must be non-negative, got {self.cap}"
            raise ValueError(msg)

    def add_pin(self, node: str, pin: str) -> None:
        self.pins.add(NodePin(node, pin))

    def remove_pin(self, node: str, pin: str) -> None:
        self.pins.discard(NodePin(node, pin))
