"""The graph: registry of nodes and channels, and its bookkeeping."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._errors import GraphConsistencyError
from ._infer import DEFAULT_TYPE, infer_types
from ._node import NIL_CHANNEL

if TYPE_CHECKING:
    from chanflow._typeexpr import TypeExpr

    from ._channel import Channel
    from ._node import Node

logger = logging.getLogger(__name__)

ALWAYS_IMPORTED = '"sync"'
"""Import every generated program needs for its wait group."""


@dataclass(slots=True, eq=False)
class Graph:
    """A program: a collection of nodes wired together by channels.

    Attributes:
        name: Display name of the program.
        package_path: Full import path of the generated package.
        is_command: Whether the generated package is a runnable command.
        nodes: Node name to node.
        channels: Channel name to channel.

    """

    name: str = ""
    package_path: str = ""
    is_command: bool = False
    nodes: dict[str, Node] = field(default_factory=dict)
    channels: dict[str, Channel] = field(default_factory=dict)

    def package_name(self) -> str:
        """The last segment of the package path."""
        return self.package_path.rsplit("/", 1)[-1]

    def all_imports(self) -> list[str]:
        """Every import the generated program needs, de-duplicated and sorted."""
        imports = {ALWAYS_IMPORTED}
        for node in self.nodes.values():
            imports.update(node.imports())
        return sorted(imports)

    # -------------------------------------------------------------------------
    # Editing helpers
    # -------------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        if node.name in self.nodes:
            msg = f"Node '{node.name}' already exists"
            raise ValueError(msg)
        node.refresh_connections()
        self.nodes[node.name] = node
        return node

    def add_channel(self, channel: Channel) -> Channel:
        if channel.name in self.channels:
            msg = f"Channel '{channel.name}' already exists"
            raise ValueError(msg)
        self.channels[channel.name] = channel
        return channel

    def connect(self, node: str, pin: str, channel: str) -> None:
        """Wire a node's pin to a channel, or disconnect it with ``NIL_CHANNEL``.

        Pin caches are not updated; call ``refresh_channels_pins`` once
        editing is done.
        """
        n = self.nodes[node]
        if pin not in n.pins():
            msg = f"Node '{node}' has no pin '{pin}'"
            raise ValueError(msg)
        if channel != NIL_CHANNEL and channel not in self.channels:
            msg = f"Channel '{channel}' does not exist"
            raise ValueError(msg)
        n.connections[pin] = channel

    # -------------------------------------------------------------------------
    # Bookkeeping
    # -------------------------------------------------------------------------

    def delete_channel(self, channel: Channel) -> None:
        """Disconnect every pin wired to ``channel``, then delete it.

        Raises:
            GraphConsistencyError: If a pin in the channel's cache belongs
                to a node that no longer exists.

        """
        for np in channel.pins:
            node = self.nodes.get(np.node)
            if node is None:
                msg = f"Node '{np.node}' wired to channel '{channel.name}' should exist"
                raise GraphConsistencyError(msg)
            node.connections[np.pin] = NIL_CHANNEL
        channel.pins = set()
        del self.channels[channel.name]
        logger.debug(f"Deleted channel '{channel.name}'")

    def delete_node(self, node: Node, *, prune_channels: bool) -> None:
        """Disconnect a node from its channels, then delete it.

        Args:
            node: The node to delete.
            prune_channels: Also delete channels left with fewer than two pins.

        """
        # A node may be wired to one channel through several pins, so every
        # pin is removed before any channel is considered for deletion.
        doomed: dict[str, Channel] = {}
        for pin, channel_name in node.connections.items():
            if channel_name == NIL_CHANNEL:
                continue
            channel = self.channels.get(channel_name)
            if channel is None:
                continue
            channel.remove_pin(node.name, pin)
            if prune_channels and len(channel.pins) < 2:
                doomed[channel.name] = channel
        del self.nodes[node.name]
        logger.debug(f"Deleted node '{node.name}'")
        for channel in doomed.values():
            self.delete_channel(channel)

    def refresh_channels_pins(self) -> None:
        """Rebuild every channel's pin cache from node connections.

        Each node's connections are first aligned with its part's current
        pins, so pins a part no longer declares drop out of the caches.
        Connections naming a channel that does not exist are reset to
        ``NIL_CHANNEL``. Channels left with fewer than two pins are deleted,
        disconnecting whichever pin still referred to them.
        """
        for channel in self.channels.values():
            channel.pins = set()
        for node in self.nodes.values():
            node.refresh_connections()
            for pin, channel_name in node.connections.items():
                channel = self.channels.get(channel_name)
                if channel is None:
                    if node.connected_channel(pin) is not None:
                        logger.debug(f"Disconnecting {node.name}.{pin} from missing channel '{channel_name}'")
                        node.connections[pin] = NIL_CHANNEL
                    continue
                channel.add_pin(node.name, pin)
        for channel in [c for c in self.channels.values() if len(c.pins) < 2]:
            logger.debug(f"Pruning channel '{channel.name}' with {len(channel.pins)} pin(s)")
            self.delete_channel(channel)

    def infer_types(self, default: TypeExpr = DEFAULT_TYPE) -> None:
        """Resolve channel and pin types; see ``chanflow.infer_types``."""
        infer_types(self, default)
