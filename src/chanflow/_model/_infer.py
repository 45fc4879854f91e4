"""Flood-fill type inference over the channel/pin wiring."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from chanflow._typeexpr import Type, TypeInferenceMap, TypeName, UnificationError, iter_params, parse_type

from ._errors import GraphConsistencyError, TypeIncompatibilityError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from chanflow._typeexpr import TypeExpr, TypeParam

    from ._channel import Channel
    from ._graph import Graph

logger = logging.getLogger(__name__)

DEFAULT_TYPE: TypeExpr = TypeName("interface{}")
"""Type given to parameters that nothing constrains."""


class _Worklist:
    """FIFO of channel names that never holds the same name twice."""

    def __init__(self, names: Iterable[str]) -> None:
        self._queue: deque[str] = deque()
        self._pending: set[str] = set()
        for name in names:
            self.push(name)

    def push(self, name: str) -> bool:
        if name in self._pending:
            return False
        self._pending.add(name)
        self._queue.append(name)
        return True

    def pop(self) -> str:
        name = self._queue.popleft()
        self._pending.discard(name)
        return name

    def __bool__(self) -> bool:
        return bool(self._queue)


class _InferencePass:
    """State of a single inference pass.

    Nothing here is visible on the graph until ``commit`` runs, so a pass
    that fails part way leaves no partially inferred types behind.
    """

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.types = TypeInferenceMap()
        # Each node gets fresh copies of its connected pins' types, with
        # parameters scoped to that node.
        self.pin_types: dict[str, dict[str, Type]] = {}
        for node in graph.nodes.values():
            self.pin_types[node.name] = {
                pin_name: Type.parse(node.name, pin.type)
                for pin_name, pin in node.pins().items()
                if node.connected_channel(pin_name) in graph.channels
            }
        self.channel_types: dict[str, Type | None] = dict.fromkeys(graph.channels)
        self.worklist = _Worklist(graph.channels)

    def run(self) -> None:
        steps = 0
        while self.worklist:
            steps += 1
            self._infer_channel(self.graph.channels[self.worklist.pop()])
        logger.debug(f"Inference reached a fixpoint after {steps} channel visit(s)")

    def _infer_channel(self, channel: Channel) -> None:
        for np in sorted(channel.pins):
            try:
                ptype = self.pin_types[np.node][np.pin]
            except KeyError:
                msg = f"Channel '{channel.name}' lists pin {np}, which is not wired to it; refresh the pin caches first"
                raise GraphConsistencyError(msg) from None

            ctype = self.channel_types[channel.name]
            if ctype is None:
                # The first pin seen decides the starting type; revisit the
                # channel so its other pins are checked against it.
                self.channel_types[channel.name] = ptype.copy()
                self.worklist.push(channel.name)
                continue

            try:
                self.types.infer(ctype.expr, ptype.expr)
            except UnificationError as e:
                summary = "channel connected to incompatible types"
                raise TypeIncompatibilityError(summary, e, channel.name, np) from e

            ctype.refine(self.types.apply)
            self._apply_to_node(np.node)

    def _apply_to_node(self, node_name: str) -> None:
        node = self.graph.nodes[node_name]
        for pin_name, ptype in self.pin_types[node_name].items():
            if not ptype.refine(self.types.apply):
                continue
            channel = node.connected_channel(pin_name)
            if channel is not None and self.worklist.push(channel):
                logger.debug(f"Re-queued channel '{channel}' after refining {node_name}.{pin_name} to {ptype}")

    def commit(self, default: TypeExpr) -> None:
        # Bindings learned after a pin was last visited still apply to it.
        for name, ctype in self.channel_types.items():
            resolved = ctype if ctype is not None else Type(default)
            resolved.refine(self.types.apply)
            resolved.lithify(default)
            self.graph.channels[name].type = resolved

        for node in self.graph.nodes.values():
            pin_types = self.pin_types[node.name]
            for ptype in pin_types.values():
                ptype.refine(self.types.apply)
                ptype.lithify(default)
            node.pin_types = pin_types
            node.type_params = {
                param.ident: str(self._resolve_param(param, default)) for param in self._declared_params(node.name)
            }

    def _declared_params(self, node_name: str) -> list[TypeParam]:
        params: dict[TypeParam, None] = {}
        for pin in self.graph.nodes[node_name].pins().values():
            params.update(dict.fromkeys(iter_params(parse_type(pin.type, node_name))))
        return list(params)

    def _resolve_param(self, param: TypeParam, default: TypeExpr) -> Type:
        resolved = Type(self.types.apply(param))
        resolved.lithify(default)
        return resolved


def infer_types(graph: Graph, default: TypeExpr = DEFAULT_TYPE) -> None:
    """Resolve the types of all channels and connected pins in ``graph``.

    Every channel's pin cache must be current (see
    ``Graph.refresh_channels_pins``). Types are recomputed from scratch:
    each node's pins start from their declared types with parameters scoped
    to the node, pins sharing a channel are unified, and whatever is left
    unconstrained is forced to ``default``.

    Args:
        graph: The graph to infer types for.
        default: Type given to unconstrained parameters.

    Raises:
        TypeIncompatibilityError: If two pins sharing a channel cannot have
            the same type. Channel and node types are left unset.

    """
    for channel in graph.channels.values():
        channel.type = None
    for node in graph.nodes.values():
        node.clear_types()

    inference = _InferencePass(graph)
    inference.run()
    inference.commit(default)
    logger.debug(f"Inferred types for {len(graph.channels)} channel(s) and {len(graph.nodes)} node(s)")
