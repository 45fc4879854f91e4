"""Graph model: nodes, channels, bookkeeping and type inference.

Key types:
- Graph: registry of nodes and channels
- Node: a named, wired instance of a part
- Channel: a conduit shared by two or more pins
- infer_types: flood-fill inference of channel and pin types
"""

from ._channel import Channel, NodePin
from ._errors import GraphConsistencyError, TypeIncompatibilityError
from ._graph import ALWAYS_IMPORTED, Graph
from ._infer import DEFAULT_TYPE, infer_types
from ._node import NIL_CHANNEL, Node

__all__ = [
    "ALWAYS_IMPORTED",
    "DEFAULT_TYPE",
    "NIL_CHANNEL",
    "Channel",
    "Graph",
    "GraphConsistencyError",
    "Node",
    "NodePin",
    "TypeIncompatibilityError",
    "infer_types",
]
