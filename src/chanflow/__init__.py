"""Type inference and wiring bookkeeping for channel-connected program graphs."""

__all__ = [
    "DEFAULT_TYPE",
    "NIL_CHANNEL",
    "Broadcast",
    "Channel",
    "Code",
    "CodePin",
    "Gather",
    "Graph",
    "GraphConsistencyError",
    "GraphDocument",
    "Node",
    "NodePin",
    "Part",
    "PartType",
    "PinDefinition",
    "PinDirection",
    "Transform",
    "Type",
    "TypeIncompatibilityError",
    "TypeInferenceMap",
    "TypeSyntaxError",
    "UnificationError",
    "Unslicer",
    "graph_from_json",
    "graph_to_json",
    "infer_types",
    "load_graph",
    "parse_part",
    "parse_type",
    "save_graph",
]

from ._io import GraphDocument, graph_from_json, graph_to_json, load_graph, save_graph
from ._model import (
    DEFAULT_TYPE,
    NIL_CHANNEL,
    Channel,
    Graph,
    GraphConsistencyError,
    Node,
    NodePin,
    TypeIncompatibilityError,
    infer_types,
)
from ._parts import (
    Broadcast,
    Code,
    CodePin,
    Gather,
    Part,
    PartType,
    PinDefinition,
    PinDirection,
    Transform,
    Unslicer,
    parse_part,
)
from ._typeexpr import Type, TypeInferenceMap, TypeSyntaxError, UnificationError, parse_type
