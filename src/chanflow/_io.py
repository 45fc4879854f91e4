import logging
from pathlib import Path
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ._model import NIL_CHANNEL, Channel, Graph, Node
from ._parts import PartType, parse_part

logger = logging.getLogger(__name__)


# =============================================================================
# Document models
# =============================================================================


class ChannelDocument(BaseModel):
    """A channel as stored in a graph document."""

    cap: Annotated[int, Field(ge=0)] = 0


class NodeDocument(BaseModel):
    """A node as stored in a graph document.

    ``part`` holds the variant-specific configuration selected by
    ``part_type``; it is validated against that variant when the document
    is validated.
    """

    part_type: PartType
    part: dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True
    wait: bool = True
    multiplicity: Annotated[int, Field(ge=1)] = 1
    x: float = 0.0
    y: float = 0.0
    connections: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_part_config(self) -> Self:
        parse_part(self.part_type, self.part)
        return self


class GraphDocument(BaseModel):
    """The persisted form of a graph."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    package_path: str = ""
    is_command: bool = False
    nodes: dict[str, NodeDocument] = Field(default_factory=dict)
    channels: dict[str, ChannelDocument] = Field(default_factory=dict)


# =============================================================================
# Conversion
# =============================================================================


def document_to_graph(doc: GraphDocument) -> Graph:
    """Build a graph from a validated document.

    Node connections are aligned with each part's pins and the channel pin
    caches are rebuilt, which prunes channels wired to fewer than two pins.
    """
    graph = Graph(name=doc.name, package_path=doc.package_path, is_command=doc.is_command)
    for name, cdoc in doc.channels.items():
        graph.add_channel(Channel(name=name, cap=cdoc.cap))
    for name, ndoc in doc.nodes.items():
        graph.add_node(
            Node(
                name=name,
                part=parse_part(ndoc.part_type, ndoc.part),
                connections=dict(ndoc.connections),
                multiplicity=ndoc.multiplicity,
                wait=ndoc.wait,
                enabled=ndoc.enabled,
                x=ndoc.x,
                y=ndoc.y,
            ),
        )
    graph.refresh_channels_pins()
    logger.debug(f"Loaded graph '{graph.name}' with {len(graph.nodes)} node(s) and {len(graph.channels)} channel(s)")
    return graph


def graph_to_document(graph: Graph) -> GraphDocument:
    """Convert a graph to its persisted form. Derived type state is not included."""
    return GraphDocument(
        name=graph.name,
        package_path=graph.package_path,
        is_command=graph.is_command,
        nodes={
            name: NodeDocument(
                part_type=node.part.part_type,
                part=node.part.model_dump(mode="json"),
                enabled=node.enabled,
                wait=node.wait,
                multiplicity=node.multiplicity,
                x=node.x,
                y=node.y,
                connections={pin: channel or NIL_CHANNEL for pin, channel in node.connections.items()},
            )
            for name, node in graph.nodes.items()
        },
        channels={name: ChannelDocument(cap=channel.cap) for name, channel in graph.channels.items()},
    )


def graph_from_json(text: str | bytes) -> Graph:
    """Parse a JSON graph document.

    Raises:
        pydantic.ValidationError: If the document is malformed or names an
            unknown part type.

    """
    return document_to_graph(GraphDocument.model_validate_json(text))


def graph_to_json(graph: Graph, *, indent: int | None = 2) -> str:
    return graph_to_document(graph).model_dump_json(indent=indent)


def load_graph(path: Path | str) -> Graph:
    """Load a graph from a JSON document on disk."""
    path = Path(path)
    graph = graph_from_json(path.read_bytes())
    logger.debug(f"Read graph document from {path}")
    return graph


def save_graph(graph: Graph, path: Path | str) -> None:
    """Write a graph to a JSON document on disk."""
    path = Path(path)
    path.write_text(graph_to_json(graph) + "\n", encoding="utf-8")
    logger.debug(f"Wrote graph document to {path}")
