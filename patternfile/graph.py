"""Convert pattern files to and from Cytoscape.js graph JSON.

Every service becomes one node whose id is the service key. The whole
service travels in the node's ``scratch["_data"]`` so the graph can be
turned back into the same pattern file after it was edited on a canvas.
No layout or style is set; the client falls back to its defaults.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .errors import MalformedNodeError, ParseError
from .models import Descriptor, ServiceEntry
from .position import LAYOUT_TRAIT, POSITION_KEY, PositionResolver

logger = logging.getLogger(__name__)

DATA_KEY = "_data"
GENERATED_NAME = "GeneratedPatternFile"


class Position(BaseModel):
    x: float = Field(default=0.0, allow_inf_nan=False)
    y: float = Field(default=0.0, allow_inf_nan=False)


class ElementData(BaseModel):
    """The ``data`` block of an element; ids are required, the rest is free."""

    model_config = {"extra": "allow"}

    id: str
    source: str | None = None
    target: str | None = None
    parent: str | None = None


class GraphElement(BaseModel):
    group: str | None = None
    data: ElementData
    position: Position | None = None
    selected: bool = False
    selectable: bool = False
    locked: bool = False
    grabbable: bool = False
    classes: str | None = None
    scratch: Any = None


class Graph(BaseModel):
    elements: list[GraphElement] = Field(default_factory=list)
    layout: dict[str, Any] | None = None
    style: list[Any] | None = None

    def to_json(self) -> str:
        """Serialize the graph, leaving out fields that were never set."""
        return self.model_dump_json(exclude_unset=True)


def to_graph(descriptor: Descriptor, resolver: PositionResolver | None = None) -> Graph:
    """Build one selectable, grabbable node per service.

    Raises RandomnessError if a position has to be drawn and the random
    source of ``resolver`` fails.
    """
    resolver = resolver or PositionResolver()
    elements = []
    for key, svc in descriptor.services.items():
        x, y = resolver.resolve(svc)
        elements.append(
            GraphElement(
                data=ElementData(id=key),
                position=Position(x=x, y=y),
                selectable=True,
                grabbable=True,
                scratch={DATA_KEY: svc.model_dump(mode="json", by_alias=True)},
            )
        )
    logger.info(f"Built graph of pattern {descriptor.name!r} with {len(elements)} nodes")
    return Graph(elements=elements)


def from_graph(raw: str | bytes) -> Descriptor:
    """Rebuild a pattern file from graph JSON.

    Node positions are written into ``traits.meshmap.position`` of each
    service, replacing whatever position the metadata carried.
    Raises ParseError for invalid JSON and MalformedNodeError for the first
    node without usable service metadata.
    """
    try:
        graph = Graph.model_validate_json(raw)
    except ValidationError as exc:
        raise ParseError(f"Invalid graph: {exc}") from exc

    services: dict[str, ServiceEntry] = {}
    for elem in graph.elements:
        node_id = elem.data.id
        svc = _service_from_scratch(node_id, elem.scratch)
        _set_position(node_id, svc, elem.position)
        if node_id in services:
            logger.warning(f"Duplicate node id {node_id!r}, the later node replaces the earlier one")
        services[node_id] = svc

    logger.info(f"Rebuilt pattern from graph with {len(services)} services")
    return Descriptor(name=GENERATED_NAME, services=services)


def _service_from_scratch(node_id: str, scratch: Any) -> ServiceEntry:
    if not isinstance(scratch, dict):
        raise MalformedNodeError(node_id, f"scratch must be a mapping holding the {DATA_KEY!r} field")
    if DATA_KEY not in scratch:
        raise MalformedNodeError(node_id, f"scratch has no {DATA_KEY!r} field")
    data = scratch[DATA_KEY]
    if not isinstance(data, dict):
        raise MalformedNodeError(node_id, f"{DATA_KEY!r} must be a mapping, got {type(data).__name__}")
    try:
        return ServiceEntry.model_validate(data)
    except ValidationError as exc:
        raise MalformedNodeError(node_id, f"{DATA_KEY!r} does not describe a service: {exc}") from exc


def _set_position(node_id: str, svc: ServiceEntry, position: Position | None) -> None:
    if position is None:
        logger.debug(f"Node {node_id!r} has no position, using (0, 0)")
        position = Position()
    layout = svc.traits.get(LAYOUT_TRAIT)
    layout = dict(layout) if isinstance(layout, dict) else {}
    layout[POSITION_KEY] = {"posX": position.x, "posY": position.y}
    svc.traits[LAYOUT_TRAIT] = layout


__all__ = [
    "DATA_KEY",
    "ElementData",
    "GENERATED_NAME",
    "Graph",
    "GraphElement",
    "Position",
    "from_graph",
    "to_graph",
]
