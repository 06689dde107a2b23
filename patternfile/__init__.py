"""Pattern file transformations: decoding, OAM resources and graph JSON."""

from .decoder import decode
from .errors import MalformedNodeError, NotFoundError, ParseError, PatternError, RandomnessError
from .graph import Graph, from_graph, to_graph
from .models import Descriptor, ServiceEntry, stringify_keys
from .position import PositionResolver
from .resources import (
    ApplicationConfiguration,
    Component,
    component_for,
    components_for,
    configuration_for,
    type_of,
)

__all__ = [
    "ApplicationConfiguration",
    "Component",
    "Descriptor",
    "Graph",
    "MalformedNodeError",
    "NotFoundError",
    "ParseError",
    "PatternError",
    "PositionResolver",
    "RandomnessError",
    "ServiceEntry",
    "component_for",
    "components_for",
    "configuration_for",
    "decode",
    "from_graph",
    "stringify_keys",
    "to_graph",
    "type_of",
]
