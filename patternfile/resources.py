"""Project a Descriptor onto OAM resource objects.

Two resources come out of a pattern file:

* a ``Component`` per service, carrying the service type and its settings;
* one ``ApplicationConfiguration`` for the whole pattern, carrying the traits
  attached to each service.

The models mirror the v1alpha2 shapes understood by the control plane, and
``manifest()`` renders them as the plain mapping a cluster client submits.
"""

from __future__ import annotations

import logging

from box import Box
from pydantic import BaseModel, Field, JsonValue

from .models import Descriptor

logger = logging.getLogger(__name__)

API_VERSION = "core.oam.dev/v1alpha2"
COMPONENT_KIND = "Component"
CONFIGURATION_KIND = "ApplicationConfiguration"


class ObjectMeta(BaseModel):
    name: str = ""
    namespace: str | None = None


class Resource(BaseModel):
    """Fields shared by every resource object."""

    model_config = {"populate_by_name": True}

    kind: str
    api_version: str = Field(default=API_VERSION, alias="apiVersion")
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    def manifest(self) -> Box:
        """Return the resource as a dot-accessible manifest mapping."""
        return Box(self.model_dump(mode="json", by_alias=True, exclude_none=True))


class ComponentSpec(BaseModel):
    type: str = ""
    settings: dict[str, JsonValue] = Field(default_factory=dict)


class Component(Resource):
    kind: str = COMPONENT_KIND
    spec: ComponentSpec = Field(default_factory=ComponentSpec)


class TraitConfiguration(BaseModel):
    name: str
    properties: dict[str, JsonValue] = Field(default_factory=dict)


class ComponentConfiguration(BaseModel):
    model_config = {"populate_by_name": True}

    component_name: str = Field(alias="componentName")
    traits: list[TraitConfiguration] = Field(default_factory=list)


class ConfigurationSpec(BaseModel):
    components: list[ComponentConfiguration] = Field(default_factory=list)


class ApplicationConfiguration(Resource):
    kind: str = CONFIGURATION_KIND
    spec: ConfigurationSpec = Field(default_factory=ConfigurationSpec)


def component_for(descriptor: Descriptor, key: str) -> Component:
    """Build the Component for the service stored under ``key``.

    Raises NotFoundError when the descriptor has no such service.
    """
    svc = descriptor.get_service(key)
    return Component(
        metadata=ObjectMeta(name=svc.name, namespace=svc.namespace or None),
        spec=ComponentSpec(type=svc.type, settings=svc.settings),
    )


def components_for(descriptor: Descriptor) -> list[Component]:
    """Build one Component per service, in declaration order."""
    return [component_for(descriptor, key) for key in descriptor.services]


def configuration_for(descriptor: Descriptor) -> ApplicationConfiguration:
    """Build the ApplicationConfiguration holding every service's traits.

    Services without traits are left out. A trait whose value is not a
    mapping is emitted with empty properties.
    """
    components = []
    for key, svc in descriptor.services.items():
        if not svc.traits:
            continue
        traits = []
        for trait_name, value in svc.traits.items():
            if isinstance(value, dict):
                properties = value
            else:
                logger.debug(f"Trait {trait_name!r} of service {key!r} is not a mapping, using empty properties: {value!r}")
                properties = {}
            traits.append(TraitConfiguration(name=trait_name, properties=properties))
        components.append(ComponentConfiguration(component_name=key, traits=traits))

    return ApplicationConfiguration(
        metadata=ObjectMeta(name=descriptor.name),
        spec=ConfigurationSpec(components=components),
    )


def type_of(descriptor: Descriptor, key: str) -> str:
    """Return the type of the service stored under ``key``.

    Raises NotFoundError when the descriptor has no such service.
    """
    return descriptor.get_service(key).type


__all__ = [
    "API_VERSION",
    "ApplicationConfiguration",
    "Component",
    "ComponentConfiguration",
    "ComponentSpec",
    "ObjectMeta",
    "Resource",
    "TraitConfiguration",
    "component_for",
    "components_for",
    "configuration_for",
    "type_of",
]
