import logging

import pytest
from box import Box

from patternfile import NotFoundError, component_for, components_for, configuration_for, decode, type_of
from patternfile.resources import API_VERSION

SIMPLE = """
services:
  a:
    type: t1
  b:
    type: t2
    dependsOn: [a]
"""

WITH_TRAITS = """
name: traited
services:
  web:
    type: Deployment
    namespace: shop
    settings:
      replicas: 3
    traits:
      mTLS:
        policy: strict
      meshmap:
        position:
          posX: 1
          posY: 2
      broken: just-a-string
  db:
    type: StatefulSet
  cache:
    type: Deployment
    traits: {}
"""


@pytest.fixture
def simple():
    return decode(SIMPLE)


@pytest.fixture
def traited():
    return decode(WITH_TRAITS)


def test_component_for_scenario(simple):
    comp = component_for(simple, "b")
    assert comp.kind == "Component"
    assert comp.api_version == API_VERSION
    assert comp.metadata.name == "b"
    assert comp.spec.type == "t2"
    assert comp.spec.settings == {}
    assert type_of(simple, "a") == "t1"


def test_component_for_carries_settings_and_namespace(traited):
    comp = component_for(traited, "web")
    assert comp.metadata.namespace == "shop"
    assert comp.spec.settings == {"replicas": 3}


@pytest.mark.parametrize("key", ["missing", "", "A"])
def test_component_for_unknown_service(simple, key):
    with pytest.raises(NotFoundError) as excinfo:
        component_for(simple, key)
    assert excinfo.value.key == key


def test_type_of_unknown_service(simple):
    with pytest.raises(NotFoundError):
        type_of(simple, "nope")


def test_component_manifest(traited):
    manifest = component_for(traited, "web").manifest()
    assert isinstance(manifest, Box)
    assert manifest.apiVersion == "core.oam.dev/v1alpha2"
    assert manifest.kind == "Component"
    assert manifest.metadata.name == "web"
    assert manifest.metadata.namespace == "shop"
    assert manifest.spec.type == "Deployment"
    assert manifest.spec.settings.replicas == 3


def test_component_manifest_without_namespace(simple):
    manifest = component_for(simple, "a").manifest()
    assert "namespace" not in manifest.metadata


def test_components_for_every_service(traited):
    comps = components_for(traited)
    assert [c.metadata.name for c in comps] == ["web", "db", "cache"]


def test_configuration_for(traited):
    config = configuration_for(traited)
    assert config.kind == "ApplicationConfiguration"
    assert config.api_version == API_VERSION
    assert config.metadata.name == "traited"
    # db and cache have no traits
    assert [c.component_name for c in config.spec.components] == ["web"]
    traits = {t.name: t.properties for t in config.spec.components[0].traits}
    assert traits == {
        "mTLS": {"policy": "strict"},
        "meshmap": {"position": {"posX": 1, "posY": 2}},
        "broken": {},
    }


def test_configuration_for_logs_non_mapping_trait(traited, caplog):
    caplog.set_level(logging.DEBUG, logger="patternfile.resources")
    configuration_for(traited)
    assert "'broken' of service 'web' is not a mapping" in caplog.text


def test_configuration_for_without_traits(simple):
    config = configuration_for(simple)
    assert config.spec.components == []
    assert config.manifest().spec.components == []


def test_configuration_manifest(traited):
    manifest = configuration_for(traited).manifest()
    component = manifest.spec.components[0]
    assert component.componentName == "web"
    assert component.traits[0].name == "mTLS"
    assert component.traits[0].properties.policy == "strict"


def test_projection_does_not_touch_descriptor(traited):
    before = traited.model_dump()
    configuration_for(traited)
    component_for(traited, "web").spec.settings["replicas"] = 10
    assert traited.model_dump() == before
