"""Pydantic models that capture the pattern file domain concepts."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Mapping
from uuid import UUID

import yaml
from pydantic import BaseModel, Field, JsonValue, field_validator

from .errors import NotFoundError


class ServiceEntry(BaseModel):
    """One deployable unit declared under ``services``."""

    model_config = {"populate_by_name": True}

    id: UUID | None = Field(default=None, description="Identifier assigned by the server or provider")
    name: str = Field(default="", description="Display name, defaults to the service key on decode")
    type: str = Field(default="", description="Kind of resource the service represents")
    namespace: str = ""
    depends_on: list[str] = Field(default_factory=list, alias="dependsOn")
    settings: dict[str, JsonValue] = Field(default_factory=dict)
    traits: dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("depends_on", mode="before")
    @classmethod
    def _null_depends_on(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("settings", "traits", mode="before")
    @classmethod
    def _normalize_open_mapping(cls, value: Any) -> Any:
        if value is None:
            return {}
        value = stringify_keys(value)
        _reject_non_finite(value)
        return value


class Descriptor(BaseModel):
    """A pattern file: named services with their settings and traits."""

    model_config = {"populate_by_name": True}

    name: str = Field(default="", description="Human readable name of the pattern")
    id: str = Field(default="", alias="patternID", description="Convention: SMP-###-v#.#.#")
    services: dict[str, ServiceEntry] = Field(default_factory=dict)

    @field_validator("services", mode="before")
    @classmethod
    def _normalize_services(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            return value
        # "a:" with nothing under it declares an empty service
        return {_key_to_str(key): {} if svc is None else svc for key, svc in value.items()}

    def get_service(self, key: str) -> ServiceEntry:
        """Return the service stored under ``key`` or raise NotFoundError."""
        try:
            return self.services[key]
        except KeyError:
            raise NotFoundError(key) from None

    def to_yaml(self) -> str:
        """Serialize back to pattern file YAML, leaving out empty fields."""
        payload = _omit_empty(self.model_dump(mode="json", by_alias=True))
        if "services" in payload:
            payload["services"] = {key: _omit_empty(svc) for key, svc in payload["services"].items()}
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)


# ---------------------------------------------------------------------------
# helpers


def stringify_keys(value: Any) -> Any:
    """Recursively turn every mapping key into a string.

    YAML allows integer, boolean and null keys, and scalars such as dates,
    none of which survive a JSON encoder. Lists are walked as well.
    """
    if isinstance(value, Mapping):
        return {_key_to_str(key): stringify_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [stringify_keys(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((stringify_keys(item) for item in value), key=str)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _reject_non_finite(value: Any) -> None:
    """Raise ValueError for .inf/.nan, which JSON cannot carry."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"non-finite number {value!r} is not allowed")
    if isinstance(value, dict):
        for item in value.values():
            _reject_non_finite(item)
    elif isinstance(value, list):
        for item in value:
            _reject_non_finite(item)


def _omit_empty(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value not in (None, "", [], {})}


def _key_to_str(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (datetime, date)):
        return key.isoformat()
    return str(key)


__all__ = [
    "Descriptor",
    "ServiceEntry",
    "stringify_keys",
]
