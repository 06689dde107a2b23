"""Turn raw pattern file text into a normalized Descriptor."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .errors import ParseError
from .models import Descriptor

logger = logging.getLogger(__name__)


def decode(raw: str | bytes) -> Descriptor:
    """Parse pattern file YAML (or JSON) into a Descriptor.

    Every service gets its key as name when none is given; settings and
    traits come out as string-keyed mappings, empty when omitted.
    Raises ParseError for malformed text or a document of the wrong shape.
    """
    payload = _load_text_payload(raw)
    try:
        descriptor = Descriptor.model_validate(payload)
    except ValidationError as exc:
        raise ParseError(f"Invalid pattern file: {exc}") from exc
    except RecursionError as exc:
        raise ParseError("Pattern file is nested too deeply") from exc

    for key, svc in descriptor.services.items():
        if not svc.name:
            svc.name = key

    logger.info(f"Decoded pattern {descriptor.name!r} with {len(descriptor.services)} services")
    return descriptor


def _load_text_payload(raw: str | bytes) -> Mapping[str, Any]:
    try:
        text = raw.decode() if isinstance(raw, bytes) else raw
        payload = yaml.safe_load(text)
    except RecursionError as exc:
        raise ParseError("Pattern file is nested too deeply") from exc
    except (UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ParseError(f"Malformed pattern file: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ParseError(f"Pattern file must be a mapping, got {type(payload).__name__}")
    return payload


__all__ = ["decode"]
