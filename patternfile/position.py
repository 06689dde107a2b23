"""Layout coordinates of services on the graph canvas."""

from __future__ import annotations

import logging
import math
import random
import secrets
from typing import Any

from .errors import RandomnessError
from .models import ServiceEntry

logger = logging.getLogger(__name__)

LAYOUT_TRAIT = "meshmap"
POSITION_KEY = "position"
CANVAS_SIZE = 100


class PositionResolver:
    """Find or make up the position of a service.

    A position stored under ``traits.meshmap.position`` wins. Without one, a
    random point of the canvas is drawn from ``rng``.

    Args:
        rng: random source, ``secrets.SystemRandom()`` when not given.
            Tests pass a seeded ``random.Random``.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else secrets.SystemRandom()

    def resolve(self, svc: ServiceEntry) -> tuple[float, float]:
        layout = svc.traits.get(LAYOUT_TRAIT)
        if layout is None:
            return self.random_position()
        if not isinstance(layout, dict):
            logger.debug(f"{LAYOUT_TRAIT} trait is not a mapping: {layout!r}")
            return self.random_position()

        position = layout.get(POSITION_KEY)
        if not isinstance(position, dict):
            logger.debug(f"{LAYOUT_TRAIT} trait has no position mapping: {layout!r}")
            return self.random_position()

        return _coordinate(position, "posX"), _coordinate(position, "posY")

    def random_position(self) -> tuple[float, float]:
        try:
            x = self.rng.randrange(CANVAS_SIZE)
            y = self.rng.randrange(CANVAS_SIZE)
        except (OSError, NotImplementedError) as exc:
            raise RandomnessError(f"Random source failed: {exc}", log=True) from exc
        return float(x), float(y)


def _coordinate(position: dict[str, Any], axis: str) -> float:
    value = position.get(axis)
    # bool is an int subclass but never a coordinate
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return float(value)
    logger.debug(f"failed to read {axis} from {LAYOUT_TRAIT} position, using 0: {value!r}")
    return 0.0


__all__ = ["CANVAS_SIZE", "LAYOUT_TRAIT", "POSITION_KEY", "PositionResolver"]
