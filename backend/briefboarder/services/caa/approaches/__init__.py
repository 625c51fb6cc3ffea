from __future__ import annotations

from typing import Dict, List

from .base import AdContext, CreativeApproach
from .bernbach import BernbachApproach
from .dramatic import DramaticApproach
from .simple import SimpleApproach


class UnknownApproachError(ValueError):
    pass


class ApproachRegistry:
    """
    Central registry for all creative approaches.

    Approaches are stateless apart from their RNG, so one shared instance per
    approach serves every request. Registration order is the listing order.
    """

    def __init__(self, approaches: List[CreativeApproach] | None = None) -> None:
        self._approaches: Dict[str, CreativeApproach] = {}
        for approach in approaches or []:
            self.register(approach)

    def register(self, approach: CreativeApproach) -> None:
        if approach.id in self._approaches:
            raise ValueError(f"Duplicate creative approach id: {approach.id}")
        self._approaches[approach.id] = approach

    def get(self, approach_id: str) -> CreativeApproach:
        approach = self._approaches.get(approach_id)
        if approach is None:
            raise UnknownApproachError(f"Unknown creative approach: {approach_id}")
        return approach

    def list(self) -> List[dict[str, str]]:
        return [a.describe() for a in self._approaches.values()]


_registry = ApproachRegistry(
    [
        SimpleApproach(),
        DramaticApproach(),
        BernbachApproach(),
    ]
)


def get_approach(approach_id: str) -> CreativeApproach:
    return _registry.get(approach_id)


def list_approaches() -> List[dict[str, str]]:
    return _registry.list()


__all__ = [
    "AdContext",
    "ApproachRegistry",
    "CreativeApproach",
    "UnknownApproachError",
    "get_approach",
    "list_approaches",
]
