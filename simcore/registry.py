#!/usr/bin/env python3
"""
Body registry: the ordered owning collection of all simulated bodies.

Insertion order is the iteration order used by the physics step, which makes
pairwise interaction order deterministic. Names are unique, and at most one
registered body may carry a PilotState.
"""
from typing import Iterator, List, Optional, Tuple

from .data_models import Body
from .exceptions import BodyNotFoundError, DuplicateNameError, PilotStateError
from .log import get_logger

logger = get_logger("registry")


class BodyRegistry:
    """Ordered collection of bodies with controlled mutation."""

    def __init__(self):
        self._bodies: List[Body] = []

    def __len__(self) -> int:
        return len(self._bodies)

    def __iter__(self) -> Iterator[Body]:
        return iter(self._bodies)

    def __contains__(self, body: object) -> bool:
        return any(b is body for b in self._bodies)

    def snapshot(self) -> Tuple[Body, ...]:
        """Current ordered sequence; safe to iterate while the registry changes."""
        return tuple(self._bodies)

    @property
    def bodies(self) -> List[Body]:
        """The live list, in registry order. Used by the physics step."""
        return self._bodies

    @property
    def spaceship(self) -> Optional[Body]:
        for b in self._bodies:
            if b.pilot is not None:
                return b
        return None

    def add(self, body: Body) -> Body:
        if self.find_by_name(body.name) is not None:
            raise DuplicateNameError(body.name)
        if body.pilot is not None and self.spaceship is not None:
            raise PilotStateError(
                f"Cannot add '{body.name}': a spaceship is already registered",
                context={"existing": self.spaceship.name},
            )
        self._bodies.append(body)
        logger.info("Body added", extra={"body": body.name, "count": len(self._bodies)})
        return body

    def remove(self, body: Body) -> None:
        """Remove by identity; raises BodyNotFoundError if `body` isn't registered."""
        for i, b in enumerate(self._bodies):
            if b is body:
                del self._bodies[i]
                logger.info("Body removed", extra={"body": body.name, "count": len(self._bodies)})
                return
        raise BodyNotFoundError(body.name)

    def clear(self) -> None:
        count = len(self._bodies)
        self._bodies.clear()
        logger.info("Registry cleared", extra={"removed": count})

    def find_by_name(self, name: str) -> Optional[Body]:
        for b in self._bodies:
            if b.name == name:
                return b
        return None

    def get(self, name: str) -> Body:
        body = self.find_by_name(name)
        if body is None:
            raise BodyNotFoundError(name)
        return body

    def names(self) -> List[str]:
        return [b.name for b in self._bodies]
