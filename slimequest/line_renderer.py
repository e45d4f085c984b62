"""Queue of coloured line vertices, delivered in batches no larger than a fixed capacity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from slimequest.vector import Float4, Vec3


@dataclass(frozen=True)
class LineVertex:
    position: Vec3
    color: Float4


class LineRenderer:
    """Collects line-list vertices and splits them into capacity-sized batches."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._vertices: List[LineVertex] = []

    def __len__(self) -> int:
        return len(self._vertices)

    def add_vertex(self, position: Vec3, color: Float4) -> None:
        self._vertices.append(LineVertex(position, tuple(color)))

    def flush(self) -> List[List[LineVertex]]:
        """Return the queued vertices in order, split into batches, and empty the queue."""
        vertices, self._vertices = self._vertices, []
        return [
            vertices[start:start + self.capacity]
            for start in range(0, len(vertices), self.capacity)
        ]