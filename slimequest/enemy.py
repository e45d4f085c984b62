"""Enemies and the manager that updates them, removes them and keeps them apart."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Set

from slimequest.character import Character, RayCaster
from slimequest.collision import intersect_sphere_vs_sphere
from slimequest.debug_shapes import DebugRenderer

_DEBUG_COLOR = (0.0, 0.0, 0.0, 1.0)


class Enemy(Character, ABC):
    """A character driven by its own update logic and owned by a manager."""

    def __init__(self, stage: Optional[RayCaster] = None) -> None:
        super().__init__(stage)
        self.manager: Optional[EnemyManager] = None

    @abstractmethod
    def update(self, elapsed_time: float) -> None:
        """Advance this enemy by one frame."""

    def draw_debug_primitive(self, renderer: DebugRenderer) -> None:
        """Queue the collision sphere for debug drawing."""
        renderer.draw_sphere(self.position, self.radius, _DEBUG_COLOR)

    def destroy(self) -> None:
        """Ask the owning manager to remove this enemy after the current update."""
        if self.manager is None:
            raise RuntimeError("enemy is not registered with a manager")
        self.manager.remove(self)


class EnemyManager:
    """Holds the enemies of a scene in registration order."""

    def __init__(self) -> None:
        self._enemies: List[Enemy] = []
        self._removes: Set[Enemy] = set()

    def __len__(self) -> int:
        return len(self._enemies)

    def __getitem__(self, index: int) -> Enemy:
        return self._enemies[index]

    def __iter__(self) -> Iterator[Enemy]:
        return iter(self._enemies)

    def update(self, elapsed_time: float) -> None:
        """Update every enemy, drop those marked for removal, then separate overlaps."""
        for enemy in list(self._enemies):
            enemy.update(elapsed_time)

        for enemy in self._removes:
            if enemy in self._enemies:
                self._enemies.remove(enemy)
            enemy.manager = None
        self._removes.clear()

        self._collide_enemies()

    def register(self, enemy: Enemy) -> None:
        self._enemies.append(enemy)
        enemy.manager = self

    def remove(self, enemy: Enemy) -> None:
        """Mark an enemy for removal at the end of the next update."""
        self._removes.add(enemy)

    def clear(self) -> None:
        for enemy in self._enemies:
            enemy.manager = None
        self._enemies.clear()

    def draw_debug_primitive(self, renderer: DebugRenderer) -> None:
        for enemy in self._enemies:
            enemy.draw_debug_primitive(renderer)

    def _collide_enemies(self) -> None:
        for i, enemy_a in enumerate(self._enemies):
            for enemy_b in self._enemies[i + 1:]:
                pushed = intersect_sphere_vs_sphere(
                    enemy_a.position, enemy_a.radius, enemy_b.position, enemy_b.radius
                )
                if pushed is not None:
                    enemy_b.position = pushed