"""Wireframe meshes and a queue of debug spheres and cylinders to draw each frame."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from slimequest.vector import Float4, Matrix, Vec3


def _sphere_points(radius: float, slices: int, stacks: int) -> Iterator[Vec3]:
    phi_step = math.pi / stacks
    theta_step = 2.0 * math.pi / slices
    for i in range(stacks):
        phi = i * phi_step
        y = radius * math.cos(phi)
        ring = radius * math.sin(phi)
        for j in range(slices):
            for theta in (j * theta_step, (j + 1) * theta_step):
                yield Vec3(ring * math.sin(theta), y, ring * math.cos(theta))

    theta_step = 2.0 * math.pi / stacks
    for i in range(slices):
        rotation = Matrix.rotation_y(i * theta_step)
        for j in range(stacks):
            for theta in (j * theta_step, (j + 1) * theta_step):
                point = Vec3(radius * math.sin(theta), radius * math.cos(theta), 0.0)
                yield rotation.transform_coord(point)


def sphere_mesh(radius: float, slices: int, stacks: int) -> List[Vec3]:
    """Line-list vertices of a wireframe sphere: latitude rings, then meridians."""
    if slices < 1 or stacks < 1:
        raise ValueError("slices and stacks must be at least 1")
    return list(_sphere_points(radius, slices, stacks))


def _cylinder_points(
    radius1: float, radius2: float, start: float, height: float, slices: int, stacks: int
) -> Iterator[Vec3]:
    stack_height = height / stacks
    radius_step = (radius2 - radius1) / stacks
    d_theta = 2.0 * math.pi / slices
    for i in range(slices):
        n = (i + 1) % slices
        c1, s1 = math.cos(i * d_theta), math.sin(i * d_theta)
        c2, s2 = math.cos(n * d_theta), math.sin(n * d_theta)
        for j in range(stacks + 1):
            y = start + j * stack_height
            r = radius1 + j * radius_step
            yield Vec3(r * c1, y, r * s1)
            yield Vec3(r * c2, y, r * s2)
        yield Vec3(radius1 * c1, start, radius1 * s1)
        yield Vec3(radius2 * c1, start + height, radius2 * s1)


def cylinder_mesh(
    radius1: float, radius2: float, start: float, height: float, slices: int, stacks: int
) -> List[Vec3]:
    """Line-list vertices of a wireframe cylinder: rings per stack plus vertical edges."""
    if slices < 1 or stacks < 1:
        raise ValueError("slices and stacks must be at least 1")
    return list(_cylinder_points(radius1, radius2, start, height, slices, stacks))


@dataclass(frozen=True)
class DebugSphere:
    center: Vec3
    radius: float
    color: Float4

    @property
    def world(self) -> Matrix:
        """World matrix placing the unit sphere mesh."""
        return Matrix.scaling(self.radius, self.radius, self.radius) @ Matrix.translation(*self.center)


@dataclass(frozen=True)
class DebugCylinder:
    position: Vec3
    radius: float
    height: float
    color: Float4

    @property
    def world(self) -> Matrix:
        """World matrix placing the unit cylinder mesh."""
        return Matrix.scaling(self.radius, self.height, self.radius) @ Matrix.translation(*self.position)


class DebugRenderer:
    """Collects debug shapes during a frame and hands them out on flush."""

    def __init__(self) -> None:
        self.sphere_vertices: List[Vec3] = sphere_mesh(1.0, 16, 16)
        self.cylinder_vertices: List[Vec3] = cylinder_mesh(1.0, 1.0, 0.0, 1.0, 16, 1)
        self._spheres: List[DebugSphere] = []
        self._cylinders: List[DebugCylinder] = []

    def draw_sphere(self, center: Vec3, radius: float, color: Float4) -> None:
        self._spheres.append(DebugSphere(center, radius, tuple(color)))

    def draw_cylinder(self, position: Vec3, radius: float, height: float, color: Float4) -> None:
        self._cylinders.append(DebugCylinder(position, radius, height, tuple(color)))

    def flush(self) -> Tuple[List[DebugSphere], List[DebugCylinder]]:
        """Return the queued spheres and cylinders and empty the queues."""
        spheres, self._spheres = self._spheres, []
        cylinders, self._cylinders = self._cylinders, []
        return spheres, cylinders