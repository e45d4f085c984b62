"""Intersection tests between spheres, cylinders and rays against models."""

from __future__ import annotations

import math
from typing import Optional

from slimequest.model import Model
from slimequest.vector import HitResult, Vec3


def _push_out_xz(origin: Vec3, y: float, target: Vec3, reach: float) -> Optional[Vec3]:
    vx = target.x - origin.x
    vz = target.z - origin.z
    dist = math.sqrt(vx * vx + vz * vz)
    if dist > reach:
        return None
    if dist > 0.0:
        vx /= dist
        vz /= dist
    return Vec3(origin.x + vx * reach, y, origin.z + vz * reach)


def intersect_sphere_vs_sphere(
    position_a: Vec3, radius_a: float, position_b: Vec3, radius_b: float
) -> Optional[Vec3]:
    """Where sphere B is pushed to by sphere A, or None if they do not touch."""
    vec = position_b - position_a
    reach = radius_a + radius_b
    if vec.length_sq() > reach * reach:
        return None
    return position_a + vec.normalized() * reach


def intersect_cylinder_vs_cylinder(
    position_a: Vec3,
    radius_a: float,
    height_a: float,
    position_b: Vec3,
    radius_b: float,
    height_b: float,
) -> Optional[Vec3]:
    """Where cylinder B is pushed to by cylinder A, or None if they do not touch."""
    if position_a.y > position_b.y + height_b:
        return None
    if position_a.y + height_a < position_b.y:
        return None
    return _push_out_xz(position_a, position_b.y, position_b, radius_a + radius_b)


def intersect_sphere_vs_cylinder(
    sphere_position: Vec3,
    sphere_radius: float,
    cylinder_position: Vec3,
    cylinder_radius: float,
    cylinder_height: float,
) -> Optional[Vec3]:
    """Where the cylinder is pushed to by the sphere, or None if they do not touch."""
    if sphere_position.y + sphere_radius < cylinder_position.y:
        return None
    if sphere_position.y - sphere_radius > cylinder_position.y + cylinder_height:
        return None
    return _push_out_xz(
        sphere_position, sphere_position.y, cylinder_position, sphere_radius + cylinder_radius
    )


def intersect_ray_vs_model(start: Vec3, end: Vec3, model: Model) -> Optional[HitResult]:
    """The nearest front-facing triangle hit by the segment start-end, or None."""
    result = HitResult(distance=(end - start).length())
    hit = False

    for mesh in model.resource.meshes:
        world = model.nodes[mesh.node_index].world_transform
        inverse = world.inverse()
        local_start = inverse.transform_coord(start)
        local_end = inverse.transform_coord(end)
        segment = local_end - local_start
        direction = segment.normalized()
        nearest = segment.length()

        best = None
        for subset in mesh.subsets:
            for offset in range(0, subset.index_count, 3):
                index = subset.start_index + offset
                a = mesh.vertices[mesh.indices[index]].position
                b = mesh.vertices[mesh.indices[index + 1]].position
                c = mesh.vertices[mesh.indices[index + 2]].position

                ab = b - a
                bc = c - b
                ca = a - c
                normal = ab.cross(bc)

                facing = direction.dot(normal)
                if facing >= 0.0:
                    continue
                t = (a - local_start).dot(normal) / facing
                if t < 0.0 or t > nearest:
                    continue
                point = local_start + direction * t

                if (a - point).cross(ab).dot(normal) < 0.0:
                    continue
                if (b - point).cross(bc).dot(normal) < 0.0:
                    continue
                if (c - point).cross(ca).dot(normal) < 0.0:
                    continue

                nearest = t
                best = (point, normal, subset.material_index)

        if best is None or best[2] < 0:
            continue
        point, normal, material_index = best
        world_position = world.transform_coord(point)
        distance = (world_position - start).length()
        if result.distance > distance:
            result.distance = distance
            result.material_index = material_index
            result.position = world_position
            result.normal = world.transform_normal(normal).normalized()
            hit = True

    return result if hit else None