import math

import pytest

from slimequest.debug_shapes import (
    DebugCylinder,
    DebugRenderer,
    DebugSphere,
    cylinder_mesh,
    sphere_mesh,
)
from slimequest.vector import Vec3


def test_sphere_mesh_count_matches_line_list_layout():
    slices, stacks = 5, 3
    vertices = sphere_mesh(2.0, slices, stacks)
    assert len(vertices) == stacks * slices * 2 + slices * stacks * 2
    assert len(vertices) % 2 == 0


def test_sphere_mesh_points_lie_on_sphere():
    radius = 2.5
    for point in sphere_mesh(radius, 8, 6):
        assert point.length() == pytest.approx(radius)


def test_sphere_mesh_starts_at_north_pole():
    vertices = sphere_mesh(3.0, 4, 4)
    assert vertices[0].x == pytest.approx(0.0)
    assert vertices[0].y == pytest.approx(3.0)
    assert vertices[0].z == pytest.approx(0.0)


def test_cylinder_mesh_count():
    slices, stacks = 16, 1
    vertices = cylinder_mesh(1.0, 1.0, 0.0, 1.0, slices, stacks)
    assert len(vertices) == 2 * slices * (stacks + 1) + 2 * slices


def test_cylinder_mesh_stays_within_height_and_radius():
    vertices = cylinder_mesh(1.5, 1.5, 2.0, 3.0, 12, 2)
    for point in vertices:
        assert 2.0 - 1e-9 <= point.y <= 5.0 + 1e-9
        assert math.hypot(point.x, point.z) == pytest.approx(1.5)


def test_cylinder_mesh_tapers_between_radii():
    vertices = cylinder_mesh(1.0, 2.0, 0.0, 4.0, 8, 1)
    for point in vertices:
        expected = 1.0 if point.y == pytest.approx(0.0) else 2.0
        assert math.hypot(point.x, point.z) == pytest.approx(expected)


def test_invalid_mesh_parameters_raise():
    with pytest.raises(ValueError):
        sphere_mesh(1.0, 0, 4)
    with pytest.raises(ValueError):
        cylinder_mesh(1.0, 1.0, 0.0, 1.0, 4, 0)


def test_renderer_builds_unit_meshes():
    renderer = DebugRenderer()
    assert renderer.sphere_vertices == sphere_mesh(1.0, 16, 16)
    assert renderer.cylinder_vertices == cylinder_mesh(1.0, 1.0, 0.0, 1.0, 16, 1)


def test_flush_returns_queued_shapes_and_clears():
    renderer = DebugRenderer()
    renderer.draw_sphere(Vec3(1, 2, 3), 0.5, (0, 0, 0, 1))
    renderer.draw_cylinder(Vec3(4, 5, 6), 2.0, 1.0, (0, 1, 0, 1))
    renderer.draw_sphere(Vec3(), 1.0, (1, 1, 0, 1))
    spheres, cylinders = renderer.flush()
    assert spheres == [
        DebugSphere(Vec3(1, 2, 3), 0.5, (0, 0, 0, 1)),
        DebugSphere(Vec3(), 1.0, (1, 1, 0, 1)),
    ]
    assert cylinders == [DebugCylinder(Vec3(4, 5, 6), 2.0, 1.0, (0, 1, 0, 1))]
    assert renderer.flush() == ([], [])


def test_sphere_world_matrix_scales_then_translates():
    sphere = DebugSphere(Vec3(1, 2, 3), 2.0, (1, 1, 1, 1))
    point = sphere.world.transform_coord(Vec3(1, 0, 0))
    assert point == Vec3(3, 2, 3)


def test_cylinder_world_matrix_scales_height():
    cylinder = DebugCylinder(Vec3(0, 1, 0), 3.0, 4.0, (1, 1, 1, 1))
    top = cylinder.world.transform_coord(Vec3(1, 1, 0))
    assert top == Vec3(3, 5, 0)