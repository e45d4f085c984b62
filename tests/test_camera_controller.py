import math

import pytest

from slimequest.camera_controller import CameraController
from slimequest.vector import Vec3


def test_no_input_places_eye_along_z():
    view = CameraController().update(1.0 / 60.0, 0.0, 0.0)
    assert view.eye.x == pytest.approx(0.0)
    assert view.eye.y == pytest.approx(0.0)
    assert view.eye.z == pytest.approx(10.0)
    assert view.target == Vec3()
    assert view.up == Vec3(0.0, 1.0, 0.0)


def test_eye_follows_target():
    controller = CameraController(target=Vec3(1.0, 2.0, 3.0))
    view = controller.update(1.0 / 60.0, 0.0, 0.0)
    assert view.target == Vec3(1.0, 2.0, 3.0)
    assert view.eye.z == pytest.approx(3.0 + controller.range)


def test_eye_stays_at_range():
    controller = CameraController()
    for ax, ay in [(0.5, 0.2), (-0.3, 0.7), (1.0, -1.0)]:
        view = controller.update(0.25, ax, ay)
        assert (view.eye - view.target).length() == pytest.approx(controller.range)


def test_pitch_is_clamped():
    controller = CameraController()
    controller.update(1.0, 0.0, 10.0)
    assert controller.angle.x == pytest.approx(controller.max_angle_x)
    controller.update(1.0, 0.0, -20.0)
    assert controller.angle.x == pytest.approx(controller.min_angle_x)


def test_yaw_wraps_into_range():
    controller = CameraController()
    controller.update(1.0, 3.0, 0.0)
    assert -math.pi <= controller.angle.y <= math.pi
    assert math.sin(controller.angle.y) == pytest.approx(math.sin(3.0 * controller.roll_speed))