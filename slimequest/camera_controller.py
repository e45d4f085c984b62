"""Orbit camera that circles a target under stick input."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from slimequest.vector import Matrix, Vec3


@dataclass(frozen=True)
class CameraView:
    """Eye, focus point and up direction of a look-at camera."""

    eye: Vec3
    target: Vec3
    up: Vec3 = Vec3(0.0, 1.0, 0.0)


@dataclass
class CameraController:
    """Keeps the eye at a fixed range from the target, rotated by stick input."""

    target: Vec3 = field(default_factory=Vec3)
    angle: Vec3 = field(default_factory=Vec3)
    roll_speed: float = math.radians(90.0)
    range: float = 10.0
    max_angle_x: float = math.radians(45.0)
    min_angle_x: float = math.radians(-45.0)

    def update(self, elapsed_time: float, axis_x: float, axis_y: float) -> CameraView:
        """Rotate by the right-stick axes and return the resulting view."""
        speed = self.roll_speed * elapsed_time
        pitch = self.angle.x + axis_y * speed
        yaw = self.angle.y + axis_x * speed

        transform = Matrix.rotation_roll_pitch_yaw(pitch, yaw, self.angle.z)

        pitch = min(max(pitch, self.min_angle_x), self.max_angle_x)
        if yaw < -math.pi:
            yaw += 2.0 * math.pi
        if yaw > math.pi:
            yaw -= 2.0 * math.pi
        self.angle = Vec3(pitch, yaw, self.angle.z)

        fx, fy, fz, _ = transform.rows[2]
        eye = self.target + Vec3(fx, fy, fz) * self.range
        return CameraView(eye=eye, target=self.target)