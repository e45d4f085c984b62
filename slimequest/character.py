"""A physically moved character: gravity, friction, ground and wall handling, health."""

from __future__ import annotations

import math
from typing import Callable, Iterable, Optional

from slimequest.vector import HitResult, Matrix, Vec3, lerp

_FRAMES_PER_SECOND = 60.0
_TILT_FOLLOW_RATE = 0.2

Collider = Callable[[Vec3, Vec3], Optional[HitResult]]


class RayCaster:
    """Geometry a character tests its movement against.

    It holds any number of colliders, each a callable taking the segment's
    start and end and returning a hit or None; with none it never hits.
    """

    def __init__(self, colliders: Iterable[Collider] = ()) -> None:
        self._colliders = tuple(colliders)

    def ray_cast(self, start: Vec3, end: Vec3) -> Optional[HitResult]:
        """The nearest hit along the segment start-end, or None when nothing is hit."""
        hits = (collider(start, end) for collider in self._colliders)
        found = [hit for hit in hits if hit is not None]
        if not found:
            return None
        return min(found, key=lambda hit: hit.distance)


def _sqrt_or_nan(value: float) -> float:
    return math.sqrt(value) if value >= 0.0 else math.nan


def _slope_rate(normal: Vec3) -> float:
    length_xz = _sqrt_or_nan(normal.x * normal.z + normal.x * normal.z)
    denominator = length_xz + normal.y
    if denominator == 0.0:
        return math.nan
    return 1.0 - normal.y / denominator


class Character:
    """Position, orientation, velocity and health of a moving actor on a stage."""

    def __init__(self, stage: Optional[RayCaster] = None) -> None:
        self.stage: RayCaster = stage if stage is not None else RayCaster()
        self.position = Vec3()
        self.angle = Vec3()
        self.scale = Vec3(1.0, 1.0, 1.0)
        self.transform = Matrix.identity()
        self.velocity = Vec3()
        self.radius = 0.5
        self.gravity = -1.0
        self.is_ground = False
        self.height = 2.0
        self.health = 5
        self.max_health = 5
        self.invincible_timer = 1.0
        self.friction = 0.5
        self.acceleration = 1.0
        self.max_move_speed = 5.0
        self.move_vec_x = 0.0
        self.move_vec_z = 0.0
        self.air_control = 0.3
        self.step_offset = 1.0
        self.slope_rate = 1.0
        self.landing_count = 0
        self.damaged_count = 0
        self.death_count = 0

    def update_transform(self) -> None:
        """Rebuild the world matrix from scale, rotation (Y, X, Z) and position."""
        rotation = (
            Matrix.rotation_y(self.angle.y)
            @ Matrix.rotation_x(self.angle.x)
            @ Matrix.rotation_z(self.angle.z)
        )
        self.transform = (
            Matrix.scaling(*self.scale) @ rotation @ Matrix.translation(*self.position)
        )

    def apply_damage(self, damage: int, invincible_time: float) -> bool:
        """Deal damage; True when health changed."""
        if damage == 0:
            return False
        if self.health <= 0:
            return False
        if self.invincible_timer > 0.0:
            return False

        self.invincible_timer = invincible_time
        self.health -= damage
        if self.health <= 0:
            self.on_dead()
        else:
            self.on_damaged()
        return True

    def add_impulse(self, impulse: Vec3) -> None:
        self.velocity = self.velocity + impulse

    def update_invincible_timer(self, elapsed_time: float) -> None:
        if self.invincible_timer > 0.0:
            self.invincible_timer -= elapsed_time

    def move(self, vx: float, vz: float, speed: float) -> None:
        """Request movement along (vx, vz) for this frame, up to ``speed``."""
        self.move_vec_x = vx
        self.move_vec_z = vz
        self.max_move_speed = speed

    def turn(self, elapsed_time: float, vx: float, vz: float, speed: float) -> None:
        """Rotate about Y toward the direction (vx, vz)."""
        speed *= elapsed_time
        length = math.sqrt(vx * vx + vz * vz)
        if length == 0.0:
            return
        vx /= length
        vz /= length

        front_x = math.sin(self.angle.y)
        front_z = math.cos(self.angle.y)

        dot = (vx * vz) + (vx * vz)
        rot = min(1.0 - dot, speed)

        cross = front_x * vz - front_z * vx
        yaw = self.angle.y + rot if cross < 0.0 else self.angle.y - rot
        self.angle = Vec3(self.angle.x, yaw, self.angle.z)

    def jump(self, speed: float) -> None:
        self.velocity = Vec3(self.velocity.x, speed, self.velocity.z)

    def update_velocity(self, elapsed_time: float) -> None:
        """Apply gravity, friction and acceleration, then move against the stage."""
        elapsed_frame = _FRAMES_PER_SECOND * elapsed_time
        self._update_vertical_velocity(elapsed_frame)
        self._update_vertical_move(elapsed_time)
        self._update_horizontal_velocity(elapsed_frame)
        self._update_horizontal_move(elapsed_time)

    def on_landing(self) -> None:
        """Called when the character touches the ground after being airborne."""
        self.landing_count += 1

    def on_damaged(self) -> None:
        """Called when damage leaves the character alive."""
        self.damaged_count += 1

    def on_dead(self) -> None:
        """Called when damage brings health to zero or below."""
        self.death_count += 1

    def _update_vertical_velocity(self, elapsed_frame: float) -> None:
        v = self.velocity
        self.velocity = Vec3(v.x, v.y + self.gravity * elapsed_frame, v.z)

    def _update_vertical_move(self, elapsed_time: float) -> None:
        my = self.velocity.y * elapsed_time
        self.slope_rate = 0.0
        normal = Vec3(0.0, 1.0, 0.0)

        if my < 0.0:
            p = self.position
            start = Vec3(p.x, p.y + self.step_offset, p.z)
            end = Vec3(p.x, p.y + my, p.z)
            hit = self.stage.ray_cast(start, end)
            if hit is not None:
                normal = hit.normal
                self.position = hit.position
                self.angle = Vec3(self.angle.x, self.angle.y + hit.rotation.y, self.angle.z)
                self.slope_rate = _slope_rate(hit.normal)
                if not self.is_ground:
                    self.on_landing()
                self.is_ground = True
                self.velocity = Vec3(self.velocity.x, 0.0, self.velocity.z)
            else:
                self.position = Vec3(p.x, p.y + my, p.z)
                self.is_ground = False
        elif my > 0.0:
            p = self.position
            self.position = Vec3(p.x, p.y + my, p.z)
            self.is_ground = False

        ax = math.atan2(normal.z, normal.y)
        az = -math.atan2(normal.z, normal.y)
        self.angle = Vec3(
            lerp(self.angle.x, ax, _TILT_FOLLOW_RATE),
            self.angle.y,
            lerp(self.angle.z, az, _TILT_FOLLOW_RATE),
        )

    def _update_horizontal_velocity(self, elapsed_frame: float) -> None:
        vx, vy, vz = self.velocity
        length = math.sqrt(vx * vx + vz * vz)
        if length > 0.0:
            friction = self.friction * elapsed_frame
            if not self.is_ground:
                friction *= self.air_control
            if length > friction:
                vx -= vx / length * friction
                vz -= vz / length * friction
            else:
                vx = vz = 0.0

        if length <= self.max_move_speed:
            move_length = math.sqrt(self.move_vec_x ** 2 + self.move_vec_z ** 2)
            if move_length > 0.0:
                acceleration = self.acceleration * elapsed_frame
                if not self.is_ground:
                    acceleration *= self.air_control
                vx += self.move_vec_x * acceleration
                vz += self.move_vec_z * acceleration

                speed = math.sqrt(vx * vx + vz * vz)
                if speed > self.max_move_speed:
                    vx = vx / speed * self.max_move_speed
                    vz = vz / speed * self.max_move_speed

                if self.is_ground and self.slope_rate > 0.0:
                    vy -= speed * self.slope_rate * elapsed_frame

        self.velocity = Vec3(vx, vy, vz)
        self.move_vec_x = 0.0
        self.move_vec_z = 0.0

    def _update_horizontal_move(self, elapsed_time: float) -> None:
        v = self.velocity
        if math.sqrt(v.x * v.x + v.z * v.z) <= 0.0:
            return
        mx = v.x * elapsed_time
        mz = v.z * elapsed_time
        p = self.position
        start = Vec3(p.x, p.y + self.step_offset, p.z)
        end = Vec3(p.x + mx, p.y + self.step_offset, p.z + mz)

        hit = self.stage.ray_cast(start, end)
        if hit is not None:
            vec = end - start
            depth = (-vec).dot(hit.normal)
            corrected = hit.normal * depth + end
            self.position = Vec3(corrected.x, p.y, corrected.z)
        else:
            self.position = Vec3(p.x + mx, p.y, p.z + mz)