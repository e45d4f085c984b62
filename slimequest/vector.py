"""Vector, matrix and quaternion helpers using the row-vector convention (v @ M)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Tuple, Union

Float4 = Tuple[float, float, float, float]
Quaternion = Tuple[float, float, float, float]

_SLERP_EPSILON = 0.00001


@dataclass(frozen=True)
class Vec3:
    """An immutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def length(self) -> float:
        return math.sqrt(self.length_sq())

    def length_sq(self) -> float:
        return self.dot(self)

    def normalized(self) -> Vec3:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length > 0.0:
            return self / length
        return Vec3()

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )


_IDENTITY_ROWS = (
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0, 1.0),
)


@dataclass(frozen=True)
class Matrix:
    """A 4x4 row-major matrix; points are row vectors multiplied on the left."""

    rows: tuple = field(default=_IDENTITY_ROWS)

    def __post_init__(self) -> None:
        rows = tuple(tuple(float(value) for value in row) for row in self.rows)
        if len(rows) != 4 or any(len(row) != 4 for row in rows):
            raise ValueError("a matrix needs exactly 4 rows of 4 values")
        object.__setattr__(self, "rows", rows)

    @staticmethod
    def identity() -> Matrix:
        return Matrix(_IDENTITY_ROWS)

    @staticmethod
    def scaling(x: float, y: float, z: float) -> Matrix:
        return Matrix(((x, 0, 0, 0), (0, y, 0, 0), (0, 0, z, 0), (0, 0, 0, 1)))

    @staticmethod
    def translation(x: float, y: float, z: float) -> Matrix:
        return Matrix(((1, 0, 0, 0), (0, 1, 0, 0), (0, 0, 1, 0), (x, y, z, 1)))

    @staticmethod
    def rotation_x(angle: float) -> Matrix:
        c, s = math.cos(angle), math.sin(angle)
        return Matrix(((1, 0, 0, 0), (0, c, s, 0), (0, -s, c, 0), (0, 0, 0, 1)))

    @staticmethod
    def rotation_y(angle: float) -> Matrix:
        c, s = math.cos(angle), math.sin(angle)
        return Matrix(((c, 0, -s, 0), (0, 1, 0, 0), (s, 0, c, 0), (0, 0, 0, 1)))

    @staticmethod
    def rotation_z(angle: float) -> Matrix:
        c, s = math.cos(angle), math.sin(angle)
        return Matrix(((c, s, 0, 0), (-s, c, 0, 0), (0, 0, 1, 0), (0, 0, 0, 1)))

    @staticmethod
    def rotation_roll_pitch_yaw(pitch: float, yaw: float, roll: float) -> Matrix:
        """Roll about Z first, then pitch about X, then yaw about Y."""
        return Matrix.rotation_z(roll) @ Matrix.rotation_x(pitch) @ Matrix.rotation_y(yaw)

    @staticmethod
    def from_quaternion(q: Quaternion) -> Matrix:
        x, y, z, w = q
        return Matrix(
            (
                (1 - 2 * (y * y + z * z), 2 * (x * y + z * w), 2 * (x * z - y * w), 0),
                (2 * (x * y - z * w), 1 - 2 * (x * x + z * z), 2 * (y * z + x * w), 0),
                (2 * (x * z + y * w), 2 * (y * z - x * w), 1 - 2 * (x * x + y * y), 0),
                (0, 0, 0, 1),
            )
        )

    def __matmul__(self, other: Matrix) -> Matrix:
        columns = list(zip(*other.rows))
        return Matrix(
            tuple(
                tuple(sum(a * b for a, b in zip(row, column)) for column in columns)
                for row in self.rows
            )
        )

    def inverse(self) -> Matrix:
        """Inverse by Gauss-Jordan elimination; raises ValueError when singular."""
        work = [list(row) + list(ident) for row, ident in zip(self.rows, _IDENTITY_ROWS)]
        for col in range(4):
            pivot_row = max(range(col, 4), key=lambda r: abs(work[r][col]))
            pivot = work[pivot_row][col]
            if abs(pivot) < 1e-12:
                raise ValueError("matrix is singular")
            work[col], work[pivot_row] = work[pivot_row], work[col]
            work[col] = [value / pivot for value in work[col]]
            for r, row in enumerate(work):
                if r != col and row[col] != 0.0:
                    factor = row[col]
                    work[r] = [a - factor * b for a, b in zip(row, work[col])]
        return Matrix(tuple(tuple(row[4:]) for row in work))

    def _apply(self, v: Vec3, w: float) -> Tuple[float, float, float, float]:
        source = (v.x, v.y, v.z, w)
        return tuple(sum(a * b for a, b in zip(source, column)) for column in zip(*self.rows))

    def transform_coord(self, v: Vec3) -> Vec3:
        """Transform a point (w=1) and divide by the resulting w."""
        x, y, z, w = self._apply(v, 1.0)
        return Vec3(x / w, y / w, z / w)

    def transform_normal(self, v: Vec3) -> Vec3:
        """Transform a direction (w=0), ignoring translation."""
        x, y, z, _ = self._apply(v, 0.0)
        return Vec3(x, y, z)

    @property
    def origin(self) -> Vec3:
        """The translation part held in the fourth row."""
        x, y, z, _ = self.rows[3]
        return Vec3(x, y, z)


Lerpable = Union[float, Vec3]


def lerp(a: Lerpable, b: Lerpable, t: float) -> Lerpable:
    """Linear interpolation between two numbers or two vectors."""
    return a + (b - a) * t


def quaternion_slerp(q0: Quaternion, q1: Quaternion, t: float) -> Quaternion:
    """Spherical interpolation along the shorter arc between two quaternions."""
    cos_omega = sum(a * b for a, b in zip(q0, q1))
    sign = -1.0 if cos_omega < 0.0 else 1.0
    cos_omega *= sign
    if cos_omega < 1.0 - _SLERP_EPSILON:
        sin_omega = math.sqrt(1.0 - cos_omega * cos_omega)
        omega = math.atan2(sin_omega, cos_omega)
        s0 = math.sin((1.0 - t) * omega) / sin_omega
        s1 = math.sin(t * omega) / sin_omega
    else:
        s0, s1 = 1.0 - t, t
    s1 *= sign
    return tuple(a * s0 + b * s1 for a, b in zip(q0, q1))


@dataclass
class HitResult:
    """Outcome of a ray test against geometry."""

    position: Vec3 = Vec3()
    normal: Vec3 = Vec3()
    distance: float = 0.0
    material_index: int = -1
    rotation: Vec3 = Vec3()


@dataclass(frozen=True)
class RenderContext:
    """Per-frame camera and lighting parameters."""

    view: Matrix
    projection: Matrix
    light_direction: Float4