"""A textured screen-space quad and the vertices that place it."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from slimequest.vector import Float4, Vec3

_DEFAULT_TEXTURE_SIZE = 8


@dataclass(frozen=True)
class SpriteVertex:
    position: Vec3
    color: Float4
    texcoord: Tuple[float, float]


@dataclass(frozen=True)
class Sprite:
    """A sprite over a texture of the given size in pixels."""

    texture_width: int = _DEFAULT_TEXTURE_SIZE
    texture_height: int = _DEFAULT_TEXTURE_SIZE

    def __post_init__(self) -> None:
        if self.texture_width <= 0 or self.texture_height <= 0:
            raise ValueError("texture size must be positive")

    def vertices(
        self,
        screen_width: float,
        screen_height: float,
        dx: float,
        dy: float,
        dw: float,
        dh: float,
        sx: float,
        sy: float,
        sw: float,
        sh: float,
        angle: float,
        r: float,
        g: float,
        b: float,
        a: float,
    ) -> List[SpriteVertex]:
        """Triangle-strip vertices (top-left, top-right, bottom-left, bottom-right) in NDC.

        The destination rectangle is in screen pixels, the source rectangle in texture
        pixels, and ``angle`` is a rotation in degrees about the rectangle's centre.
        """
        if screen_width <= 0 or screen_height <= 0:
            raise ValueError("screen size must be positive")

        corners = ((dx, dy), (dx + dw, dy), (dx, dy + dh), (dx + dw, dy + dh))
        texcoords = ((sx, sy), (sx + sw, sy), (sx, sy + sh), (sx + sw, sy + sh))

        mx = dx + dw * 0.5
        my = dy + dh * 0.5
        theta = math.radians(angle)
        c, s = math.cos(theta), math.sin(theta)
        color = (r, g, b, a)

        result = []
        for (px, py), (u, v) in zip(corners, texcoords):
            px -= mx
            py -= my
            px, py = c * px - s * py + mx, s * px + c * py + my
            result.append(
                SpriteVertex(
                    position=Vec3(2.0 * px / screen_width - 1.0, 1.0 - 2.0 * py / screen_height, 0.0),
                    color=color,
                    texcoord=(u / self.texture_width, v / self.texture_height),
                )
            )
        return result