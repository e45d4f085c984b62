"""A posable instance of a model resource: node hierarchy, transforms and animation playback."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import pairwise
from os import PathLike
from typing import List, Optional, Union

from slimequest.model_resource import Keyframe, ModelFormatError, ModelResource
from slimequest.vector import Matrix, Quaternion, Vec3, lerp, quaternion_slerp


@dataclass(eq=False)
class ModelNode:
    """A node of a model instance with its current pose and transforms."""

    name: str
    scale: Vec3
    rotate: Quaternion
    translate: Vec3
    parent: Optional[ModelNode] = field(default=None, repr=False)
    children: List[ModelNode] = field(default_factory=list, repr=False)
    local_transform: Matrix = field(default_factory=Matrix.identity)
    world_transform: Matrix = field(default_factory=Matrix.identity)


class Model:
    """Nodes built from a resource, posed by animations and placed in the world."""

    def __init__(self, resource: ModelResource) -> None:
        self.resource = resource
        self.nodes: List[ModelNode] = [
            ModelNode(name=src.name, scale=src.scale, rotate=tuple(src.rotate), translate=src.translate)
            for src in resource.nodes
        ]
        for src, node in zip(resource.nodes, self.nodes):
            if src.parent_index < 0:
                continue
            if src.parent_index >= len(self.nodes):
                raise ModelFormatError(
                    f"node {src.name!r} refers to parent {src.parent_index}, "
                    f"but the model has {len(self.nodes)} nodes"
                )
            node.parent = self.nodes[src.parent_index]
            node.parent.children.append(node)

        self._animation_index = -1
        self._animation_seconds = 0.0
        self._loop = False
        self._end = False
        self._blend_time = 0.0
        self._blend_seconds = 0.0

        self.update_transform(Matrix.identity())

    @classmethod
    def from_file(cls, path: Union[str, PathLike]) -> Model:
        """Build a model from a model archive on disk."""
        return cls(ModelResource.load(path))

    @property
    def current_animation_seconds(self) -> float:
        """Playback time of the current animation."""
        return self._animation_seconds

    def update_transform(self, transform: Matrix) -> None:
        """Recompute local and world matrices; root nodes are placed by ``transform``."""
        for node in self.nodes:
            local = (
                Matrix.scaling(*node.scale)
                @ Matrix.from_quaternion(node.rotate)
                @ Matrix.translation(*node.translate)
            )
            parent = node.parent.world_transform if node.parent is not None else transform
            node.local_transform = local
            node.world_transform = local @ parent

    def update_animation(self, elapsed_time: float) -> None:
        """Advance the current animation and pose the nodes."""
        if not self.is_playing_animation():
            return

        blend_rate = 1.0
        if self._blend_time < self._blend_seconds:
            self._blend_time = min(self._blend_time + elapsed_time, self._blend_seconds)
            blend_rate = (self._blend_time / self._blend_seconds) ** 2

        animation = self.resource.animations[self._animation_index]
        seconds = self._animation_seconds
        for key0, key1 in pairwise(animation.keyframes):
            if key0.seconds <= seconds < key1.seconds:
                rate = (seconds - key0.seconds) / (key1.seconds - key0.seconds)
                self._pose(key0, key1, rate, blend_rate)
                break

        if self._end:
            self._end = False
            self._animation_index = -1
            return

        self._animation_seconds += elapsed_time
        if self._animation_seconds >= animation.seconds_length:
            if self._loop:
                self._animation_seconds -= animation.seconds_length
            else:
                self._animation_seconds = animation.seconds_length
                self._end = True

    def _pose(self, key0: Keyframe, key1: Keyframe, rate: float, blend_rate: float) -> None:
        for index, node in enumerate(self.nodes):
            k0 = key0.node_keys[index]
            k1 = key1.node_keys[index]
            scale = lerp(k0.scale, k1.scale, rate)
            rotate = quaternion_slerp(k0.rotate, k1.rotate, rate)
            translate = lerp(k0.translate, k1.translate, rate)
            if blend_rate < 1.0:
                scale = lerp(scale, k1.scale, blend_rate)
                rotate = quaternion_slerp(rotate, k1.rotate, blend_rate)
                translate = lerp(translate, k1.translate, blend_rate)
            node.scale = scale
            node.rotate = rotate
            node.translate = translate

    def play_animation(self, index: int, loop: bool, blend_seconds: float = 0.2) -> None:
        """Start the animation at ``index``, blending in over ``blend_seconds``."""
        self._animation_index = index
        self._animation_seconds = 0.0
        self._loop = loop
        self._end = False
        self._blend_time = 0.0
        self._blend_seconds = blend_seconds

    def is_playing_animation(self) -> bool:
        return 0 <= self._animation_index < len(self.resource.animations)

    def find_node(self, name: str) -> Optional[ModelNode]:
        """The first node with the given name, or None."""
        return next((node for node in self.nodes if node.name == name), None)