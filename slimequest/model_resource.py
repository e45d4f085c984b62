"""Model data (nodes, materials, meshes, animations) and its binary archive format."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Tuple, TypeVar, Union

from slimequest.vector import Float4, Matrix, Quaternion, Vec3

_CLASS_VERSION = 1

_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")
_F2 = struct.Struct("<2f")
_F3 = struct.Struct("<3f")
_F4 = struct.Struct("<4f")
_U4 = struct.Struct("<4I")
_F16 = struct.Struct("<16f")

T = TypeVar("T")


class ModelFormatError(ValueError):
    """Raised when model data cannot be decoded or is inconsistent."""


@dataclass
class ResourceNode:
    """A node of the model hierarchy in its bind pose."""

    id: int = 0
    name: str = ""
    path: str = ""
    parent_index: int = -1
    scale: Vec3 = Vec3(1.0, 1.0, 1.0)
    rotate: Quaternion = (0.0, 0.0, 0.0, 1.0)
    translate: Vec3 = Vec3()


@dataclass
class Material:
    name: str = ""
    texture_filename: str = ""
    color: Float4 = (0.8, 0.8, 0.8, 1.0)


@dataclass
class Subset:
    """A run of indices drawn with one material."""

    start_index: int = 0
    index_count: int = 0
    material_index: int = 0


@dataclass
class Vertex:
    position: Vec3 = Vec3()
    normal: Vec3 = Vec3()
    tangent: Vec3 = Vec3()
    texcoord: Tuple[float, float] = (0.0, 0.0)
    color: Float4 = (1.0, 1.0, 1.0, 1.0)
    bone_weight: Float4 = (1.0, 0.0, 0.0, 0.0)
    bone_index: Tuple[int, int, int, int] = (0, 0, 0, 0)


@dataclass
class Mesh:
    vertices: List[Vertex] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    subsets: List[Subset] = field(default_factory=list)
    node_index: int = 0
    node_indices: List[int] = field(default_factory=list)
    offset_transforms: List[Matrix] = field(default_factory=list)
    bounds_min: Vec3 = Vec3()
    bounds_max: Vec3 = Vec3()


@dataclass
class NodeKeyData:
    """Pose of one node at one keyframe."""

    scale: Vec3 = Vec3(1.0, 1.0, 1.0)
    rotate: Quaternion = (0.0, 0.0, 0.0, 1.0)
    translate: Vec3 = Vec3()


@dataclass
class Keyframe:
    seconds: float = 0.0
    node_keys: List[NodeKeyData] = field(default_factory=list)


@dataclass
class Animation:
    name: str = ""
    seconds_length: float = 0.0
    keyframes: List[Keyframe] = field(default_factory=list)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._pos = 0
        self._versions: Dict[str, int] = {}

    def take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise ModelFormatError(f"unexpected end of model data at offset {self._pos}")
        chunk = bytes(self._data[self._pos:end])
        self._pos = end
        return chunk

    def unpack(self, layout: struct.Struct) -> tuple:
        return layout.unpack(self.take(layout.size))

    def u32(self) -> int:
        return self.unpack(_U32)[0]

    def i32(self) -> int:
        return self.unpack(_I32)[0]

    def u64(self) -> int:
        return self.unpack(_U64)[0]

    def f32(self) -> float:
        return self.unpack(_F32)[0]

    def vec3(self) -> Vec3:
        return Vec3(*self.unpack(_F3))

    def float4(self) -> Float4:
        return self.unpack(_F4)

    def matrix(self) -> Matrix:
        values = self.unpack(_F16)
        return Matrix(tuple(values[row:row + 4] for row in range(0, 16, 4)))

    def string(self) -> str:
        return self.take(self.u64()).decode("utf-8", "surrogateescape")

    def array(self, code: str) -> List[int]:
        count = self.u64()
        layout = struct.Struct(f"<{count}{code}")
        return list(self.unpack(layout))

    def objects(self, tag: Optional[str], read_item: Callable[[_Reader], T]) -> List[T]:
        items = []
        for _ in range(self.u64()):
            if tag is not None and tag not in self._versions:
                self._versions[tag] = self.u32()
            items.append(read_item(self))
        return items


class _Writer:
    def __init__(self) -> None:
        self._out = bytearray()
        self._versioned: Set[str] = set()

    def getvalue(self) -> bytes:
        return bytes(self._out)

    def pack(self, layout: struct.Struct, *values) -> None:
        self._out += layout.pack(*values)

    def string(self, text: str) -> None:
        raw = text.encode("utf-8", "surrogateescape")
        self.pack(_U64, len(raw))
        self._out += raw

    def matrix(self, matrix: Matrix) -> None:
        self.pack(_F16, *(value for row in matrix.rows for value in row))

    def array(self, code: str, values: List[int]) -> None:
        self.pack(_U64, len(values))
        self._out += struct.pack(f"<{len(values)}{code}", *values)

    def objects(self, tag: Optional[str], items: list, write_item: Callable[[_Writer, T], None]) -> None:
        self.pack(_U64, len(items))
        for item in items:
            if tag is not None and tag not in self._versioned:
                self._versioned.add(tag)
                self.pack(_U32, _CLASS_VERSION)
            write_item(self, item)


def _read_node(r: _Reader) -> ResourceNode:
    return ResourceNode(
        id=r.u64(),
        name=r.string(),
        path=r.string(),
        parent_index=r.i32(),
        scale=r.vec3(),
        rotate=r.float4(),
        translate=r.vec3(),
    )


def _write_node(w: _Writer, node: ResourceNode) -> None:
    w.pack(_U64, node.id)
    w.string(node.name)
    w.string(node.path)
    w.pack(_I32, node.parent_index)
    w.pack(_F3, *node.scale)
    w.pack(_F4, *node.rotate)
    w.pack(_F3, *node.translate)


def _read_material(r: _Reader) -> Material:
    return Material(name=r.string(), texture_filename=r.string(), color=r.float4())


def _write_material(w: _Writer, material: Material) -> None:
    w.string(material.name)
    w.string(material.texture_filename)
    w.pack(_F4, *material.color)


def _read_subset(r: _Reader) -> Subset:
    return Subset(start_index=r.u32(), index_count=r.u32(), material_index=r.i32())


def _write_subset(w: _Writer, subset: Subset) -> None:
    w.pack(_U32, subset.start_index)
    w.pack(_U32, subset.index_count)
    w.pack(_I32, subset.material_index)


def _read_vertex(r: _Reader) -> Vertex:
    return Vertex(
        position=r.vec3(),
        normal=r.vec3(),
        tangent=r.vec3(),
        texcoord=r.unpack(_F2),
        color=r.float4(),
        bone_weight=r.float4(),
        bone_index=r.unpack(_U4),
    )


def _write_vertex(w: _Writer, vertex: Vertex) -> None:
    w.pack(_F3, *vertex.position)
    w.pack(_F3, *vertex.normal)
    w.pack(_F3, *vertex.tangent)
    w.pack(_F2, *vertex.texcoord)
    w.pack(_F4, *vertex.color)
    w.pack(_F4, *vertex.bone_weight)
    w.pack(_U4, *vertex.bone_index)


def _read_mesh(r: _Reader) -> Mesh:
    return Mesh(
        vertices=r.objects("Vertex", _read_vertex),
        indices=r.array("I"),
        subsets=r.objects("Subset", _read_subset),
        node_index=r.i32(),
        node_indices=r.array("i"),
        offset_transforms=r.objects(None, _Reader.matrix),
        bounds_min=r.vec3(),
        bounds_max=r.vec3(),
    )


def _write_mesh(w: _Writer, mesh: Mesh) -> None:
    w.objects("Vertex", mesh.vertices, _write_vertex)
    w.array("I", mesh.indices)
    w.objects("Subset", mesh.subsets, _write_subset)
    w.pack(_I32, mesh.node_index)
    w.array("i", mesh.node_indices)
    w.objects(None, mesh.offset_transforms, _Writer.matrix)
    w.pack(_F3, *mesh.bounds_min)
    w.pack(_F3, *mesh.bounds_max)


def _read_node_key(r: _Reader) -> NodeKeyData:
    return NodeKeyData(scale=r.vec3(), rotate=r.float4(), translate=r.vec3())


def _write_node_key(w: _Writer, key: NodeKeyData) -> None:
    w.pack(_F3, *key.scale)
    w.pack(_F4, *key.rotate)
    w.pack(_F3, *key.translate)


def _read_keyframe(r: _Reader) -> Keyframe:
    return Keyframe(seconds=r.f32(), node_keys=r.objects("NodeKeyData", _read_node_key))


def _write_keyframe(w: _Writer, keyframe: Keyframe) -> None:
    w.pack(_F32, keyframe.seconds)
    w.objects("NodeKeyData", keyframe.node_keys, _write_node_key)


def _read_animation(r: _Reader) -> Animation:
    return Animation(
        name=r.string(),
        seconds_length=r.f32(),
        keyframes=r.objects("Keyframe", _read_keyframe),
    )


def _write_animation(w: _Writer, animation: Animation) -> None:
    w.string(animation.name)
    w.pack(_F32, animation.seconds_length)
    w.objects("Keyframe", animation.keyframes, _write_keyframe)


@dataclass
class ModelResource:
    """All data of one model file; textures resolve relative to ``directory``."""

    nodes: List[ResourceNode] = field(default_factory=list)
    materials: List[Material] = field(default_factory=list)
    meshes: List[Mesh] = field(default_factory=list)
    animations: List[Animation] = field(default_factory=list)
    directory: Path = field(default=Path("."), compare=False)

    @classmethod
    def loads(cls, data: bytes) -> ModelResource:
        """Decode a model archive from bytes."""
        try:
            reader = _Reader(data)
            resource = cls(
                nodes=reader.objects("Node", _read_node),
                materials=reader.objects("Material", _read_material),
                meshes=reader.objects("Mesh", _read_mesh),
                animations=reader.objects("Animation", _read_animation),
            )
        except (struct.error, OverflowError, MemoryError) as exc:
            raise ModelFormatError(f"invalid model data: {exc}") from exc
        resource._check_subsets()
        return resource

    @classmethod
    def load(cls, path: Union[str, PathLike]) -> ModelResource:
        """Read a model archive from a file."""
        path = Path(path)
        resource = cls.loads(path.read_bytes())
        resource.directory = path.parent
        return resource

    def dumps(self) -> bytes:
        """Encode the model as archive bytes."""
        writer = _Writer()
        writer.objects("Node", self.nodes, _write_node)
        writer.objects("Material", self.materials, _write_material)
        writer.objects("Mesh", self.meshes, _write_mesh)
        writer.objects("Animation", self.animations, _write_animation)
        return writer.getvalue()

    def save(self, path: Union[str, PathLike]) -> None:
        Path(path).write_bytes(self.dumps())

    def find_node_index(self, node_id: int) -> Optional[int]:
        """Index of the node with the given id, or None."""
        return next((i for i, node in enumerate(self.nodes) if node.id == node_id), None)

    def texture_path(self, material: Material) -> Path:
        """Path of a material's texture, relative to the model's directory."""
        return self.directory / material.texture_filename

    def _check_subsets(self) -> None:
        count = len(self.materials)
        for mesh in self.meshes:
            for subset in mesh.subsets:
                if not 0 <= subset.material_index < count:
                    raise ModelFormatError(
                        f"subset refers to material {subset.material_index}, "
                        f"but the model has {count}"
                    )