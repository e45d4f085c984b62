import struct

import pytest

from slimequest.model_resource import (
    Animation,
    Keyframe,
    Material,
    Mesh,
    ModelFormatError,
    ModelResource,
    NodeKeyData,
    ResourceNode,
    Subset,
    Vertex,
)
from slimequest.vector import Matrix, Vec3


def string_bytes(text):
    raw = text.encode()
    return struct.pack("<Q", len(raw)) + raw


def node_bytes(node_id, name, path, parent):
    return (
        struct.pack("<Q", node_id)
        + string_bytes(name)
        + string_bytes(path)
        + struct.pack("<i", parent)
        + struct.pack("<10f", 1, 1, 1, 0, 0, 0, 1, 0, 0, 0)
    )


def sample_resource():
    nodes = [
        ResourceNode(7, "root", "root", -1, Vec3(1, 1, 1), (0.0, 0.0, 0.0, 1.0), Vec3(0, 0, 0)),
        ResourceNode(9, "EyeBall", "root/EyeBall", 0, Vec3(0.5, 0.5, 0.5), (0.0, 0.5, 0.0, 0.5), Vec3(1, 2, 3)),
    ]
    materials = [Material("body", "body.png", (1.0, 0.5, 0.25, 1.0))]
    meshes = [
        Mesh(),
        Mesh(
            vertices=[
                Vertex(position=Vec3(1, 2, 3), texcoord=(0.5, 0.25), bone_index=(1, 2, 3, 4)),
                Vertex(normal=Vec3(0, 1, 0)),
                Vertex(),
            ],
            indices=[0, 1, 2],
            subsets=[Subset(0, 3, 0)],
            node_index=1,
            node_indices=[0, 1],
            offset_transforms=[Matrix.identity(), Matrix.translation(1, 2, 3)],
            bounds_min=Vec3(-1, -1, -1),
            bounds_max=Vec3(1, 1, 1),
        ),
    ]
    key = NodeKeyData(Vec3(1, 1, 1), (0.0, 0.0, 0.0, 1.0), Vec3(0, 0.5, 0))
    animations = [
        Animation("Idle", 1.5, [Keyframe(0.0, [key, key]), Keyframe(1.5, [key, key])]),
        Animation("Empty", 0.0, []),
    ]
    return ModelResource(nodes, materials, meshes, animations)


def test_round_trip():
    resource = sample_resource()
    assert ModelResource.loads(resource.dumps()) == resource


def test_dumps_is_stable():
    data = sample_resource().dumps()
    assert ModelResource.loads(data).dumps() == data


def test_empty_resource_is_four_zero_sizes():
    assert ModelResource().dumps() == bytes(32)
    assert ModelResource.loads(bytes(32)) == ModelResource()


def test_first_node_is_preceded_by_version():
    resource = ModelResource(nodes=[ResourceNode(1, "a", "a")])
    assert resource.dumps()[:12] == struct.pack("<QI", 1, 1)


def test_version_is_written_once_per_type():
    stream = (
        struct.pack("<QI", 2, 1)
        + node_bytes(3, "root", "root", -1)
        + node_bytes(4, "child", "root/child", 0)
        + struct.pack("<3Q", 0, 0, 0)
    )
    resource = ModelResource.loads(stream)
    assert [node.name for node in resource.nodes] == ["root", "child"]
    assert resource.nodes[1].parent_index == 0
    assert resource.dumps() == stream


def test_hand_built_material_stream():
    stream = (
        struct.pack("<Q", 0)
        + struct.pack("<QI", 1, 1)
        + string_bytes("skin")
        + string_bytes("skin.tga")
        + struct.pack("<4f", 0.5, 0.25, 1.0, 1.0)
        + struct.pack("<2Q", 0, 0)
    )
    resource = ModelResource.loads(stream)
    assert resource.materials == [Material("skin", "skin.tga", (0.5, 0.25, 1.0, 1.0))]


def test_find_node_index():
    resource = sample_resource()
    assert resource.find_node_index(9) == 1
    assert resource.find_node_index(7) == 0
    assert resource.find_node_index(12345) is None


def test_truncated_data_raises():
    data = sample_resource().dumps()
    with pytest.raises(ModelFormatError):
        ModelResource.loads(data[: len(data) // 2])


def test_huge_array_size_raises():
    stream = struct.pack("<3Q", 0, 0, 1) + struct.pack("<IQ", 1, 0) + struct.pack("<Q", 2**40)
    with pytest.raises(ModelFormatError):
        ModelResource.loads(stream)


def test_subset_with_unknown_material_raises():
    resource = sample_resource()
    resource.meshes[1].subsets[0].material_index = 3
    with pytest.raises(ModelFormatError):
        ModelResource.loads(resource.dumps())


def test_save_and_load_resolve_textures(tmp_path):
    resource = sample_resource()
    path = tmp_path / "Slime.mdl"
    resource.save(path)
    loaded = ModelResource.load(path)
    assert loaded == resource
    assert loaded.texture_path(loaded.materials[0]) == tmp_path / "body.png"


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ModelResource.load(tmp_path / "missing.mdl")