import pytest

from slimequest.model import Model
from slimequest.model_resource import (
    Animation,
    Keyframe,
    ModelFormatError,
    ModelResource,
    NodeKeyData,
    ResourceNode,
)
from slimequest.vector import Matrix, Vec3


def _resource():
    return ModelResource(
        nodes=[
            ResourceNode(id=1, name="root", parent_index=-1, translate=Vec3(1.0, 0.0, 0.0)),
            ResourceNode(id=2, name="child", parent_index=0, translate=Vec3(0.0, 2.0, 0.0)),
        ],
        animations=[
            Animation(
                name="move",
                seconds_length=1.0,
                keyframes=[
                    Keyframe(seconds=0.0, node_keys=[NodeKeyData(), NodeKeyData()]),
                    Keyframe(
                        seconds=1.0,
                        node_keys=[
                            NodeKeyData(translate=Vec3(10.0, 0.0, 0.0)),
                            NodeKeyData(translate=Vec3(10.0, 0.0, 0.0)),
                        ],
                    ),
                ],
            )
        ],
    )


def _close(m1, m2):
    return all(
        a == pytest.approx(b, abs=1e-9)
        for r1, r2 in zip(m1.rows, m2.rows)
        for a, b in zip(r1, r2)
    )


def test_hierarchy_links_parent_and_children():
    model = Model(_resource())
    root, child = model.nodes
    assert child.parent is root
    assert root.children == [child]
    assert root.parent is None


def test_world_transform_composes_with_parent():
    model = Model(_resource())
    root, child = model.nodes
    assert _close(child.world_transform, child.local_transform @ root.world_transform)
    assert child.world_transform.origin == Vec3(1.0, 2.0, 0.0)


def test_update_transform_places_roots():
    model = Model(_resource())
    placement = Matrix.translation(0.0, 0.0, 3.0)
    model.update_transform(placement)
    root, child = model.nodes
    origin = root.world_transform.origin
    assert (origin.x, origin.y, origin.z) == pytest.approx((1.0, 0.0, 3.0))
    child_origin = child.world_transform.origin
    assert (child_origin.x, child_origin.y, child_origin.z) == pytest.approx((1.0, 2.0, 3.0))


def test_bad_parent_index_raises():
    resource = ModelResource(nodes=[ResourceNode(name="a", parent_index=5)])
    with pytest.raises(ModelFormatError):
        Model(resource)


def test_find_node():
    model = Model(_resource())
    assert model.find_node("child") is model.nodes[1]
    assert model.find_node("missing") is None


def test_not_playing_initially_and_out_of_range():
    model = Model(_resource())
    assert not model.is_playing_animation()
    model.play_animation(3, True)
    assert not model.is_playing_animation()
    model.play_animation(0, True)
    assert model.is_playing_animation()


def test_interpolates_between_keyframes():
    model = Model(_resource())
    model.play_animation(0, False, 0.0)
    model.update_animation(0.5)
    assert model.nodes[0].translate == Vec3(0.0, 0.0, 0.0)
    model.update_animation(0.25)
    assert model.nodes[0].translate.x == pytest.approx(5.0)
    assert model.current_animation_seconds == pytest.approx(0.75)


def test_non_looping_animation_stops_after_end():
    model = Model(_resource())
    model.play_animation(0, False, 0.0)
    model.update_animation(0.6)
    model.update_animation(0.6)
    assert model.current_animation_seconds == pytest.approx(1.0)
    assert model.is_playing_animation()
    model.update_animation(0.1)
    assert not model.is_playing_animation()


def test_looping_animation_wraps():
    model = Model(_resource())
    model.play_animation(0, True, 0.0)
    model.update_animation(0.75)
    model.update_animation(0.75)
    assert model.current_animation_seconds == pytest.approx(0.75 * 2 - 1.0)
    assert model.is_playing_animation()


def test_blending_moves_toward_next_key():
    blended = Model(_resource())
    blended.play_animation(0, False, 1.0)
    blended.update_animation(0.5)
    plain = Model(_resource())
    plain.play_animation(0, False, 0.0)
    plain.update_animation(0.5)
    assert plain.nodes[0].translate.x == 0.0
    assert 0.0 < blended.nodes[0].translate.x < 10.0


def test_from_file(tmp_path):
    path = tmp_path / "model.mdl"
    _resource().save(path)
    model = Model.from_file(path)
    assert [node.name for node in model.nodes] == ["root", "child"]
    assert model.resource.directory == tmp_path