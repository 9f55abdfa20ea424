import numpy as np
import pytest

from virtual_mirror.avatar import morph
from virtual_mirror.avatar.morph import FACIAL_HAIR_PARTS, HAIR_STYLE_PARTS, MeshMorpher, build_mesh
from virtual_mirror.models import AvatarAttributes, BodyMeasurements


def test_profile_follows_body_shape(neutral_avatar, neutral_measurements):
    mesh = build_mesh(neutral_avatar, neutral_measurements)
    assert mesh.profile.shape == (7, 2)
    np.testing.assert_allclose(mesh.profile, np.array(morph.TORSO_PROFILES['masculine']))

    fem = build_mesh(neutral_avatar.with_changes(body_shape='feminine'), neutral_measurements)
    assert fem.profile.shape == (8, 2)
    assert fem.regions == (None, 'hips', 'hips', 'waist', 'chest', 'chest', None, None)


def test_region_radii_scale_with_measurements(neutral_avatar):
    m = BodyMeasurements(chest=130, waist=70, hips=100)
    mesh = build_mesh(neutral_avatar, m)
    base = np.array(morph.TORSO_PROFILES['masculine'])
    expected_scale = np.array([1.0, 1.0, 1.0, 0.85, 1.15, 1.15, 1.0])
    np.testing.assert_allclose(mesh.profile[:, 0], base[:, 0] * expected_scale)
    # heights are never scaled
    np.testing.assert_allclose(mesh.profile[:, 1], base[:, 1])


def test_torso_surface_is_lathe_of_profile(neutral_avatar, neutral_measurements):
    mesh = build_mesh(neutral_avatar, neutral_measurements, lathe_segments=12)
    assert mesh.torso_vertices.shape == (13 * 7, 3)
    radii = np.hypot(mesh.torso_vertices[:, 0], mesh.torso_vertices[:, 2]).reshape(13, 7)
    np.testing.assert_allclose(radii, np.tile(mesh.profile[:, 0], (13, 1)), atol=1e-12)


def test_bottom_up_positions(neutral_avatar, neutral_measurements):
    mesh = build_mesh(neutral_avatar, neutral_measurements)
    assert mesh.part('torso').position == (0.0, 1.05, 0.0)
    assert mesh.part('neck').position[1] == pytest.approx(1.95 + 0.075)
    # oval face: head scale y = 1.1 * 1.0
    assert mesh.part('head').position[1] == pytest.approx(2.1 + 0.2 * 1.1)
    assert mesh.part('left_shoulder').position == pytest.approx((-0.32, 1.05 + 0.9 * 0.88, 0.0))
    assert mesh.part('right_shoulder').position == pytest.approx((0.32, 1.05 + 0.9 * 0.88, 0.0))
    assert mesh.part('left_leg').position == pytest.approx((-0.24 * 0.7, 1.05 + 0.9 * 0.02, 0.0))


def test_height_and_weight_scale_body(neutral_measurements):
    tall = AvatarAttributes(height=210, weight=150)
    mesh = build_mesh(tall, neutral_measurements)
    assert mesh.factors.height_scale == pytest.approx(1.1)
    assert mesh.factors.mass_factor == pytest.approx(1.15)
    assert mesh.part('torso').scale == pytest.approx((1.0, 1.1, 1.0))
    assert mesh.part('left_arm').scale == pytest.approx((1.15, 1.0, 1.15))
    assert mesh.part('right_shoulder').position[0] == pytest.approx(0.32 * 1.15)


def test_limb_segments_split_length(neutral_avatar, neutral_measurements):
    mesh = build_mesh(neutral_avatar, neutral_measurements)
    assert mesh.part('left_arm.joint').position[1] == pytest.approx(-0.425)
    assert mesh.part('left_arm.upper').scale[1] == pytest.approx(0.425 / 0.4)
    assert mesh.part('left_arm.lower').position[1] == pytest.approx(-0.425 - 0.2125)
    assert mesh.part('left_arm.hand').position[1] == pytest.approx(-0.88)
    assert mesh.part('right_leg.joint').position[1] == pytest.approx(-0.5)
    assert mesh.part('right_leg.foot').position == pytest.approx((0.0, -1.04, 0.05))
    assert [p.name for p in mesh.children('left_leg')] == [
        'left_leg.upper', 'left_leg.joint', 'left_leg.lower', 'left_leg.foot']


def test_world_transforms_compose_parent_frames(neutral_measurements):
    heavy = AvatarAttributes(height=175, weight=150)
    mesh = build_mesh(heavy, neutral_measurements)
    foot = mesh.world_transform('right_leg.foot')
    leg = mesh.part('right_leg')
    assert foot.position == pytest.approx((leg.position[0], leg.position[1] - 1.04, 0.05 * 1.15))
    assert foot.scale == pytest.approx((1.15, 1.0, 1.15))

    nose = mesh.world_transform('nose')
    head = mesh.part('head')
    assert nose.position == pytest.approx(np.array(head.position) + np.array(head.scale) * np.array((0, -0.02, 0.19)))


def test_parents_precede_children(avatar):
    mesh = build_mesh(avatar)
    for idx, part in enumerate(mesh.parts):
        assert part.parent < idx


@pytest.mark.parametrize('face_shape,factors', [
    ('oval', (0.95, 1.0, 0.98)),
    ('round', (1.05, 0.95, 1.02)),
    ('square', (1.02, 0.95, 1.0)),
])
def test_head_scale_per_face_shape(avatar, face_shape, factors):
    mesh = build_mesh(avatar.with_changes(face_shape=face_shape))
    assert mesh.part('head').scale == pytest.approx((factors[0], 1.1 * factors[1], factors[2]))


@pytest.mark.parametrize('style', ['short', 'long', 'bun', 'bald'])
def test_one_hair_style_visible(avatar, style):
    mesh = build_mesh(avatar.with_changes(hair_style=style))
    visible = [name for name in HAIR_STYLE_PARTS if mesh.is_visible(name)]
    assert visible == ([] if style == 'bald' else [f'hair_{style}'])


@pytest.mark.parametrize('facial_hair', ['none', 'mustache', 'goatee', 'beard'])
def test_one_facial_hair_visible(avatar, facial_hair):
    mesh = build_mesh(avatar.with_changes(facial_hair=facial_hair))
    visible = [name for name in FACIAL_HAIR_PARTS if mesh.is_visible(name)]
    assert visible == ([] if facial_hair == 'none' else [facial_hair])


def test_facial_hair_hidden_for_feminine(avatar):
    mesh = build_mesh(avatar.with_changes(body_shape='feminine', facial_hair='beard'))
    assert mesh.part('facial_hair').visible is False
    assert not any(mesh.is_visible(name) for name in FACIAL_HAIR_PARTS)


def test_materials_from_colors(avatar):
    mesh = build_mesh(avatar.with_changes(skin_tone='#A06A42', hair_color='#d35a40', eye_color='#4169e1'))
    assert mesh.materials['skin'] == '#a06a42'
    assert mesh.materials['hair'] == '#d35a40'
    assert mesh.materials['eyes'] == '#4169e1'
    assert mesh.materials['mouth'] == '#704a2e'
    assert mesh.part('mustache').material == 'hair'


def test_build_is_idempotent(avatar):
    a = build_mesh(avatar)
    b = build_mesh(avatar)
    assert a.parts == b.parts
    np.testing.assert_array_equal(a.profile, b.profile)
    np.testing.assert_array_equal(a.torso_vertices, b.torso_vertices)
    np.testing.assert_array_equal(a.torso_faces, b.torso_faces)


def test_measurements_default_to_estimate(avatar):
    mesh = build_mesh(avatar)
    assert mesh.measurements.as_dict() == {'chest': 101, 'waist': 79, 'hips': 93}


def test_morpher_replaces_then_releases(avatar):
    morpher = MeshMorpher(lathe_segments=8)
    first = morpher.build_or_update_mesh(avatar)
    assert morpher.current is first
    second = morpher.build_or_update_mesh(avatar.with_changes(weight=90))
    assert morpher.current is second
    assert first.released and first.torso_vertices is None
    assert not second.released and second.torso_vertices is not None

    morpher.dispose()
    assert morpher.current is None
    assert second.released
