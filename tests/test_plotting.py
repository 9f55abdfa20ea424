import pytest

from virtual_mirror.avatar.morph import build_mesh
from virtual_mirror.avatar.plotting import mesh_figure
from virtual_mirror.models import AvatarAttributes


def test_one_trace_per_visible_solid():
    mesh = build_mesh(AvatarAttributes(hair_style='long', facial_hair='beard'))
    fig = mesh_figure(mesh, segments=8)
    expected = [p.name for p in mesh.visible_parts() if p.kind != 'group']
    assert [t.name for t in fig.data] == expected
    assert 'beard' in expected and 'hair_short' not in expected


def test_torso_trace_is_translated():
    mesh = build_mesh(AvatarAttributes(height=175, weight=95))
    fig = mesh_figure(mesh, segments=8)
    torso = next(t for t in fig.data if t.name == 'torso')
    assert min(torso.y) == pytest.approx(1.05)
    assert max(torso.y) == pytest.approx(1.95)
    assert torso.color == mesh.materials['skin']


def test_released_mesh_cannot_be_plotted():
    mesh = build_mesh(AvatarAttributes())
    mesh.release()
    with pytest.raises(ValueError):
        mesh_figure(mesh)
