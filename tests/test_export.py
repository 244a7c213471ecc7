"""Tests for trimesh preview export."""

import pytest
import trimesh

from tactilemap.export import export_scene, hex_to_rgba, layer_mesh, scene_to_trimesh
from tactilemap.mesh import MeshReleasedError
from tactilemap.scene import assemble_scene


@pytest.fixture
def empty_scene(make_map):
    with assemble_scene(make_map()) as scene:
        yield scene


def test_hex_to_rgba():
    assert hex_to_rgba('#ff0000') == [1.0, 0.0, 0.0, 1.0]
    assert hex_to_rgba('#0066cc') == pytest.approx([0.0, 0.4, 0.8, 1.0])


class TestSceneToTrimesh:

    def test_one_geometry_per_non_empty_layer(self, empty_scene):
        tm_scene = scene_to_trimesh(empty_scene)
        assert set(tm_scene.geometry) == {'basePlate', 'orientationMarker'}

    def test_hidden_layers_skipped(self, empty_scene):
        tm_scene = scene_to_trimesh(empty_scene, hidden=('orientationMarker',))
        assert set(tm_scene.geometry) == {'basePlate'}

    def test_invisible_layers_skipped(self, empty_scene):
        empty_scene.layer('basePlate').visible = False
        assert set(scene_to_trimesh(empty_scene).geometry) == {'orientationMarker'}

    def test_layer_mesh_merges_solids(self, street_corner, make_map):
        data = make_map(roads=street_corner['roads'])
        with assemble_scene(data) as scene:
            roads = scene.layer('roads')
            mesh = layer_mesh(roads)
            assert len(mesh.faces) == roads.triangle_count

    def test_empty_layer_gives_none(self, empty_scene):
        assert layer_mesh(empty_scene.layer('roads')) is None

    def test_disposed_scene_raises(self, make_map):
        scene = assemble_scene(make_map())
        scene.dispose()
        with pytest.raises(MeshReleasedError):
            scene_to_trimesh(scene)


class TestExportScene:

    def test_glb(self, empty_scene, tmp_path):
        path = export_scene(empty_scene, tmp_path / "out" / "plate.glb")
        assert path.exists()
        assert path.stat().st_size > 0

    def test_stl_merges_visible_layers(self, empty_scene, tmp_path):
        path = export_scene(empty_scene, tmp_path / "plate.stl")
        loaded = trimesh.load(path)
        assert len(loaded.faces) == 24

    def test_nothing_visible_raises(self, empty_scene, tmp_path):
        with pytest.raises(ValueError):
            export_scene(empty_scene, tmp_path / "plate.glb",
                         hidden=('basePlate', 'orientationMarker'))
