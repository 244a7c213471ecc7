"""Tests for the click command line."""

import json

import pytest
from click.testing import CliRunner

from tactilemap.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestAssemble:

    def test_prints_layer_table(self, runner, street_corner_file):
        result = runner.invoke(cli, ['assemble', str(street_corner_file)])
        assert result.exit_code == 0, result.output
        assert 'Plate 100 x 100 mm, 11 layers' in result.output
        assert 'Roads' in result.output
        assert 'Orientation Marker' in result.output
        assert 'Wrote' not in result.output

    def test_writes_glb(self, runner, street_corner_file, tmp_path):
        out = tmp_path / "exports" / "corner.glb"
        result = runner.invoke(cli, ['assemble', str(street_corner_file), '-o', str(out)])
        assert result.exit_code == 0, result.output
        assert out.exists()
        assert f'Wrote {out}' in result.output

    def test_bare_name_goes_to_output_dir(self, runner, street_corner_file,
                                          tmp_path, monkeypatch):
        monkeypatch.setattr('tactilemap.cli.OUTPUT_DIR', tmp_path / "output")
        result = runner.invoke(cli, ['assemble', str(street_corner_file),
                                     '--output', 'corner.stl'])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "output" / "corner.stl").exists()

    def test_hidden_layers_marked(self, runner, street_corner_file):
        result = runner.invoke(cli, ['assemble', str(street_corner_file),
                                     '--hide', 'buildings'])
        assert result.exit_code == 0, result.output
        assert '[ ] Buildings' in result.output
        assert '[*] Roads' in result.output

    def test_unknown_layer_rejected(self, runner, street_corner_file):
        result = runner.invoke(cli, ['assemble', str(street_corner_file),
                                     '--hide', 'rivers'])
        assert result.exit_code == 2

    def test_invalid_map_data(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"roads": []}), encoding="utf-8")
        result = runner.invoke(cli, ['assemble', str(path)])
        assert result.exit_code == 1
        assert 'Invalid map data' in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ['assemble', str(tmp_path / "nope.json")])
        assert result.exit_code == 2


class TestCoordinateCommands:

    def test_to_local(self, runner):
        result = runner.invoke(cli, ['to-local', '1.0', '0.001', '--center-lat', '0',
                                     '--center-lng', '0', '--scale', '0.001'])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == '0.1113 111.3200'

    def test_to_latlng(self, runner):
        result = runner.invoke(cli, ['to-latlng', '0', '111.32', '--center-lat', '0',
                                     '--center-lng', '0', '--scale', '0.001'])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == '1.000000000 0.000000000'

    def test_scale(self, runner):
        result = runner.invoke(cli, ['scale', '100', '100'])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == '0.500000'

    def test_scale_rejects_non_positive_radius(self, runner):
        result = runner.invoke(cli, ['scale', '0', '100'])
        assert result.exit_code == 2
        assert 'radius must be positive' in result.output
