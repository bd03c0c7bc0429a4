"""Tests for the route-sculpture command-line tool."""

import json

import numpy as np
import pytest
from click.testing import CliRunner

from route_sculpture.cli import main
from route_sculpture.geometry import SceneNode, box_mesh
from route_sculpture.manufacturing import export_to_stl


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def route_json(tmp_path, route_dict):
    path = tmp_path / "route.json"
    path.write_text(json.dumps(route_dict))
    return path


@pytest.fixture
def box_stl(tmp_path):
    scene = SceneNode().add(box_mesh(1.0, 0.5, 1.0))
    return export_to_stl(scene, filename="box.stl", output_dir=tmp_path).path


class TestGridCommand:
    """Tests for `route-sculpture grid`."""

    def test_route_mode(self, runner, route_json, tmp_path):
        out = tmp_path / "grid.npy"
        result = runner.invoke(main, ["grid", str(route_json), "--size", "8", "--output", str(out)])

        assert result.exit_code == 0, result.output
        assert "1200.0 m" in result.output
        grid = np.load(out)
        assert grid.shape == (8, 8)
        assert set(np.unique(grid)) <= {1200.0, 1250.0, 1230.0}

    def test_route_without_elevation(self, runner, tmp_path):
        path = tmp_path / "flat.json"
        path.write_text(json.dumps({"points": [{"lat": 1, "lng": 2}, {"lat": 1.1, "lng": 2.1}]}))

        result = runner.invoke(main, ["grid", str(path)])

        assert result.exit_code == 1
        assert "no elevation" in result.output

    def test_bad_route_file(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(main, ["grid", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_mode(self, runner, route_json):
        result = runner.invoke(main, ["grid", str(route_json), "--mode", "satellite"])

        assert result.exit_code == 2


class TestValidateCommand:
    """Tests for `route-sculpture validate`."""

    def test_ready_model(self, runner, box_stl):
        result = runner.invoke(main, ["validate", str(box_stl)])

        assert result.exit_code == 0, result.output
        assert "Score" in result.output

    def test_not_ready_exits_nonzero(self, runner, box_stl, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"showBase": False}))

        result = runner.invoke(main, ["validate", str(box_stl), "--config", str(config)])

        assert result.exit_code == 1
        assert "must be fixed" in result.output


class TestExportCommand:
    """Tests for `route-sculpture export`."""

    def test_export_with_name(self, runner, box_stl, tmp_path):
        out_dir = tmp_path / "out"
        result = runner.invoke(
            main,
            ["export", str(box_stl), "--name", "Alpe d'Huez", "--scale", "1", "--output-dir", str(out_dir)],
        )

        assert result.exit_code == 0, result.output
        assert "Export complete!" in result.output
        assert (out_dir / "alpe-d-huez-circular-15cm.stl").exists()

    def test_ascii_export(self, runner, box_stl, tmp_path):
        out_dir = tmp_path / "ascii"
        result = runner.invoke(main, ["export", str(box_stl), "--ascii", "--output-dir", str(out_dir)])

        assert result.exit_code == 0, result.output
        assert (out_dir / "sculpture-circular-15cm.stl").read_bytes().startswith(b"solid")


class TestGroupOptions:
    """Tests for group-level options."""

    def test_verbose_enables_debug_logging(self, runner, route_json):
        result = runner.invoke(main, ["--verbose", "grid", str(route_json), "--size", "4"])

        assert result.exit_code == 0, result.output
        assert "DEBUG" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
