"""Tests for file helpers and logging setup."""

import json
import logging

import numpy as np
import pytest

from route_sculpture.config import Material
from route_sculpture.geometry import SceneNode, box_mesh
from route_sculpture.io import load_config, load_route, load_scene, save_grid
from route_sculpture.logging_config import setup_logging
from route_sculpture.manufacturing import export_to_stl


@pytest.fixture
def box_stl(tmp_path):
    """Binary STL of a 10 x 5 x 10 mm box."""
    scene = SceneNode().add(box_mesh(1.0, 0.5, 1.0))
    return export_to_stl(scene, filename="box.stl", output_dir=tmp_path).path


class TestLoadRoute:
    """Tests for route JSON loading."""

    def test_load(self, tmp_path, route_dict):
        path = tmp_path / "route.json"
        path.write_text(json.dumps(route_dict))

        route = load_route(path)

        assert route.name == "Morning Ride"
        assert len(route.points) == 3
        assert route.has_elevation

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "route.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError, match="JSON object"):
            load_route(path)


class TestLoadConfig:
    """Tests for config JSON loading."""

    def test_camel_case_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"material": "wood", "baseHeight": 2.5, "size": 10}))

        config = load_config(path)

        assert config.material is Material.WOOD
        assert config.base_height == 2.5

    def test_invalid_value_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"size": -5}))

        with pytest.raises(ValueError):
            load_config(path)


class TestLoadScene:
    """Tests for STL loading."""

    def test_roundtrip_counts(self, box_stl):
        scene = load_scene(box_stl)

        assert scene.mesh_count == 1
        assert scene.triangle_count == 12
        mesh = scene.meshes[0]
        assert not mesh.is_indexed
        assert mesh.vertex_count == 36
        assert mesh.normals is not None
        assert mesh.name == "box"

    def test_coordinates_in_file_units(self, box_stl):
        scene = load_scene(box_stl)

        assert scene.world_triangles()[:, :, 1].max() == pytest.approx(5.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_scene(tmp_path / "missing.stl")


class TestSaveGrid:
    """Tests for .npy grid output."""

    def test_save(self, tmp_path):
        grid = np.arange(16, dtype=np.float64).reshape(4, 4)
        path = save_grid(grid, tmp_path / "out" / "grid.npy")

        assert path.exists()
        np.testing.assert_array_equal(np.load(path), grid)

    def test_suffix_added(self, tmp_path):
        path = save_grid(np.zeros((2, 2)), tmp_path / "grid")

        assert path.name == "grid.npy"
        assert path.exists()

    def test_read_only_grid(self, tmp_path):
        grid = np.ones((3, 3))
        grid.flags.writeable = False

        path = save_grid(grid, tmp_path / "grid.npy")

        assert np.load(path).shape == (3, 3)


class TestSetupLogging:
    """Tests for the package logging helper."""

    def test_handlers_replaced(self):
        logger = setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)

        assert logger.name == "route_sculpture"
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = setup_logging(logging.INFO, log_file=log_file)

        logging.getLogger("route_sculpture.elevation.builder").info("grid ready")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        text = log_file.read_text()
        assert "route_sculpture.elevation.builder - INFO - grid ready" in text
