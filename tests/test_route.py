"""Tests for the route data model."""

import numpy as np
import pytest

from route_sculpture.route import RouteData, RoutePoint, haversine_distance


class TestHaversine:
    """Tests for great-circle distance."""

    def test_zero_distance(self):
        assert haversine_distance(46.0, 7.0, 46.0, 7.0) == 0.0

    def test_one_degree_of_latitude(self):
        """Test one degree of latitude is about 111 km."""
        distance = haversine_distance(0.0, 0.0, 1.0, 0.0)
        assert distance == pytest.approx(111195, rel=1e-3)


class TestRouteFromPoints:
    """Tests for deriving stats and bounds from points."""

    def test_bounds_and_elevation_stats(self):
        """Test derived bounds, min/max and gain/loss."""
        route = RouteData.from_points(
            [
                RoutePoint(lat=46.0, lng=7.0, elevation=1000),
                RoutePoint(lat=46.1, lng=7.2, elevation=1100),
                RoutePoint(lat=46.2, lng=7.1, elevation=1050),
                RoutePoint(lat=46.1, lng=6.9, elevation=1200),
            ]
        )

        assert route.bounds == ((6.9, 46.0), (7.2, 46.2))
        assert route.stats.min_elevation == 1000
        assert route.stats.max_elevation == 1200
        assert route.stats.elevation_gain == 250
        assert route.stats.elevation_loss == 50
        assert route.stats.distance > 0
        assert route.stats.duration is None

    def test_points_without_elevation_are_skipped(self):
        """Test that elevation stats ignore points without elevation."""
        route = RouteData.from_points(
            [
                RoutePoint(lat=46.0, lng=7.0, elevation=500),
                RoutePoint(lat=46.1, lng=7.1),
                RoutePoint(lat=46.2, lng=7.2, elevation=450),
            ]
        )

        assert route.has_elevation
        assert len(route.elevation_points) == 2
        assert route.stats.elevation_loss == 50

    def test_no_elevation(self, flat_route):
        """Test a route without any elevation data."""
        assert not flat_route.has_elevation
        assert flat_route.elevation_samples().shape == (0, 3)

    def test_empty_points_raise(self):
        with pytest.raises(ValueError):
            RouteData.from_points([])

    def test_spans(self, corner_route):
        assert corner_route.lat_span == pytest.approx(0.1)
        assert corner_route.lng_span == pytest.approx(0.1)


class TestRouteFromDict:
    """Tests for the upstream JSON shape."""

    def test_camel_case_stats(self, route_dict):
        """Test that camelCase stats are read as given."""
        route = RouteData.from_dict(route_dict)

        assert route.name == "Morning Ride"
        assert route.source == "gpx"
        assert len(route.points) == 3
        assert route.stats.elevation_gain == 50
        assert route.stats.min_elevation == 1200
        assert route.bounds == ((7.0, 46.0), (7.01, 46.02))

    def test_times_parsed(self, route_dict):
        """Test ISO timestamps with a Z suffix."""
        route = RouteData.from_dict(route_dict)

        assert route.points[0].time is not None
        assert route.points[0].time.tzinfo is not None

    def test_missing_stats_derived(self, route_dict):
        """Test that stats and bounds are derived when absent."""
        del route_dict["stats"]
        route = RouteData.from_dict(route_dict)

        assert route.stats.min_elevation == 1200
        assert route.stats.max_elevation == 1250
        assert route.stats.duration == 1200.0

    def test_alternative_coordinate_keys(self):
        """Test latitude/longitude and lon keys."""
        route = RouteData.from_dict(
            {"points": [{"latitude": 1.0, "longitude": 2.0}, {"lat": 1.5, "lon": 2.5, "elevation": 10}]}
        )

        assert route.points[0].lng == 2.0
        assert route.points[1].lng == 2.5
        assert route.points[1].elevation == 10.0

    def test_missing_coordinates_raise(self):
        with pytest.raises(ValueError, match="missing coordinates"):
            RouteData.from_dict({"points": [{"lat": 1.0}]})


class TestElevationSamples:
    """Tests for the (lng, lat, elevation) sample array."""

    def test_sample_layout(self, corner_route):
        samples = corner_route.elevation_samples()

        assert samples.shape == (3, 3)
        np.testing.assert_array_equal(samples[0], [10.0, 50.0, 100.0])
        np.testing.assert_array_equal(samples[:, 2], [100.0, 150.0, 200.0])
