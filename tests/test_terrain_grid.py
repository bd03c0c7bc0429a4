"""Tests for terrain-mode grids and the last-request-wins requester.

Tiles are served by httpx.MockTransport; async code is driven with
asyncio.run so the tests stay plain synchronous pytest functions.
"""

import asyncio

import httpx
import numpy as np

from route_sculpture.elevation import (
    ElevationGridRequester,
    TerrainTileSource,
    build_elevation_grid,
    tile_bounds,
)
from route_sculpture.elevation.builder import TERRAIN_FETCH_ERROR

TEST_SOURCE = TerrainTileSource(url_template="https://tiles.test/{z}/{x}/{y}.{format}", api_key="k")

# (1, 154, 40) packs 105000 -> 500 m
ELEVATION_500_RGB = (1, 154, 40)


def _tile_xyz(request):
    z, x, y = request.url.path.strip("/").removesuffix(".png").split("/")
    return int(z), int(x), int(y)


def _run_terrain(route, handler, grid_size=16, source=TEST_SOURCE):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await build_elevation_grid(route, grid_size, "terrain", source=source, client=client)

    return asyncio.run(go())


class TestTerrainGrid:
    """Tests for building grids from terrain tiles."""

    def test_uniform_tiles(self, corner_route, make_tile_png):
        """Test every cell decodes the tile color."""
        png = make_tile_png(ELEVATION_500_RGB)
        requested = []

        def handler(request):
            requested.append(_tile_xyz(request))
            return httpx.Response(200, content=png)

        result = _run_terrain(corner_route, handler)

        assert result.error is None
        assert result.tile_coverage == 1.0
        assert result.grid.shape == (16, 16)
        np.testing.assert_allclose(result.grid, 500.0)
        assert not result.grid.flags.writeable
        assert requested
        assert {z for z, _, _ in requested} == {12}

    def test_each_tile_fetched_once(self, corner_route, make_tile_png):
        png = make_tile_png()
        requested = []

        def handler(request):
            requested.append(_tile_xyz(request))
            return httpx.Response(200, content=png)

        _run_terrain(corner_route, handler)

        assert len(requested) == len(set(requested))

    def test_api_key_in_request(self, corner_route, make_tile_png):
        png = make_tile_png()
        keys = set()

        def handler(request):
            keys.add(request.url.params.get("key"))
            return httpx.Response(200, content=png)

        source = TerrainTileSource(api_key="secret")
        _run_terrain(corner_route, handler, source=source)

        assert keys == {"secret"}

    def test_all_tiles_fail(self, corner_route):
        """Test total failure surfaces an error and no grid."""

        def handler(request):
            return httpx.Response(404)

        result = _run_terrain(corner_route, handler)

        assert result.grid is None
        assert result.error == TERRAIN_FETCH_ERROR
        assert result.tile_coverage == 0.0

    def test_transport_errors_count_as_failures(self, corner_route):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = _run_terrain(corner_route, handler)

        assert result.grid is None
        assert result.error

    def test_undecodable_tiles_count_as_failures(self, corner_route):
        def handler(request):
            return httpx.Response(200, content=b"<html>rate limited</html>")

        result = _run_terrain(corner_route, handler)

        assert result.grid is None
        assert result.error == TERRAIN_FETCH_ERROR

    def test_partial_failure_uses_min_elevation(self, corner_route, make_tile_png):
        """Test cells of failed tiles get the route's minimum elevation."""
        png = make_tile_png(ELEVATION_500_RGB)

        def handler(request):
            z, x, y = _tile_xyz(request)
            # only the tiles containing the western edge (lng 10.0) load
            if tile_bounds(x, y, z).west > 10.0:
                return httpx.Response(503)
            return httpx.Response(200, content=png)

        result = _run_terrain(corner_route, handler)

        assert result.error is None
        assert 0.0 < result.tile_coverage < 1.0
        np.testing.assert_allclose(result.grid[:, 0], 500.0)
        np.testing.assert_allclose(result.grid[:, -1], corner_route.stats.min_elevation)

    def test_terrain_mode_ignores_route_elevation(self, flat_route, make_tile_png):
        """Test terrain mode works for routes without elevation data."""
        png = make_tile_png(ELEVATION_500_RGB)

        result = _run_terrain(flat_route, lambda request: httpx.Response(200, content=png), grid_size=4)

        np.testing.assert_allclose(result.grid, 500.0)


class TestElevationGridRequester:
    """Tests for generation-counter cancellation."""

    def test_sequential_requests(self, corner_route):
        requester = ElevationGridRequester()

        async def go():
            first = await requester.request(corner_route, 8)
            second = await requester.request(corner_route, 16)
            return first, second

        first, second = asyncio.run(go())

        assert not first.stale
        assert not second.stale
        assert requester.latest is second
        assert requester.latest.grid.shape == (16, 16)
        assert requester.generation == 2
        assert not requester.loading

    def test_newer_request_supersedes_older(self, corner_route):
        """Test only the most recent concurrent request is published."""
        requester = ElevationGridRequester()

        async def go():
            return await asyncio.gather(
                requester.request(corner_route, 8),
                requester.request(corner_route, 16),
            )

        older, newer = asyncio.run(go())

        assert older.stale
        assert older.grid is None
        assert older.error is None
        assert not newer.stale
        assert requester.latest is newer

    def test_cancel_in_flight_request(self, corner_route, make_tile_png):
        """Test cancel() aborts a slow terrain fetch."""
        png = make_tile_png()

        async def slow_handler(request):
            await asyncio.sleep(30)
            return httpx.Response(200, content=png)

        async def go():
            async with httpx.AsyncClient(transport=httpx.MockTransport(slow_handler)) as client:
                requester = ElevationGridRequester(source=TEST_SOURCE, client=client)
                pending = asyncio.create_task(requester.request(corner_route, 8, "terrain"))
                for _ in range(5):
                    await asyncio.sleep(0)
                loading = requester.loading
                requester.cancel()
                return requester, loading, await pending

        requester, loading, result = asyncio.run(go())

        assert loading
        assert result.stale
        assert result.grid is None
        assert requester.latest is None
        assert not requester.loading

    def test_stale_result_not_published(self, corner_route):
        """Test latest keeps the previous result when a request is cancelled."""
        requester = ElevationGridRequester()

        async def go():
            kept = await requester.request(corner_route, 8)
            pending = asyncio.create_task(requester.request(corner_route, 16))
            await asyncio.sleep(0)
            requester.cancel()
            await pending
            return kept

        kept = asyncio.run(go())

        assert requester.latest is kept
