"""Tests for the Voronoi planar partition."""

import numpy as np
import pytest

from py_pointcrawl.core.alea_prng import AleaPRNG
from py_pointcrawl.core.exceptions import PartitionUnavailable
from py_pointcrawl.core.planar_partition import (
    PartitionConfig,
    VoronoiPartitionProvider,
    generate_partition,
    mirror_points,
    scatter_points,
)


def polygon_area(polygon):
    x = polygon[:, 0]
    y = polygon[:, 1]
    return 0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


class TestScatterPoints:
    """Test site scattering."""

    def test_points_respect_margin(self):
        points = scatter_points(1000, 800, 50, 200, AleaPRNG("margin"))

        assert points.shape == (50, 2)
        assert np.all(points[:, 0] >= 200) and np.all(points[:, 0] <= 800)
        assert np.all(points[:, 1] >= 200) and np.all(points[:, 1] <= 600)

    def test_margin_too_large_uses_full_region(self):
        points = scatter_points(100, 100, 20, 200, AleaPRNG("small"))

        assert np.all(points >= 0) and np.all(points <= 100)

    def test_mirror_points(self):
        points = np.array([[10.0, 20.0]])
        mirrored = mirror_points(points, 100, 50)

        np.testing.assert_array_equal(
            mirrored, [[-10, 20], [190, 20], [10, -20], [10, 80]]
        )


class TestGeneratePartition:
    """Test partition structure."""

    @pytest.fixture
    def partition(self):
        return generate_partition(PartitionConfig(992, 992, 15), AleaPRNG("partition_test"))

    def test_one_cell_per_site(self, partition):
        assert len(partition) == 15
        assert len(partition.cell_neighbors) == 15
        assert len(partition.cell_polygons) == 15

    def test_neighbors_symmetric_and_exclude_self(self, partition):
        for i in range(len(partition)):
            neighbors = partition.neighbors(i)
            assert i not in neighbors
            assert neighbors == sorted(set(neighbors))
            for j in neighbors:
                assert i in partition.neighbors(j)

    def test_every_site_has_neighbors(self, partition):
        assert all(partition.neighbors(i) for i in range(len(partition)))

    def test_polygons_tile_region(self, partition):
        total = sum(polygon_area(partition.polygon(i)) for i in range(len(partition)))

        assert total == pytest.approx(992 * 992, rel=1e-6)

    def test_polygons_within_region(self, partition):
        for i in range(len(partition)):
            polygon = partition.polygon(i)
            assert polygon.shape[1] == 2
            assert np.all(polygon >= -1e-6)
            assert np.all(polygon <= 992 + 1e-6)

    def test_site_inside_own_cell(self, partition):
        for i, (x, y) in enumerate(partition.points):
            polygon = partition.polygon(i)
            edges = np.roll(polygon, -1, axis=0) - polygon
            to_site = np.array([x, y]) - polygon
            cross = edges[:, 0] * to_site[:, 1] - edges[:, 1] * to_site[:, 0]
            assert np.all(cross >= -1e-6) or np.all(cross <= 1e-6)

    def test_border_flags_mark_edge_cells(self, partition):
        for i in range(len(partition)):
            polygon = partition.polygon(i)
            on_edge = bool(np.any(np.isclose(polygon, 0.0, atol=1e-6))
                           or np.any(np.isclose(polygon, 992.0, atol=1e-6)))
            assert partition.cell_border_flags[i] == int(on_edge)

    def test_deterministic(self):
        a = generate_partition(PartitionConfig(500, 500, 10), AleaPRNG("same"))
        b = generate_partition(PartitionConfig(500, 500, 10), AleaPRNG("same"))

        np.testing.assert_array_equal(a.points, b.points)
        assert a.cell_neighbors == b.cell_neighbors

    def test_single_site_covers_region(self):
        partition = generate_partition(PartitionConfig(600, 400, 1), AleaPRNG("single"))

        assert partition.neighbors(0) == []
        assert polygon_area(partition.polygon(0)) == pytest.approx(600 * 400)
        assert partition.cell_border_flags[0] == 1

    def test_unknown_cell_raises(self, partition):
        with pytest.raises(PartitionUnavailable):
            partition.neighbors(99)
        with pytest.raises(PartitionUnavailable):
            partition.polygon(-1)

    def test_zero_sites_rejected(self):
        with pytest.raises(ValueError):
            generate_partition(PartitionConfig(100, 100, 0), AleaPRNG("none"))

    def test_provider_uses_margin(self):
        provider = VoronoiPartitionProvider(margin=100)
        partition = provider.partition(PartitionConfig(400, 400, 8), AleaPRNG("provider"))

        assert np.all(partition.points >= 100)
        assert np.all(partition.points <= 300)
