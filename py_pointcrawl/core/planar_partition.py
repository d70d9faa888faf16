"""Planar partition of the map into one Voronoi cell per site."""

import numpy as np
from scipy.spatial import Voronoi, QhullError
from typing import List, NamedTuple, Protocol
from dataclasses import dataclass
import structlog

from .alea_prng import AleaPRNG
from .exceptions import PartitionUnavailable

logger = structlog.get_logger()


class PartitionConfig(NamedTuple):
    """Region and site count for a partition."""
    width: float
    height: float
    count: int


@dataclass
class PlanarPartition:
    """Scattered sites with their cell polygons and adjacency.

    Cell ``i`` belongs to ``points[i]``; ids are stable and 0-based.
    """
    width: float
    height: float
    points: np.ndarray                 # points[i] = [x, y] site position
    cell_neighbors: List[List[int]]    # cell_neighbors[i] = adjacent cell ids, sorted
    cell_polygons: List[np.ndarray]    # cell_polygons[i] = ordered boundary vertices
    cell_border_flags: np.ndarray      # 1 if the cell touches the region edge

    def __len__(self) -> int:
        return len(self.points)

    def _check_id(self, cell_id: int) -> None:
        if not 0 <= cell_id < len(self.points):
            raise PartitionUnavailable(
                f"Partition has no cell {cell_id} ({len(self.points)} cells)",
                cell_id=cell_id,
            )

    def neighbors(self, cell_id: int) -> List[int]:
        """Ids of cells sharing an edge with ``cell_id`` (never itself)."""
        self._check_id(cell_id)
        if cell_id >= len(self.cell_neighbors):
            raise PartitionUnavailable(f"No adjacency for cell {cell_id}", cell_id=cell_id)
        return self.cell_neighbors[cell_id]

    def polygon(self, cell_id: int) -> np.ndarray:
        """Boundary vertices of ``cell_id`` in counter-clockwise order."""
        self._check_id(cell_id)
        if cell_id >= len(self.cell_polygons) or len(self.cell_polygons[cell_id]) < 3:
            raise PartitionUnavailable(f"No polygon for cell {cell_id}", cell_id=cell_id)
        return self.cell_polygons[cell_id]


class PartitionProvider(Protocol):
    """Anything that can scatter sites and partition the plane around them."""

    def partition(self, config: PartitionConfig, prng: AleaPRNG) -> PlanarPartition:
        ...


def scatter_points(width: float, height: float, count: int,
                   margin: float, prng: AleaPRNG) -> np.ndarray:
    """
    Scatter ``count`` uniform random points inside the region.

    Points keep ``margin`` distance from every edge. When the margin leaves
    no room the full region is used instead.

    Returns:
        Array of [x, y] point coordinates
    """
    if width - 2 * margin <= 0 or height - 2 * margin <= 0:
        logger.warning("Partition margin leaves no room, scattering over full region",
                       margin=margin, width=width, height=height)
        margin = 0

    points = []
    for _ in range(count):
        x = prng.uniform(margin, width - margin)
        y = prng.uniform(margin, height - margin)
        points.append([x, y])

    return np.array(points, dtype=np.float64).reshape(-1, 2)


def mirror_points(points: np.ndarray, width: float, height: float) -> np.ndarray:
    """
    Reflect points across the four region edges.

    Adding the reflections bounds every original Voronoi cell exactly at the
    region edges, so no cell is infinite.
    """
    x = points[:, 0]
    y = points[:, 1]
    left = np.column_stack([-x, y])
    right = np.column_stack([2 * width - x, y])
    top = np.column_stack([x, -y])
    bottom = np.column_stack([x, 2 * height - y])
    return np.vstack([left, right, top, bottom])


def build_cell_connectivity(vor: Voronoi, n_points: int):
    """
    Build cell adjacency from scipy Voronoi ridges.

    Args:
        vor: scipy Voronoi diagram
        n_points: Number of real sites (mirrored points follow them)

    Returns:
        Tuple of (cell_neighbors, border_flags)
    """
    cell_neighbors = [set() for _ in range(n_points)]
    border_flags = np.zeros(n_points, dtype=np.uint8)

    for p1, p2 in vor.ridge_points:
        if p1 < n_points and p2 < n_points:
            cell_neighbors[p1].add(int(p2))
            cell_neighbors[p2].add(int(p1))
        elif p1 < n_points:
            border_flags[p1] = 1
        elif p2 < n_points:
            border_flags[p2] = 1

    return [sorted(neighbors) for neighbors in cell_neighbors], border_flags


def build_cell_polygons(vor: Voronoi, n_points: int) -> List[np.ndarray]:
    """
    Build ordered boundary polygons for each real site.

    Voronoi cells are convex, so sorting vertices by angle around their
    mean gives a counter-clockwise boundary.
    """
    polygons = []
    for i in range(n_points):
        region = vor.regions[vor.point_region[i]]
        if not region or -1 in region:
            polygons.append(np.empty((0, 2)))
            continue

        vertices = vor.vertices[region]
        center = vertices.mean(axis=0)
        angles = np.arctan2(vertices[:, 1] - center[1], vertices[:, 0] - center[0])
        polygons.append(vertices[np.argsort(angles)])

    return polygons


def generate_partition(config: PartitionConfig, prng: AleaPRNG,
                       margin: float = 200) -> PlanarPartition:
    """
    Scatter sites and compute their bounded Voronoi partition.

    Args:
        config: Region size and number of sites
        prng: Stream used to scatter the sites
        margin: Minimum distance of sites from the region edges

    Returns:
        PlanarPartition with one cell per site

    Raises:
        PartitionUnavailable: if the diagram cannot be computed
    """
    if config.count < 1:
        raise ValueError("Partition needs at least one site")

    logger.info("Generating planar partition", width=config.width,
                height=config.height, count=config.count, margin=margin)

    points = scatter_points(config.width, config.height, config.count, margin, prng)
    all_points = np.vstack([points, mirror_points(points, config.width, config.height)])

    try:
        vor = Voronoi(all_points)
    except QhullError as e:
        logger.error("Voronoi computation failed", error=str(e))
        raise PartitionUnavailable(f"Voronoi computation failed: {e}") from e

    cell_neighbors, border_flags = build_cell_connectivity(vor, len(points))
    cell_polygons = build_cell_polygons(vor, len(points))

    missing = [i for i, polygon in enumerate(cell_polygons) if len(polygon) < 3]
    if missing:
        raise PartitionUnavailable(f"Cells without a bounded polygon: {missing}",
                                   cell_id=missing[0])

    logger.info("Planar partition generated", cells=len(points),
                ridges=len(vor.ridge_points))

    return PlanarPartition(
        width=config.width,
        height=config.height,
        points=points,
        cell_neighbors=cell_neighbors,
        cell_polygons=cell_polygons,
        cell_border_flags=border_flags,
    )


class VoronoiPartitionProvider:
    """Partition provider backed by scipy's Voronoi diagram."""

    def __init__(self, margin: float = 200):
        self.margin = margin

    def partition(self, config: PartitionConfig, prng: AleaPRNG) -> PlanarPartition:
        return generate_partition(config, prng, margin=self.margin)

