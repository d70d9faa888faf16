"""
Terrain biome classification.

Each site samples the banded relief field in a square window around it
and buckets the averaged jitter channels into a terrain biome. Special
biomes (City, Strange) are assigned later by the block stage.
"""

import structlog
import numpy as np
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .exceptions import ClassificationOutOfRange
from .height_field import HeightField
from .sites import Biome, Site

logger = structlog.get_logger()


# Descending score thresholds; the first one a score reaches wins
BIOME_THRESHOLDS: Tuple[Tuple[float, Biome], ...] = (
    (140, Biome.VALLEY),
    (100, Biome.PLAINS),
    (50, Biome.HILL),
    (0, Biome.MOUNTAIN),
)

# Fallback when a score is out of range
LOWEST_BIOME = Biome.MOUNTAIN


@dataclass
class BiomeOptions:
    """Biome classification options."""

    sample_size: float = 50  # Half-width of the sampling window
    offset_x: float = 0.0  # Site-to-field translation
    offset_y: float = 0.0
    score_divisor: float = 4.0


class BiomeClassifier:
    """Classifies sites into terrain biomes from a HeightField."""

    def __init__(self, field: HeightField, options: Optional[BiomeOptions] = None):
        """
        Initialize biome classifier.

        Args:
            field: Banded relief field to sample
            options: Sampling window and translation
        """
        self.field = field
        self.options = options or BiomeOptions()

        step = self.options.sample_size / 10
        samples = int(np.floor(2 * self.options.sample_size / step + 1e-9)) + 1
        self._offsets = -self.options.sample_size + step * np.arange(samples)

    @property
    def sample_count(self) -> int:
        """Number of field samples taken per site."""
        return len(self._offsets) ** 2

    def score(self, site: Site) -> float:
        """
        Average the (G, B) channels over the window around a site.

        The sum is divided by ``count - 1`` rather than ``count``.
        """
        xs = site.x + self.options.offset_x + self._offsets
        ys = site.y + self.options.offset_y + self._offsets
        grid_x, grid_y = np.meshgrid(xs, ys, indexing="ij")

        g, b = self.field.channels_at(grid_x, grid_y)
        averages = (g.astype(np.float64) + b.astype(np.float64)) / 2

        area_average = averages.sum() / (averages.size - 1)
        return float(area_average / self.options.score_divisor)

    @staticmethod
    def biome_for_score(score: float, site_id: int = -1) -> Biome:
        """
        Map a score onto the terrain bands.

        Raises:
            ClassificationOutOfRange: if the score is negative or NaN
        """
        for threshold, biome in BIOME_THRESHOLDS:
            if score >= threshold:
                return biome
        raise ClassificationOutOfRange(site_id, score)

    def classify(self, site: Site) -> Tuple[float, Biome]:
        """Compute ``(score, biome)`` for a site without modifying it."""
        score = self.score(site)
        return score, self.biome_for_score(score, site.id)

    def classify_sites(self, sites: List[Site]) -> None:
        """
        Classify every site in place.

        Out-of-range scores are logged and fall back to the lowest band.
        """
        for site in sites:
            try:
                site.biome_score, site.biome = self.classify(site)
            except ClassificationOutOfRange as e:
                logger.warning("Biome score outside all bands, using lowest band",
                               site_id=e.site_id, score=e.score,
                               fallback=LOWEST_BIOME.value)
                site.biome_score = e.score
                site.biome = LOWEST_BIOME

        distribution = Counter(site.biome.value for site in sites)
        logger.info("Terrain biomes classified", sites=len(sites),
                    distribution=dict(distribution))
