"""
Block types: the special-zone override stage.

Every cell draws one block type from a fixed weighted distribution. City
and Strange blocks overwrite the terrain biome of the matching site;
Default blocks keep it.
"""

import structlog
from collections import Counter
from typing import Dict, List, Optional

from .alea_prng import AleaPRNG
from .sites import Biome, BlockType, Cell, Site

logger = structlog.get_logger()

# P(Default)=1/2, P(City)=1/3, P(Strange)=1/6
BLOCK_WEIGHTS: Dict[BlockType, float] = {
    BlockType.DEFAULT: 3,
    BlockType.CITY: 2,
    BlockType.STRANGE: 1,
}

BLOCK_BIOMES: Dict[BlockType, Biome] = {
    BlockType.CITY: Biome.CITY,
    BlockType.STRANGE: Biome.STRANGE,
}


class BlockTypeAssigner:
    """Draws block types for cells and applies their biome overrides."""

    def __init__(self, prng: AleaPRNG, weights: Optional[Dict[BlockType, float]] = None):
        self.prng = prng
        self.weights = dict(weights or BLOCK_WEIGHTS)

    def draw(self, cell: Cell) -> BlockType:
        """Draw the cell's block type once; later calls return the stored type."""
        if cell.block_type is None:
            cell.block_type = self.prng.weighted_choice(self.weights)
        return cell.block_type

    @staticmethod
    def apply(cell: Cell, site: Site) -> Biome:
        """Override the site's biome for City and Strange cells."""
        if cell.id != site.id:
            raise ValueError(f"Cell {cell.id} does not belong to site {site.id}")

        override = BLOCK_BIOMES.get(cell.block_type)
        if override is not None:
            site.biome = override
        return site.biome

    def assign(self, cell: Cell, site: Site) -> BlockType:
        block_type = self.draw(cell)
        self.apply(cell, site)
        return block_type

    def assign_all(self, cells: List[Cell], sites: List[Site]) -> None:
        """Draw and apply block types for every cell in id order."""
        for cell in cells:
            self.assign(cell, sites[cell.id])

        counts = Counter(cell.block_type.value for cell in cells)
        logger.info("Block types assigned", cells=len(cells), types=dict(counts))
