"""Site and cell records shared by the generation stages."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np


class Biome(str, Enum):
    """Biome labels a site can carry."""

    VALLEY = "Valley"
    PLAINS = "Plains"
    HILL = "Hill"
    MOUNTAIN = "Mountain"
    CITY = "City"
    STRANGE = "Strange"


TERRAIN_BIOMES = (Biome.VALLEY, Biome.PLAINS, Biome.HILL, Biome.MOUNTAIN)


class BlockType(str, Enum):
    """Special-zone type drawn for every cell."""

    DEFAULT = "Default"
    CITY = "City"
    STRANGE = "Strange"


@dataclass
class Site:
    """A numbered location on the pointcrawl."""

    id: int
    x: float
    y: float
    radius: float = 90.0  # Display size only
    biome_score: Optional[float] = None
    biome: Optional[Biome] = None

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def label(self) -> int:
        """Number printed on the map."""
        return self.id + 1


@dataclass
class Cell:
    """Partition cell belonging to the site with the same id."""

    id: int
    polygon: np.ndarray
    neighbors: List[int] = field(default_factory=list)
    block_type: Optional[BlockType] = None
    border: bool = False
