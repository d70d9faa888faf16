"""
Bridge graph construction.

Each site draws three candidate destinations from its partition
neighbours (uniformly, with replacement) and links to them with fixed
acceptance probabilities. The result is a multigraph: it may contain
parallel edges and is not guaranteed to be connected.
"""

import structlog
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .alea_prng import AleaPRNG
from .planar_partition import PlanarPartition
from .sites import Site

logger = structlog.get_logger()


@dataclass
class BridgeOptions:
    """Acceptance probabilities for the three candidate destinations."""

    # The second candidate is accepted less often than the third
    first_acceptance: float = 1.0
    second_acceptance: float = 0.30
    third_acceptance: float = 0.70

    @property
    def acceptances(self) -> Tuple[float, float, float]:
        return (self.first_acceptance, self.second_acceptance, self.third_acceptance)


@dataclass(frozen=True)
class Bridge:
    """Route between two sites, keyed by id with positions for drawing."""

    source: int
    target: int
    start: Tuple[float, float]
    end: Tuple[float, float]

    @property
    def key(self) -> Tuple[int, int]:
        """Unordered id pair."""
        return (min(self.source, self.target), max(self.source, self.target))


class BridgeGraphBuilder:
    """Samples the partition's adjacency into a list of bridges."""

    def __init__(self, prng: AleaPRNG, options: Optional[BridgeOptions] = None):
        self.prng = prng
        self.options = options or BridgeOptions()

    def draw_candidates(self, neighbors: List[int]) -> List[int]:
        """Three independent uniform draws from the neighbour ids."""
        if not neighbors:
            return []
        return [self.prng.choice(neighbors) for _ in self.options.acceptances]

    def bridges_for_site(self, site: Site, sites: List[Site],
                         partition: PlanarPartition) -> List[Bridge]:
        """Bridges emitted from one site."""
        candidates = self.draw_candidates(partition.neighbors(site.id))
        if not candidates:
            logger.debug("Site has no neighbours, no bridges drawn", site_id=site.id)
            return []

        bridges = []
        for other in sites:
            for candidate, acceptance in zip(candidates, self.options.acceptances):
                if other.id == candidate and self.prng.chance(acceptance):
                    bridges.append(Bridge(site.id, other.id, site.position, other.position))
        return bridges

    def build_edges(self, sites: List[Site], partition: PlanarPartition) -> List[Bridge]:
        """
        Build the bridge list for all sites in ascending id order.

        Raises:
            PartitionUnavailable: if a site has no adjacency in the partition
        """
        bridges: List[Bridge] = []
        for site in sorted(sites, key=lambda s: s.id):
            bridges.extend(self.bridges_for_site(site, sites, partition))

        logger.info("Bridges built", sites=len(sites), bridges=len(bridges),
                    distinct_pairs=len({bridge.key for bridge in bridges}))
        return bridges
