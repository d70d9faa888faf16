"""
Pointcrawl generation pipeline.

Stages run strictly in order over one GenerationContext:
1. Height field (relief noise, banding, jitter channels)
2. Planar partition (site scattering, cells, adjacency)
3. Terrain biome classification
4. Block type overrides (City, Strange)
5. Bridge graph
6. Content assignment (ascending site id)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, Field

from .alea_prng import AleaPRNG
from .biomes import BiomeClassifier, BiomeOptions
from .blocks import BlockTypeAssigner
from .bridges import Bridge, BridgeGraphBuilder, BridgeOptions
from .content import ContentAssigner, ContentTables, SiteContent, default_content_tables
from .exceptions import PartitionUnavailable
from .height_field import HeightField, HeightFieldGenerator, HeightFieldOptions
from .planar_partition import (
    PartitionConfig,
    PartitionProvider,
    PlanarPartition,
    VoronoiPartitionProvider,
)
from .sites import Cell, Site

logger = structlog.get_logger()

SITE_RADIUS_RANGE = (80.0, 100.0)


class PointcrawlConfig(BaseModel):
    """Parameters of one generation run."""

    seed: str = Field(default="default", description="Random seed")
    site_count: int = Field(default=15, ge=1, description="Number of sites")
    map_width: int = Field(default=2480, ge=20, description="Map width in pixels")
    map_height: int = Field(default=1240, ge=20, description="Map height in pixels")
    partition_margin: float = Field(default=200, ge=0, description="Site distance from partition edges")

    # Relief noise
    octaves: int = Field(default=9, ge=1, description="Noise octaves")
    persistence: float = Field(default=0.45, gt=0, lt=1, description="Amplitude falloff per octave")
    increment: float = Field(default=0.002, gt=0, description="Noise step per pixel")

    # Classification
    sample_size: float = Field(default=50, gt=0, description="Half-width of the biome sampling window")

    # Bridges
    first_acceptance: float = Field(default=1.0, ge=0, le=1)
    second_acceptance: float = Field(default=0.30, ge=0, le=1)
    third_acceptance: float = Field(default=0.70, ge=0, le=1)

    @property
    def x_border(self) -> float:
        return self.map_width / 20

    @property
    def y_border(self) -> float:
        return self.map_height / 10

    @property
    def partition_width(self) -> float:
        """Width of the region sites are scattered in (right half of the map)."""
        return self.map_width / 2 - self.x_border * 2

    @property
    def partition_height(self) -> float:
        return self.map_height - self.y_border * 2

    @property
    def partition_origin(self) -> tuple:
        """Map position of the partition region's top-left corner."""
        return (self.map_width / 2 + self.x_border, self.y_border)

    def height_field_options(self) -> HeightFieldOptions:
        return HeightFieldOptions(octaves=self.octaves, persistence=self.persistence,
                                  increment=self.increment)

    def biome_options(self) -> BiomeOptions:
        offset_x, offset_y = self.partition_origin
        return BiomeOptions(sample_size=self.sample_size, offset_x=offset_x, offset_y=offset_y)

    def bridge_options(self) -> BridgeOptions:
        return BridgeOptions(self.first_acceptance, self.second_acceptance,
                             self.third_acceptance)


@dataclass
class GenerationContext:
    """Mutable state of one run, owned by the generator."""

    config: PointcrawlConfig
    prng: AleaPRNG
    tables: ContentTables
    height_field: Optional[HeightField] = None
    partition: Optional[PlanarPartition] = None
    sites: List[Site] = field(default_factory=list)
    cells: List[Cell] = field(default_factory=list)
    bridges: List[Bridge] = field(default_factory=list)
    contents: Dict[int, SiteContent] = field(default_factory=dict)


@dataclass
class Pointcrawl:
    """Finished pointcrawl: labelled sites and their bridges."""

    config: PointcrawlConfig
    sites: List[Site]
    cells: List[Cell]
    bridges: List[Bridge]
    contents: Dict[int, SiteContent]
    descriptors_remaining: int

    def to_dict(self) -> Dict[str, Any]:
        """Plain data for renderers and the API."""
        origin_x, origin_y = self.config.partition_origin
        sites = []
        for site in self.sites:
            cell = self.cells[site.id]
            content = self.contents[site.id]
            sites.append({
                "id": site.id,
                "label": site.label,
                "position": [site.x, site.y],
                "radius": site.radius,
                "biome": site.biome.value,
                "biome_score": site.biome_score,
                "block_type": cell.block_type.value,
                "polygon": cell.polygon.tolist(),
                "neighbors": list(cell.neighbors),
                "border": cell.border,
                "descriptor": content.descriptor,
                "location": content.location,
                "features": list(content.features),
                "title": content.title,
            })

        return {
            "seed": self.config.seed,
            "width": self.config.map_width,
            "height": self.config.map_height,
            "origin": [origin_x, origin_y],
            "sites": sites,
            "bridges": [
                {
                    "source": bridge.source,
                    "target": bridge.target,
                    "start": list(bridge.start),
                    "end": list(bridge.end),
                }
                for bridge in self.bridges
            ],
        }


class PointcrawlGenerator:
    """
    Runs the generation stages in order.

    Each run draws descriptors from its own copy of the tables, so the
    tables passed in are never consumed and repeated runs with one seed
    give identical results.
    """

    def __init__(self, config: Optional[PointcrawlConfig] = None,
                 tables: Optional[ContentTables] = None,
                 partition_provider: Optional[PartitionProvider] = None,
                 height_field: Optional[HeightField] = None):
        """
        Initialize the generator.

        Args:
            config: Run parameters
            tables: Content tables; bundled defaults when omitted
            partition_provider: Site scattering and cell partition
            height_field: Precomputed relief field; generated when omitted
        """
        self.config = config or PointcrawlConfig()
        self.tables = tables if tables is not None else default_content_tables()
        self.partition_provider = partition_provider or VoronoiPartitionProvider(
            margin=self.config.partition_margin
        )
        self.height_field = height_field

    def generate(self) -> Pointcrawl:
        """
        Run the full pipeline.

        Raises:
            DescriptorPoolExhausted: fewer descriptors than sites
            EmptyBiomeTable: a biome in use has no locations
            PartitionUnavailable: the partition lacks a site's cell data
        """
        config = self.config
        logger.info("Starting pointcrawl generation", seed=config.seed,
                    site_count=config.site_count, width=config.map_width,
                    height=config.map_height)

        context = GenerationContext(config=config, prng=AleaPRNG(config.seed),
                                    tables=self.tables.model_copy(deep=True))
        content = ContentAssigner(context.prng, context.tables)
        content.check_capacity(config.site_count)

        self.generate_height_field(context)
        self.build_partition(context)
        self.classify_biomes(context)
        self.assign_blocks(context)
        self.build_bridges(context)
        self.assign_content(context, content)

        logger.info("Pointcrawl generation completed", sites=len(context.sites),
                    bridges=len(context.bridges))

        return Pointcrawl(
            config=config,
            sites=context.sites,
            cells=context.cells,
            bridges=context.bridges,
            contents=context.contents,
            descriptors_remaining=len(context.tables.descriptors),
        )

    def generate_height_field(self, context: GenerationContext) -> None:
        if self.height_field is not None:
            context.height_field = self.height_field
            return
        terrain_prng = AleaPRNG([context.config.seed, "terrain"])
        generator = HeightFieldGenerator(context.config.height_field_options(), terrain_prng)
        context.height_field = generator.generate(context.config.map_width, context.config.map_height)

    def build_partition(self, context: GenerationContext) -> None:
        config = context.config
        partition = self.partition_provider.partition(
            PartitionConfig(config.partition_width, config.partition_height, config.site_count),
            context.prng,
        )
        if len(partition) != config.site_count:
            raise PartitionUnavailable(
                f"Partition returned {len(partition)} cells for {config.site_count} sites"
            )
        context.partition = partition

        for i, (x, y) in enumerate(partition.points):
            radius = context.prng.uniform(*SITE_RADIUS_RANGE)
            context.sites.append(Site(id=i, x=float(x), y=float(y), radius=radius))
            context.cells.append(Cell(id=i, polygon=partition.polygon(i),
                                      neighbors=list(partition.neighbors(i)),
                                      border=bool(partition.cell_border_flags[i])))

    def classify_biomes(self, context: GenerationContext) -> None:
        classifier = BiomeClassifier(context.height_field, context.config.biome_options())
        classifier.classify_sites(context.sites)

    def assign_blocks(self, context: GenerationContext) -> None:
        BlockTypeAssigner(context.prng).assign_all(context.cells, context.sites)

    def build_bridges(self, context: GenerationContext) -> None:
        builder = BridgeGraphBuilder(context.prng, context.config.bridge_options())
        context.bridges = builder.build_edges(context.sites, context.partition)

    def assign_content(self, context: GenerationContext, content: ContentAssigner) -> None:
        context.contents = content.assign_all(context.sites)


def generate_pointcrawl(config: Optional[PointcrawlConfig] = None,
                        tables: Optional[ContentTables] = None) -> Pointcrawl:
    """Generate a pointcrawl with the default partition provider."""
    return PointcrawlGenerator(config, tables).generate()
