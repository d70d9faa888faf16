"""
Core pointcrawl generation functionality.
"""

from .alea_prng import AleaPRNG
from .sites import Biome, BlockType, Cell, Site
from .height_field import HeightField, HeightFieldGenerator, HeightFieldOptions, band_value
from .planar_partition import PartitionConfig, PlanarPartition, VoronoiPartitionProvider, generate_partition
from .biomes import BiomeClassifier, BiomeOptions
from .blocks import BlockTypeAssigner
from .bridges import Bridge, BridgeGraphBuilder, BridgeOptions
from .content import ContentAssigner, ContentTables, SiteContent, default_content_tables, load_content_tables
from .exceptions import (
    ClassificationOutOfRange,
    DescriptorPoolExhausted,
    EmptyBiomeTable,
    PartitionUnavailable,
    PointcrawlError,
)
from .pipeline import Pointcrawl, PointcrawlConfig, PointcrawlGenerator, generate_pointcrawl

__all__ = ['AleaPRNG', 'Biome', 'BlockType', 'Cell', 'Site',
           'HeightField', 'HeightFieldGenerator', 'HeightFieldOptions', 'band_value',
           'PartitionConfig', 'PlanarPartition', 'VoronoiPartitionProvider', 'generate_partition',
           'BiomeClassifier', 'BiomeOptions', 'BlockTypeAssigner',
           'Bridge', 'BridgeGraphBuilder', 'BridgeOptions',
           'ContentAssigner', 'ContentTables', 'SiteContent', 'default_content_tables',
           'load_content_tables',
           'ClassificationOutOfRange', 'DescriptorPoolExhausted', 'EmptyBiomeTable',
           'PartitionUnavailable', 'PointcrawlError',
           'Pointcrawl', 'PointcrawlConfig', 'PointcrawlGenerator', 'generate_pointcrawl']
