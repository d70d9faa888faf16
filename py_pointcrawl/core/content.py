"""
Site content assignment.

Three content sources feed the text of each site:
- Locations: per-biome lists, sampled with replacement
- Descriptors: one shared pool, consumed without replacement
- Features: one flat list, sampled twice per site with replacement

Tables can be loaded from CSV files laid out as one header column per
biome for locations and a single column for descriptors and features.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

import structlog
from pydantic import BaseModel, Field, field_validator

from .alea_prng import AleaPRNG
from .exceptions import DescriptorPoolExhausted, EmptyBiomeTable
from .sites import Biome, Site

logger = structlog.get_logger()

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

LOCATIONS_FILE = "locations.csv"
DESCRIPTORS_FILE = "descriptors.csv"
FEATURES_FILE = "features.csv"


def _clean(entries: Iterable[str]) -> List[str]:
    """Strip whitespace and drop blank entries."""
    return [entry.strip() for entry in entries if entry and entry.strip()]


class ContentTables(BaseModel):
    """Parsed content sources."""

    locations: Dict[Biome, List[str]] = Field(
        default_factory=dict, description="Location names per biome"
    )
    descriptors: List[str] = Field(
        default_factory=list, description="Descriptor pool, consumed without replacement"
    )
    features: List[str] = Field(description="Features, sampled with replacement")

    @field_validator("locations")
    @classmethod
    def _clean_locations(cls, value: Dict[Biome, List[str]]) -> Dict[Biome, List[str]]:
        return {biome: _clean(entries) for biome, entries in value.items()}

    @field_validator("descriptors")
    @classmethod
    def _clean_descriptors(cls, value: List[str]) -> List[str]:
        return _clean(value)

    @field_validator("features")
    @classmethod
    def _clean_features(cls, value: List[str]) -> List[str]:
        cleaned = _clean(value)
        if not cleaned:
            raise ValueError("Feature table must contain at least one entry")
        return cleaned


def _read_column(path: Path) -> List[str]:
    with path.open(newline="", encoding="utf-8") as f:
        return [row[0] for row in csv.reader(f) if row]


def load_content_tables(directory: Union[str, Path]) -> ContentTables:
    """
    Load content tables from a directory of CSV files.

    Args:
        directory: Folder holding locations.csv, descriptors.csv and features.csv

    Returns:
        Cleaned ContentTables
    """
    directory = Path(directory)
    logger.info("Loading content tables", directory=str(directory))

    locations: Dict[Biome, List[str]] = {biome: [] for biome in Biome}
    with (directory / LOCATIONS_FILE).open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            for biome in Biome:
                locations[biome].append(row.get(biome.value) or "")

    tables = ContentTables(
        locations=locations,
        descriptors=_read_column(directory / DESCRIPTORS_FILE),
        features=_read_column(directory / FEATURES_FILE),
    )

    logger.info("Content tables loaded",
                locations={biome.value: len(entries) for biome, entries in tables.locations.items()},
                descriptors=len(tables.descriptors), features=len(tables.features))
    return tables


def default_content_tables() -> ContentTables:
    """Tables bundled with the package."""
    return load_content_tables(DEFAULT_DATA_DIR)


@dataclass
class SiteContent:
    """Text payload of one site."""

    site_id: int
    descriptor: str
    location: str
    features: Tuple[str, str]

    @property
    def title(self) -> str:
        return f"{self.site_id + 1}. {self.descriptor} {self.location}"

    @property
    def features_line(self) -> str:
        return " & ".join(self.features)


class ContentAssigner:
    """Fills sites with text drawn from the content tables.

    The assigner owns ``tables.descriptors``: every assignment removes the
    drawn descriptor from it.
    """

    def __init__(self, prng: AleaPRNG, tables: ContentTables):
        self.prng = prng
        self.tables = tables

    @property
    def descriptors_remaining(self) -> int:
        return len(self.tables.descriptors)

    def check_capacity(self, site_count: int) -> None:
        """Fail before any draw if the descriptor pool is too small."""
        if site_count > len(self.tables.descriptors):
            raise DescriptorPoolExhausted(site_count, len(self.tables.descriptors))

    def check_biomes(self, biomes: Iterable[Biome]) -> None:
        """Fail before any draw if a biome in use has no locations."""
        for biome in sorted(set(biomes), key=lambda b: b.value):
            if not self.tables.locations.get(biome):
                raise EmptyBiomeTable(biome.value)

    def pick_location(self, biome: Biome) -> str:
        entries = self.tables.locations.get(biome)
        if not entries:
            raise EmptyBiomeTable(biome.value if biome is not None else None)
        return self.prng.choice(entries)

    def draw_descriptor(self) -> str:
        """Draw a descriptor without removing it from the pool."""
        pool = self.tables.descriptors
        if not pool:
            raise DescriptorPoolExhausted(1, 0)
        return self.prng.choice(pool)

    def take_descriptor(self) -> str:
        """Draw a descriptor and remove its first occurrence from the pool."""
        descriptor = self.draw_descriptor()
        self.tables.descriptors.remove(descriptor)
        return descriptor

    def pick_features(self) -> Tuple[str, str]:
        features = self.tables.features
        return (self.prng.choice(features), self.prng.choice(features))

    def assign(self, site: Site) -> SiteContent:
        """Draw descriptor, location and two features for one site.

        The descriptor leaves the pool only once the whole draw succeeded.
        """
        descriptor = self.draw_descriptor()
        location = self.pick_location(site.biome)
        features = self.pick_features()
        self.tables.descriptors.remove(descriptor)
        return SiteContent(site.id, descriptor, location, features)

    def assign_all(self, sites: List[Site],
                   fail_fast: bool = True) -> Dict[int, SiteContent]:
        """
        Assign content to every site in ascending id order.

        Args:
            sites: Classified sites
            fail_fast: Check pool size and biome tables before drawing anything

        Returns:
            Mapping of site id to SiteContent
        """
        ordered = sorted(sites, key=lambda s: s.id)
        if fail_fast:
            self.check_capacity(len(ordered))
            self.check_biomes(site.biome for site in ordered)

        contents = {site.id: self.assign(site) for site in ordered}

        logger.info("Site content assigned", sites=len(contents),
                    descriptors_remaining=self.descriptors_remaining)
        return contents
