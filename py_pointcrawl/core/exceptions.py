"""Errors raised by the pointcrawl generation pipeline."""


class PointcrawlError(Exception):
    """Base class for generation failures."""


class ClassificationOutOfRange(PointcrawlError):
    """A biome score fell outside every classification band."""

    def __init__(self, site_id: int, score: float):
        self.site_id = site_id
        self.score = score
        super().__init__(f"Site {site_id} scored {score}, outside all biome bands")


class EmptyBiomeTable(PointcrawlError):
    """A biome has no location strings to draw from."""

    def __init__(self, biome):
        self.biome = biome
        super().__init__(f"No location entries configured for biome '{biome}'")


class DescriptorPoolExhausted(PointcrawlError):
    """Fewer descriptors are available than sites need labelling."""

    def __init__(self, needed: int, available: int):
        self.needed = needed
        self.available = available
        super().__init__(
            f"Descriptor pool exhausted: {needed} needed, {available} available"
        )


class PartitionUnavailable(PointcrawlError):
    """The planar partition could not supply adjacency or a polygon."""

    def __init__(self, message: str, cell_id=None):
        self.cell_id = cell_id
        super().__init__(message)
