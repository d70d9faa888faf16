"""FastAPI main application."""

import logging
import uuid
from typing import List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.content import ContentTables, default_content_tables, load_content_tables
from ..core.exceptions import PointcrawlError
from ..core.pipeline import PointcrawlConfig, PointcrawlGenerator
from ..core.sites import Biome


def configure_logging(level: str = settings.log_level, fmt: str = settings.log_format) -> None:
    """Route structlog through stdlib logging with the configured renderer."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    renderer = (structlog.processors.JSONRenderer() if fmt == "json"
                else structlog.dev.ConsoleRenderer())
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Fantasy Pointcrawl Generator API",
    description="Procedural pointcrawl maps: sites, biomes, bridges and site text",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class PointcrawlRequest(BaseModel):
    """Request to generate a pointcrawl."""

    seed: Optional[str] = Field(None, description="Random seed for reproducible generation")
    site_count: Optional[int] = Field(None, ge=1, description="Number of sites")
    width: Optional[int] = Field(None, ge=200, description="Map width in pixels")
    height: Optional[int] = Field(None, ge=200, description="Map height in pixels")


class SiteResponse(BaseModel):
    """One labelled site."""

    id: int
    label: int
    position: List[float]
    radius: float
    biome: str
    biome_score: Optional[float]
    block_type: str
    polygon: List[List[float]]
    neighbors: List[int]
    border: bool
    descriptor: str
    location: str
    features: List[str]
    title: str


class BridgeResponse(BaseModel):
    """Route between two sites."""

    source: int
    target: int
    start: List[float]
    end: List[float]


class PointcrawlResponse(BaseModel):
    """A generated pointcrawl."""

    seed: str
    width: int
    height: int
    origin: List[float]
    sites: List[SiteResponse]
    bridges: List[BridgeResponse]


class BiomeInfo(BaseModel):
    """A biome and its configured location names."""

    name: str
    locations: List[str]


def load_tables() -> ContentTables:
    """Fresh content tables for one request; generation consumes descriptors."""
    if settings.content_dir:
        return load_content_tables(settings.content_dir)
    return default_content_tables()


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Fantasy Pointcrawl Generator API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        load_tables()
    except (OSError, ValueError) as e:
        logger.error("Health check failed", error=str(e))
        raise HTTPException(status_code=503, detail="Content tables unavailable")
    return {"status": "healthy", "content": "loaded"}


@app.get("/biomes", response_model=List[BiomeInfo])
async def list_biomes():
    """List biomes with their location names."""
    tables = load_tables()
    return [
        BiomeInfo(name=biome.value, locations=tables.locations.get(biome, []))
        for biome in Biome
    ]


@app.post("/pointcrawls/generate", response_model=PointcrawlResponse)
def generate_pointcrawl(request: PointcrawlRequest):
    """
    Generate a pointcrawl synchronously.

    Pipeline failures (e.g. too few descriptors for the site count) are
    reported as 422 with the error kind.
    """
    logger.info("Pointcrawl generation requested", request=request.model_dump())

    width = request.width or settings.default_map_width
    height = request.height or settings.default_map_height
    site_count = request.site_count or settings.default_site_count

    if width > settings.max_map_width or height > settings.max_map_height:
        raise HTTPException(status_code=400, detail="Map size exceeds configured maximum")
    if site_count > settings.max_site_count:
        raise HTTPException(status_code=400, detail="Site count exceeds configured maximum")

    config = PointcrawlConfig(
        seed=request.seed or str(uuid.uuid4())[:8],
        site_count=site_count,
        map_width=width,
        map_height=height,
    )

    try:
        pointcrawl = PointcrawlGenerator(config, load_tables()).generate()
    except PointcrawlError as e:
        logger.error("Pointcrawl generation failed", seed=config.seed, error=str(e))
        raise HTTPException(
            status_code=422,
            detail={"error": type(e).__name__, "message": str(e)},
        )

    return PointcrawlResponse(**pointcrawl.to_dict())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
