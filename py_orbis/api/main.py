"""FastAPI main application."""

import logging
from functools import lru_cache
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..config import list_presets, load_preset, settings
from ..core.blender import BiomeBlender
from ..core.errors import ClassificationError
from ..core.legacy_classifier import LegacyClassifier
from ..core.region_resolver import RegionResolver

# Configure logging
logging.basicConfig(
    format="%(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Orbis Biome API",
    description="Hierarchical biome classification and scattered-point blending",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Response models
class ClassificationResponse(BaseModel):
    """Biome of a single coordinate."""

    x: float
    z: float
    preset: str
    biome_id: int
    biome_name: str
    surface_type: str
    region_path: List[str]


class LegacyClassificationResponse(BaseModel):
    """Biome of a single coordinate under the legacy flat classifier."""

    x: float
    z: float
    biome_id: int
    biome_name: str
    color: Tuple[int, int, int]


class WeightEntry(BaseModel):
    """One node of a chunk's weight chain."""

    biome_id: int
    biome_name: str
    weights: List[float] = Field(..., description="Per-cell weights, index zi * chunk_width + xi")


class ChunkWeightsResponse(BaseModel):
    """Blended biome weights of one chunk."""

    chunk_x: int
    chunk_z: int
    chunk_width: int
    seed: int
    preset: str
    entries: List[WeightEntry]


class ChunkColorsResponse(BaseModel):
    """Blended RGB colour per cell of one chunk."""

    chunk_x: int
    chunk_z: int
    chunk_width: int
    colors: List[Tuple[int, int, int]]


class AreaResponse(BaseModel):
    """Dominant biome per cell over a rectangle of chunks."""

    chunk_x: int
    chunk_z: int
    chunks_x: int
    chunks_z: int
    chunk_width: int
    dominant_biomes: List[List[int]] = Field(..., description="Rows of biome ids, z major")


@lru_cache(maxsize=None)
def get_resolver(preset: str) -> RegionResolver:
    """Resolver for a preset; trees are built once and shared read-only."""
    try:
        dimension, registry = load_preset(preset)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0])) from None
    logger.info("Preset loaded", preset=preset, regions=len(registry.regions))
    return RegionResolver(dimension, registry)


@lru_cache(maxsize=1)
def get_blender() -> BiomeBlender:
    return BiomeBlender(settings.point_frequency, settings.min_blend_radius, settings.chunk_width)


@lru_cache(maxsize=1)
def get_legacy_classifier() -> LegacyClassifier:
    return LegacyClassifier()


def _blend_chunk(chunk_x: int, chunk_z: int, seed: Optional[int], preset: str):
    resolver = get_resolver(preset)
    blender = get_blender()
    width = blender.chunk_width
    head = blender.blend_for_chunk(
        settings.world_seed if seed is None else seed,
        chunk_x * width,
        chunk_z * width,
        resolver,
    )
    if head is None:
        raise HTTPException(status_code=500, detail="No scatter points reach the chunk")
    return resolver, head


@app.exception_handler(ClassificationError)
async def classification_error_handler(request: Request, exc: ClassificationError):
    logger.error("Classification failed", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Orbis Biome API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    try:
        resolver = get_resolver(settings.default_preset)
    except (HTTPException, ClassificationError) as e:
        detail = e.detail if isinstance(e, HTTPException) else str(e)
        logger.error("Health check failed", error=detail)
        raise HTTPException(status_code=503, detail="Service unhealthy")

    return {
        "status": "healthy",
        "preset": settings.default_preset,
        "regions": len(resolver.registry.regions),
        "biomes": len(resolver.registry.biomes),
    }


@app.get("/presets", response_model=List[str])
async def get_presets():
    """List available dimension presets."""
    return list_presets()


@app.get("/classify", response_model=ClassificationResponse)
def classify(
    x: float = Query(..., allow_inf_nan=False, description="World x"),
    z: float = Query(..., allow_inf_nan=False, description="World z"),
    preset: Optional[str] = Query(None, description="Dimension preset"),
):
    """Classify a single coordinate with the region tree."""
    preset = preset or settings.default_preset
    resolution = get_resolver(preset).resolve(x, z)
    return ClassificationResponse(
        x=x,
        z=z,
        preset=preset,
        biome_id=resolution.biome.id,
        biome_name=resolution.biome.name,
        surface_type=resolution.surface_type.name.lower(),
        region_path=list(resolution.region_path),
    )


@app.get("/legacy/classify", response_model=LegacyClassificationResponse)
def legacy_classify(
    x: float = Query(..., allow_inf_nan=False),
    z: float = Query(..., allow_inf_nan=False),
):
    """Classify a single coordinate with the legacy flat classifier."""
    biome = get_legacy_classifier().classify_biome(x, z)
    return LegacyClassificationResponse(
        x=x, z=z, biome_id=biome.id, biome_name=biome.name, color=biome.color
    )


@app.get("/chunks/{chunk_x}/{chunk_z}/weights", response_model=ChunkWeightsResponse)
def chunk_weights(
    chunk_x: int,
    chunk_z: int,
    seed: Optional[int] = Query(None, description="World seed (settings default if omitted)"),
    preset: Optional[str] = Query(None),
):
    """Blended biome weights of a chunk, addressed by chunk index."""
    preset = preset or settings.default_preset
    resolver, head = _blend_chunk(chunk_x, chunk_z, seed, preset)
    entries = [
        WeightEntry(
            biome_id=node.biome_id,
            biome_name=resolver.registry.biome_by_id(node.biome_id).name,
            weights=node.weights.tolist(),
        )
        for node in head
    ]
    return ChunkWeightsResponse(
        chunk_x=chunk_x,
        chunk_z=chunk_z,
        chunk_width=get_blender().chunk_width,
        seed=settings.world_seed if seed is None else seed,
        preset=preset,
        entries=entries,
    )


@app.get("/chunks/{chunk_x}/{chunk_z}/colors", response_model=ChunkColorsResponse)
def chunk_colors(
    chunk_x: int,
    chunk_z: int,
    seed: Optional[int] = Query(None),
    preset: Optional[str] = Query(None),
):
    """Per-cell colour as the weighted sum of biome colours."""
    preset = preset or settings.default_preset
    resolver, head = _blend_chunk(chunk_x, chunk_z, seed, preset)
    registry = resolver.registry
    rgb = head.blend(lambda biome_id: registry.biome_by_id(biome_id).color)
    return ChunkColorsResponse(
        chunk_x=chunk_x,
        chunk_z=chunk_z,
        chunk_width=get_blender().chunk_width,
        colors=[tuple(int(channel) for channel in cell) for cell in rgb],
    )


@app.get("/areas/dominant", response_model=AreaResponse)
def area_dominant_biomes(
    chunk_x: int = Query(..., description="Index of the first chunk along x"),
    chunk_z: int = Query(..., description="Index of the first chunk along z"),
    chunks_x: int = Query(1, ge=1),
    chunks_z: int = Query(1, ge=1),
    seed: Optional[int] = Query(None),
    preset: Optional[str] = Query(None),
):
    """Dominant biome per cell over a rectangle of chunks, blended in parallel."""
    if chunks_x * chunks_z > settings.max_area_chunks:
        raise HTTPException(
            status_code=400,
            detail=f"Area exceeds {settings.max_area_chunks} chunks",
        )

    preset = preset or settings.default_preset
    resolver = get_resolver(preset)
    blender = get_blender()
    width = blender.chunk_width
    chains = blender.blend_area(
        settings.world_seed if seed is None else seed,
        chunk_x * width,
        chunk_z * width,
        chunks_x,
        chunks_z,
        resolver,
        max_workers=settings.max_workers,
    )

    rows = [[0] * (chunks_x * width) for _ in range(chunks_z * width)]
    for (origin_x, origin_z), head in chains.items():
        if head is None:
            raise HTTPException(status_code=500, detail="No scatter points reach a chunk")
        dominant = head.dominant_biomes()
        for index, biome_id in enumerate(dominant):
            zi, xi = divmod(index, width)
            rows[origin_z - chunk_z * width + zi][origin_x - chunk_x * width + xi] = int(biome_id)

    return AreaResponse(
        chunk_x=chunk_x,
        chunk_z=chunk_z,
        chunks_x=chunks_x,
        chunks_z=chunks_z,
        chunk_width=width,
        dominant_biomes=rows,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
