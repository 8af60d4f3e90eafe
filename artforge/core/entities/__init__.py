"""
Entités du domaine : requêtes de rendu.
"""

from artforge.core.entities.render_requests import (
    RENDER_REQUEST_TYPES,
    EpisodeThumbnailRenderRequest,
    LogoSource,
    LogoSourceKind,
    MediaKind,
    PosterRenderRequest,
    RenderRequest,
    SeasonPosterRenderRequest,
    ThumbnailRenderRequest,
)

__all__ = [
    "RENDER_REQUEST_TYPES",
    "EpisodeThumbnailRenderRequest",
    "LogoSource",
    "LogoSourceKind",
    "MediaKind",
    "PosterRenderRequest",
    "RenderRequest",
    "SeasonPosterRenderRequest",
    "ThumbnailRenderRequest",
]
