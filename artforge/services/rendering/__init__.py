"""
Rendu des illustrations.

Un service de rendu par variante de requete telecharge les images sources,
puis delegue la composition (Pillow) a son renderer.
"""

from artforge.services.rendering.dispatcher import (
    BadRequest,
    NotFound,
    RenderDispatcher,
    RenderOutcome,
    RendererRegistrationError,
)

__all__ = [
    "BadRequest",
    "NotFound",
    "RenderDispatcher",
    "RenderOutcome",
    "RendererRegistrationError",
]
