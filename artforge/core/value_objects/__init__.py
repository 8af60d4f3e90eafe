"""
Objets valeur du domaine.

Exporte les objets immutables partagés entre les couches.
"""

from artforge.core.value_objects.artwork import (
    ArtworkCandidate,
    ArtworkImages,
    ImageDescriptor,
    RenderedImage,
)

__all__ = [
    "ArtworkCandidate",
    "ArtworkImages",
    "ImageDescriptor",
    "RenderedImage",
]
