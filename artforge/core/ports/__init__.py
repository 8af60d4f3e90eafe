"""
Ports (interfaces) des collaborateurs externes.

Les adaptateurs de artforge/adapters/ fournissent les implémentations concrètes.
"""

from artforge.core.ports.api_clients import IImageProvider
from artforge.core.ports.file_system import ILocalFileReader
from artforge.core.ports.fonts import FontNotLoadedError, IFontProvider
from artforge.core.ports.rendering import IRenderService

__all__ = [
    "FontNotLoadedError",
    "IFontProvider",
    "IImageProvider",
    "ILocalFileReader",
    "IRenderService",
]
