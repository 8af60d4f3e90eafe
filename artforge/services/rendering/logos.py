"""
Résolution des octets d'un logo selon son origine.
"""

from typing import Optional

from artforge.core.entities.render_requests import LogoSource, LogoSourceKind
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.ports.file_system import ILocalFileReader
from artforge.utils.constants import ImageSize


async def load_logo_bytes(
    logo_source: LogoSource,
    image_provider: IImageProvider,
    file_reader: ILocalFileReader,
) -> Optional[bytes]:
    """
    Lit un logo local ou le télécharge depuis TMDB.

    Returns:
        Les octets du logo, None (ou vides) s'il est introuvable
    """
    if not logo_source.file_path:
        return None
    if logo_source.kind == LogoSourceKind.LOCAL:
        return await file_reader.try_read_all(logo_source.file_path)
    if logo_source.kind == LogoSourceKind.TMDB:
        return await image_provider.fetch_image(logo_source.file_path, ImageSize.ORIGINAL)
    return None
