"""
Rendu des posters de films et de séries.

Poster 2:3 en 1000x1500, logo incrusté avec ombre portée dans le
cinquième inférieur de l'image.
"""

from typing import Optional

from PIL import Image

from artforge.core.entities.render_requests import PosterRenderRequest
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.ports.file_system import ILocalFileReader
from artforge.core.ports.rendering import IRenderService
from artforge.core.value_objects.artwork import RenderedImage
from artforge.services.rendering.logos import load_logo_bytes
from artforge.services.rendering.primitives import (
    DropShadowOptions,
    calculate_overlay_safe_zone,
    decode_image,
    draw_image_with_drop_shadow,
    encode_jpeg,
    normalise_aspect_ratio,
    resize,
    run_blocking,
)
from artforge.utils.constants import JPEG_MIME_TYPE, ImageSize


class PosterRenderer:
    """Compose un poster avec son logo."""

    ASPECT_RATIO = 2 / 3
    OUTPUT_WIDTH = 1000
    OUTPUT_HEIGHT = 1500

    PADDING = 25
    SHADOW = DropShadowOptions(blur_radius=4, opacity=0.75)
    SHADOW_OFFSET = (4, 4)

    def __init__(self, jpeg_quality: int = 90) -> None:
        self._jpeg_quality = jpeg_quality

    async def render(self, poster_bytes: bytes, logo_bytes: bytes) -> bytes:
        """
        Décode, compose et encode le poster.

        Chaque étape s'exécute dans l'executor ; une annulation entre deux
        étapes lève asyncio.CancelledError sans produire d'octets.

        Returns:
            Le poster JPEG en 1000x1500
        """
        poster = await run_blocking(decode_image, poster_bytes)
        logo = await run_blocking(decode_image, logo_bytes)
        composed = await run_blocking(self.compose, poster, logo)
        return await run_blocking(encode_jpeg, composed, self._jpeg_quality)

    def compose(self, poster: Image.Image, logo: Image.Image) -> Image.Image:
        poster = normalise_aspect_ratio(poster, self.ASPECT_RATIO)
        poster = resize(poster, self.OUTPUT_WIDTH, self.OUTPUT_HEIGHT)

        zone = calculate_overlay_safe_zone(
            poster.size,
            zone_height=poster.height // 5,
            bottom_padding=self.PADDING,
            side_padding=self.PADDING,
        )
        draw_image_with_drop_shadow(poster, logo, zone, self.SHADOW, self.SHADOW_OFFSET)
        return poster


class PosterRenderService(IRenderService[PosterRenderRequest]):
    """Télécharge le poster et le logo puis délègue au PosterRenderer."""

    def __init__(
        self,
        image_provider: IImageProvider,
        renderer: PosterRenderer,
        file_reader: ILocalFileReader,
    ) -> None:
        self._image_provider = image_provider
        self._renderer = renderer
        self._file_reader = file_reader

    async def render(self, request: PosterRenderRequest) -> Optional[RenderedImage]:
        if not request.poster_file_path:
            return None

        poster_bytes = await self._image_provider.fetch_image(
            request.poster_file_path, ImageSize.ORIGINAL
        )
        if not poster_bytes:
            return None

        logo_bytes = await load_logo_bytes(
            request.logo_source, self._image_provider, self._file_reader
        )
        if not logo_bytes:
            return None

        jpeg = await self._renderer.render(poster_bytes, logo_bytes)
        return RenderedImage(jpeg, JPEG_MIME_TYPE)
