"""
Rendu des vignettes 16:9 de films et de séries.

Vignette en 1920x1080, logo incrusté avec ombre portée dans le quart
inférieur, sur la moitié centrale de la largeur.
"""

from typing import Optional

from PIL import Image

from artforge.core.entities.render_requests import ThumbnailRenderRequest
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


class ThumbnailRenderer:
    """Compose une vignette avec son logo."""

    ASPECT_RATIO = 16 / 9
    OUTPUT_WIDTH = 1920
    OUTPUT_HEIGHT = 1080

    BOTTOM_PADDING = 20
    SHADOW = DropShadowOptions(blur_radius=4, opacity=0.75)
    SHADOW_OFFSET = (4, 4)

    def __init__(self, jpeg_quality: int = 90) -> None:
        self._jpeg_quality = jpeg_quality

    async def render(self, thumbnail_bytes: bytes, logo_bytes: bytes) -> bytes:
        """Décode, compose et encode la vignette (JPEG 1920x1080)."""
        thumbnail = await run_blocking(decode_image, thumbnail_bytes)
        logo = await run_blocking(decode_image, logo_bytes)
        composed = await run_blocking(self.compose, thumbnail, logo)
        return await run_blocking(encode_jpeg, composed, self._jpeg_quality)

    def compose(self, thumbnail: Image.Image, logo: Image.Image) -> Image.Image:
        thumbnail = normalise_aspect_ratio(thumbnail, self.ASPECT_RATIO)
        thumbnail = resize(thumbnail, self.OUTPUT_WIDTH, self.OUTPUT_HEIGHT)

        zone = calculate_overlay_safe_zone(
            thumbnail.size,
            zone_height=thumbnail.height // 4,
            bottom_padding=self.BOTTOM_PADDING,
            side_padding=thumbnail.width // 4,
        )
        draw_image_with_drop_shadow(thumbnail, logo, zone, self.SHADOW, self.SHADOW_OFFSET)
        return thumbnail


class ThumbnailRenderService(IRenderService[ThumbnailRenderRequest]):
    """Télécharge la vignette et le logo puis délègue au ThumbnailRenderer."""

    def __init__(
        self,
        image_provider: IImageProvider,
        renderer: ThumbnailRenderer,
        file_reader: ILocalFileReader,
    ) -> None:
        self._image_provider = image_provider
        self._renderer = renderer
        self._file_reader = file_reader

    async def render(self, request: ThumbnailRenderRequest) -> Optional[RenderedImage]:
        if not request.thumbnail_file_path:
            return None

        thumbnail_bytes = await self._image_provider.fetch_image(
            request.thumbnail_file_path, ImageSize.ORIGINAL
        )
        if not thumbnail_bytes:
            return None

        logo_bytes = await load_logo_bytes(
            request.logo_source, self._image_provider, self._file_reader
        )
        if not logo_bytes:
            return None

        jpeg = await self._renderer.render(thumbnail_bytes, logo_bytes)
        return RenderedImage(jpeg, JPEG_MIME_TYPE)
