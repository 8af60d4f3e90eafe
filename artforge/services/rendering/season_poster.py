"""
Rendu des posters de saison.

Poster 2:3 en 1000x1500 : dégradé sombre sur le cinquième inférieur
puis libellé "SEASON n" en blanc, centré dans la zone de sécurité.
"""

from typing import Optional

from PIL import Image

from artforge.core.entities.render_requests import SeasonPosterRenderRequest
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.ports.fonts import IFontProvider
from artforge.core.ports.rendering import IRenderService
from artforge.core.value_objects.artwork import RenderedImage
from artforge.services.rendering.primitives import (
    calculate_overlay_safe_zone,
    decode_image,
    draw_bottom_gradient_overlay,
    draw_centered_text,
    encode_jpeg,
    normalise_aspect_ratio,
    resize,
    run_blocking,
)
from artforge.utils.constants import JPEG_MIME_TYPE, ImageSize


class SeasonPosterRenderer:
    """Compose un poster de saison avec son numéro."""

    ASPECT_RATIO = 2 / 3
    OUTPUT_WIDTH = 1000
    OUTPUT_HEIGHT = 1500

    PADDING = 25
    FONT_SIZE = 120
    GRADIENT_MAX_ALPHA = 180

    def __init__(
        self,
        font_provider: IFontProvider,
        font_name: str = "ColusRegular",
        jpeg_quality: int = 90,
    ) -> None:
        self._font_provider = font_provider
        self._font_name = font_name
        self._jpeg_quality = jpeg_quality

    async def render(self, poster_bytes: bytes, season_number: int) -> bytes:
        """Décode, compose et encode le poster de saison (JPEG 1000x1500)."""
        poster = await run_blocking(decode_image, poster_bytes)
        composed = await run_blocking(self.compose, poster, season_number)
        return await run_blocking(encode_jpeg, composed, self._jpeg_quality)

    def compose(self, poster: Image.Image, season_number: int) -> Image.Image:
        poster = normalise_aspect_ratio(poster, self.ASPECT_RATIO)
        poster = resize(poster, self.OUTPUT_WIDTH, self.OUTPUT_HEIGHT)

        zone = calculate_overlay_safe_zone(
            poster.size,
            zone_height=poster.height // 5,
            bottom_padding=self.PADDING,
            side_padding=self.PADDING,
        )
        font = self._font_provider.get_font(self._font_name).create_font(self.FONT_SIZE)

        draw_bottom_gradient_overlay(poster, zone.top, self.GRADIENT_MAX_ALPHA)
        draw_centered_text(poster, f"SEASON {season_number}", font, zone)
        return poster


class SeasonPosterRenderService(IRenderService[SeasonPosterRenderRequest]):
    """Télécharge le poster de saison puis délègue au SeasonPosterRenderer."""

    def __init__(self, image_provider: IImageProvider, renderer: SeasonPosterRenderer) -> None:
        self._image_provider = image_provider
        self._renderer = renderer

    async def render(self, request: SeasonPosterRenderRequest) -> Optional[RenderedImage]:
        if not request.season_poster_file_path:
            return None

        poster_bytes = await self._image_provider.fetch_image(
            request.season_poster_file_path, ImageSize.ORIGINAL
        )
        if not poster_bytes:
            return None

        jpeg = await self._renderer.render(poster_bytes, request.season_number)
        return RenderedImage(jpeg, JPEG_MIME_TYPE)
