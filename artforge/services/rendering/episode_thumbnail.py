"""
Rendu des vignettes d'épisodes.

Vignette 16:9 en 1920x1080 avec un dégradé sombre, le libellé "EPISODE n"
et, si disponible, le titre de l'épisode en dessous. Quand le titre est
présent, deux lignes décoratives encadrent le numéro sur la largeur du titre.

Le titre est ignoré s'il est vide ou identique (casse ignorée) au libellé
du numéro : TMDB renvoie souvent "Episode 3" comme titre par défaut.
"""

from typing import Optional

from PIL import Image

from artforge.adapters.fonts import FontFamily
from artforge.core.entities.render_requests import EpisodeThumbnailRenderRequest
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.ports.fonts import IFontProvider
from artforge.core.ports.rendering import IRenderService
from artforge.core.value_objects.artwork import RenderedImage
from artforge.services.rendering.primitives import (
    OverlaySafeZone,
    TextBounds,
    calculate_optimal_font_size,
    calculate_overlay_safe_zone,
    decode_image,
    draw_bottom_gradient_overlay,
    draw_centered_text,
    draw_horizontal_line,
    encode_jpeg,
    normalise_aspect_ratio,
    resize,
    run_blocking,
)
from artforge.utils.constants import JPEG_MIME_TYPE, ImageSize


def has_valid_episode_name(episode_name: Optional[str], episode_number_text: str) -> bool:
    """Vrai si le titre mérite d'être affiché sous le numéro."""
    return bool(
        episode_name
        and episode_name.strip()
        and episode_name.casefold() != episode_number_text.casefold()
    )


class EpisodeThumbnailRenderer:
    """Compose une vignette d'épisode avec numéro et titre."""

    ASPECT_RATIO = 16 / 9
    OUTPUT_WIDTH = 1920
    OUTPUT_HEIGHT = 1080

    GRADIENT_OFFSET = 200
    GRADIENT_MAX_ALPHA = 220
    BOTTOM_PADDING = 75
    SIDE_PADDING_RATIO = 0.1
    NUMBER_MAX_FONT_SIZE_WITH_NAME = 60
    NUMBER_MAX_FONT_SIZE_WITHOUT_NAME = 80
    NAME_MAX_FONT_SIZE = 80
    LINE_THICKNESS = 2
    LINE_PADDING = 15
    LINE_VERTICAL_PADDING = 5

    def __init__(
        self,
        font_provider: IFontProvider,
        font_name: str = "ColusRegular",
        jpeg_quality: int = 90,
    ) -> None:
        self._font_provider = font_provider
        self._font_name = font_name
        self._jpeg_quality = jpeg_quality

    async def render(
        self,
        thumbnail_bytes: bytes,
        episode_number: int,
        episode_name: Optional[str] = None,
    ) -> bytes:
        """Décode, compose et encode la vignette d'épisode (JPEG 1920x1080)."""
        thumbnail = await run_blocking(decode_image, thumbnail_bytes)
        composed = await run_blocking(self.compose, thumbnail, episode_number, episode_name)
        return await run_blocking(encode_jpeg, composed, self._jpeg_quality)

    def compose(
        self,
        thumbnail: Image.Image,
        episode_number: int,
        episode_name: Optional[str] = None,
    ) -> Image.Image:
        thumbnail = normalise_aspect_ratio(thumbnail, self.ASPECT_RATIO)
        thumbnail = resize(thumbnail, self.OUTPUT_WIDTH, self.OUTPUT_HEIGHT)
        self._overlay_text(thumbnail, f"EPISODE {episode_number}", episode_name)
        return thumbnail

    def _overlay_text(
        self, thumbnail: Image.Image, number_text: str, episode_name: Optional[str]
    ) -> None:
        has_name = has_valid_episode_name(episode_name, number_text)
        name_zone = self._name_zone(thumbnail) if has_name else None
        number_zone = self._number_zone(thumbnail, name_zone)

        family = self._font_provider.get_font(self._font_name)

        draw_bottom_gradient_overlay(
            thumbnail, number_zone.top - self.GRADIENT_OFFSET, self.GRADIENT_MAX_ALPHA
        )

        max_size = (
            self.NUMBER_MAX_FONT_SIZE_WITH_NAME
            if has_name
            else self.NUMBER_MAX_FONT_SIZE_WITHOUT_NAME
        )
        number_bounds = self._draw_fitted_text(
            thumbnail, number_text, number_zone, family, max_size
        )

        if name_zone is not None:
            self._draw_name(thumbnail, episode_name, name_zone, family, number_bounds)

    def _name_zone(self, thumbnail: Image.Image) -> OverlaySafeZone:
        return calculate_overlay_safe_zone(
            thumbnail.size,
            zone_height=thumbnail.height // 12,
            bottom_padding=self.BOTTOM_PADDING,
            side_padding=int(thumbnail.width * self.SIDE_PADDING_RATIO),
        )

    def _number_zone(
        self, thumbnail: Image.Image, name_zone: Optional[OverlaySafeZone]
    ) -> OverlaySafeZone:
        if name_zone is not None:
            # Juste au-dessus du titre
            height = thumbnail.height // 15
            return OverlaySafeZone(
                x=name_zone.x, y=name_zone.y - height, width=name_zone.width, height=height
            )
        return calculate_overlay_safe_zone(
            thumbnail.size,
            zone_height=thumbnail.height // 12,
            bottom_padding=self.BOTTOM_PADDING,
            side_padding=int(thumbnail.width * self.SIDE_PADDING_RATIO),
        )

    @staticmethod
    def _draw_fitted_text(
        thumbnail: Image.Image,
        text: str,
        zone: OverlaySafeZone,
        family: FontFamily,
        max_size: float,
    ) -> TextBounds:
        size = calculate_optimal_font_size(family, text, zone, max_size=max_size)
        return draw_centered_text(thumbnail, text, family.create_font(size), zone)

    def _draw_name(
        self,
        thumbnail: Image.Image,
        episode_name: str,
        zone: OverlaySafeZone,
        family: FontFamily,
        number_bounds: TextBounds,
    ) -> None:
        name_bounds = self._draw_fitted_text(
            thumbnail, episode_name, zone, family, self.NAME_MAX_FONT_SIZE
        )

        center_y = number_bounds.vertical_center + self.LINE_VERTICAL_PADDING
        draw_horizontal_line(
            thumbnail,
            name_bounds.left,
            number_bounds.left - self.LINE_PADDING,
            center_y,
            self.LINE_THICKNESS,
        )
        draw_horizontal_line(
            thumbnail,
            number_bounds.right + self.LINE_PADDING,
            name_bounds.right,
            center_y,
            self.LINE_THICKNESS,
        )


class EpisodeThumbnailRenderService(IRenderService[EpisodeThumbnailRenderRequest]):
    """Télécharge l'image de l'épisode puis délègue à l'EpisodeThumbnailRenderer."""

    def __init__(
        self, image_provider: IImageProvider, renderer: EpisodeThumbnailRenderer
    ) -> None:
        self._image_provider = image_provider
        self._renderer = renderer

    async def render(
        self, request: EpisodeThumbnailRenderRequest
    ) -> Optional[RenderedImage]:
        if not request.thumbnail_file_path:
            return None

        thumbnail_bytes = await self._image_provider.fetch_image(
            request.thumbnail_file_path, ImageSize.ORIGINAL
        )
        if not thumbnail_bytes:
            return None

        jpeg = await self._renderer.render(
            thumbnail_bytes, request.episode_number, request.episode_name
        )
        return RenderedImage(jpeg, JPEG_MIME_TYPE)
