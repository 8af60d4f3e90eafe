"""
Primitives de composition d'images (Pillow).

Transformations déterministes sur des images RGBA en mémoire, combinées
différemment par chaque renderer :

- normalisation du ratio (recadrage centré, sans déformation)
- redimensionnement à une résolution fixe
- calcul de la zone de sécurité en bas de l'image
- incrustation d'une image avec ombre portée (l'ombre toujours sous l'image)
- dégradé sombre en bas de l'image
- texte centré dans un rectangle

Les primitives qui modifient l'image travaillent en place, comme Image.paste ;
celles qui changent les dimensions retournent une nouvelle image.
"""

import asyncio
import io
from dataclasses import dataclass
from typing import Callable, TypeVar

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from artforge.adapters.fonts import FontFamily

T = TypeVar("T")

# Tolérance sous laquelle un ratio est considéré déjà correct
ASPECT_RATIO_TOLERANCE = 0.01

WHITE = (255, 255, 255, 255)


@dataclass(frozen=True)
class OverlaySafeZone:
    """Rectangle réservé au contenu superposé (logo ou texte)."""

    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class DropShadowOptions:
    """Paramètres de l'ombre portée : rayon du flou et opacité (0 à 1)."""

    blur_radius: int = 8
    opacity: float = 0.8


@dataclass(frozen=True)
class TextBounds:
    """Boîte englobante d'un texte dessiné."""

    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def vertical_center(self) -> int:
        return self.y + self.height // 2


async def run_blocking(func: Callable[..., T], *args) -> T:
    """
    Exécute une étape de rendu bloquante dans l'executor par défaut.

    L'attente est un point d'annulation : une tâche annulée lève
    asyncio.CancelledError et n'utilise jamais le résultat de l'étape.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


def decode_image(data: bytes) -> Image.Image:
    """
    Décode des octets d'image (JPEG, PNG, WebP...) en image RGBA.

    Raises:
        PIL.UnidentifiedImageError: si le format n'est pas reconnu
    """
    with Image.open(io.BytesIO(data)) as source:
        source.load()
        return source.convert("RGBA")


def encode_jpeg(image: Image.Image, quality: int = 90) -> bytes:
    """Encode une image en JPEG (la transparence est aplatie)."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def normalise_aspect_ratio(image: Image.Image, aspect_ratio: float) -> Image.Image:
    """
    Recadre l'image au ratio cible, centré sur le côté le plus long.

    Idempotent : une image déjà au ratio (à 0.01 près) est retournée telle quelle.

    Args:
        image: Image source
        aspect_ratio: Ratio largeur/hauteur cible (ex: 2/3, 16/9)

    Returns:
        L'image recadrée (ou l'image d'origine)
    """
    current = image.width / image.height
    if abs(current - aspect_ratio) < ASPECT_RATIO_TOLERANCE:
        return image

    if current > aspect_ratio:
        # Trop large
        target_height = image.height
        target_width = int(target_height * aspect_ratio)
    else:
        # Trop haute
        target_width = image.width
        target_height = int(target_width / aspect_ratio)

    left = (image.width - target_width) // 2
    top = (image.height - target_height) // 2
    return image.crop((left, top, left + target_width, top + target_height))


def resize(image: Image.Image, width: int, height: int) -> Image.Image:
    """Redimensionne exactement à width x height (Lanczos)."""
    if image.size == (width, height):
        return image
    return image.resize((width, height), Image.Resampling.LANCZOS)


def calculate_overlay_safe_zone(
    size: tuple[int, int],
    zone_height: float,
    bottom_padding: float,
    side_padding: float,
) -> OverlaySafeZone:
    """
    Calcule la zone de sécurité en bas d'une image.

    Les paddings doivent rester inférieurs à la moitié de la dimension
    correspondante ; les dimensions résultantes ne sont jamais négatives.

    Args:
        size: (largeur, hauteur) de l'image
        zone_height: Hauteur de la zone en pixels
        bottom_padding: Marge basse en pixels
        side_padding: Marge latérale en pixels

    Returns:
        OverlaySafeZone positionnée en bas, centrée horizontalement
    """
    width, height = size
    zone_width = max(0, int(width - 2 * side_padding))
    zone_height = max(0, int(zone_height))
    return OverlaySafeZone(
        x=int(side_padding),
        y=int(height - zone_height - bottom_padding),
        width=zone_width,
        height=zone_height,
    )


def fit_inside_safe_zone(
    overlay: Image.Image,
    zone: OverlaySafeZone,
    max_width_pct: int = 80,
    max_height_pct: int = 80,
) -> Image.Image:
    """
    Met l'image à l'échelle pour tenir dans un pourcentage de la zone, ratio conservé.

    Returns:
        Nouvelle image redimensionnée (au moins 1x1 pixel)
    """
    max_width = zone.width * max_width_pct // 100
    max_height = zone.height * max_height_pct // 100
    scale = min(max_width / overlay.width, max_height / overlay.height)

    target_width = max(1, int(overlay.width * scale))
    target_height = max(1, int(overlay.height * scale))
    return resize(overlay, target_width, target_height)


def generate_drop_shadow(overlay: Image.Image, options: DropShadowOptions) -> Image.Image:
    """
    Construit l'ombre portée d'une image à partir de son canal alpha.

    Le canevas est agrandi de blur_radius² pixels dans chaque dimension pour
    que le flou ne soit pas tronqué sur les bords.

    Returns:
        Image RGBA contenant uniquement l'ombre floutée
    """
    padding = options.blur_radius * options.blur_radius
    canvas = Image.new(
        "RGBA", (overlay.width + padding, overlay.height + padding), (0, 0, 0, 0)
    )

    shadow_alpha = round(255 * options.opacity)
    mask = overlay.getchannel("A").point(lambda a: shadow_alpha if a > 0 else 0)
    silhouette = Image.new("RGBA", overlay.size, (0, 0, 0, 0))
    silhouette.putalpha(mask)
    canvas.paste(silhouette, (padding // 2, padding // 2))

    return canvas.filter(ImageFilter.GaussianBlur(options.blur_radius))


def _centered_position(zone: OverlaySafeZone, width: int, height: int) -> tuple[int, int]:
    return (
        zone.x + (zone.width - width) // 2,
        zone.y + (zone.height - height) // 2,
    )


def draw_image_with_drop_shadow(
    canvas: Image.Image,
    overlay: Image.Image,
    zone: OverlaySafeZone,
    shadow: DropShadowOptions,
    shadow_offset: tuple[int, int] = (4, 4),
    max_width_pct: int = 80,
    max_height_pct: int = 80,
) -> None:
    """
    Incruste une image et son ombre portée, centrées dans la zone.

    L'ombre est composée en premier, l'image par-dessus.

    Args:
        canvas: Image de destination (modifiée en place)
        overlay: Image à incruster (logo)
        zone: Zone de sécurité
        shadow: Paramètres de l'ombre
        shadow_offset: Décalage (x, y) de l'ombre en pixels
    """
    fitted = fit_inside_safe_zone(overlay, zone, max_width_pct, max_height_pct)
    drop_shadow = generate_drop_shadow(fitted, shadow)

    shadow_x, shadow_y = _centered_position(zone, drop_shadow.width, drop_shadow.height)
    _composite_at(canvas, drop_shadow, (shadow_x + shadow_offset[0], shadow_y + shadow_offset[1]))
    _composite_at(canvas, fitted, _centered_position(zone, fitted.width, fitted.height))


def _composite_at(canvas: Image.Image, layer: Image.Image, position: tuple[int, int]) -> None:
    # alpha_composite refuse les positions négatives : on passe par un calque plein format
    full = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    full.paste(layer, position)
    canvas.alpha_composite(full)


def draw_bottom_gradient_overlay(image: Image.Image, start_y: int, max_alpha: int) -> None:
    """
    Assombrit le bas de l'image : transparent à start_y, max_alpha au bord inférieur.

    Args:
        image: Image RGBA (modifiée en place)
        start_y: Ordonnée de début du dégradé
        max_alpha: Alpha maximal (0-255)
    """
    start_y = max(0, start_y)
    gradient_height = image.height - start_y
    if gradient_height <= 0:
        return

    alpha = Image.linear_gradient("L").resize((image.width, gradient_height))
    alpha = alpha.point(lambda value: value * max_alpha // 255)
    gradient = Image.new("RGBA", (image.width, gradient_height), (0, 0, 0, 0))
    gradient.putalpha(alpha)
    _composite_at(image, gradient, (0, start_y))


def measure_text(text: str, font: ImageFont.FreeTypeFont) -> tuple[int, int]:
    """Largeur et hauteur de l'encre du texte."""
    left, top, right, bottom = font.getbbox(text)
    return right - left, bottom - top


def draw_centered_text(
    image: Image.Image,
    text: str,
    font: ImageFont.FreeTypeFont,
    zone: OverlaySafeZone,
    fill: tuple[int, int, int, int] = WHITE,
) -> TextBounds:
    """
    Dessine un texte centré horizontalement et verticalement dans la zone.

    Returns:
        La boîte englobante du texte dessiné
    """
    draw = ImageDraw.Draw(image)
    center_x, center_y = zone.center
    draw.text((center_x, center_y), text, font=font, fill=fill, anchor="mm")

    left, top, right, bottom = draw.textbbox((center_x, center_y), text, font=font, anchor="mm")
    return TextBounds(x=int(left), y=int(top), width=int(right - left), height=int(bottom - top))


def calculate_optimal_font_size(
    family: FontFamily,
    text: str,
    zone: OverlaySafeZone,
    min_size: float = 20,
    max_size: float = 120,
    step: float = 2,
) -> float:
    """
    Plus grande taille de police (de max_size à min_size) pour laquelle
    le texte tient dans la zone avec 20 px de marge.
    """
    size = max_size
    while size >= min_size:
        width, height = measure_text(text, family.create_font(size))
        if width < zone.width - 20 and height < zone.height - 20:
            return size
        size -= step
    return min_size


def draw_horizontal_line(
    image: Image.Image,
    start_x: int,
    end_x: int,
    center_y: int,
    thickness: int,
    fill: tuple[int, int, int, int] = WHITE,
) -> None:
    """Trace une ligne horizontale pleine ; rien si end_x <= start_x."""
    if end_x <= start_x:
        return
    top = center_y - thickness // 2
    ImageDraw.Draw(image).rectangle(
        (start_x, top, end_x - 1, top + thickness - 1), fill=fill
    )
