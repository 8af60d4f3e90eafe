"""
Génération des illustrations candidates d'un média.

Pour un média identifié par son ID TMDB, liste les images sources disponibles,
sélectionne les meilleures et construit pour chacune l'URL de rendu signée
(jeton) correspondante. Les logos sont proposés sous forme d'URL TMDB directe.

Règles de sélection :
- posters, vignettes, posters de saison, images d'épisode : images sans langue
  (sans texte incrusté), triées par surface décroissante, 10 au maximum
- logos : langue demandée uniquement, SVG exclus, paysage d'abord,
  puis ratio le plus large, puis largeur la plus grande
"""

from enum import Enum
from typing import Iterable, Optional

from loguru import logger

from artforge.core.entities.render_requests import (
    EpisodeThumbnailRenderRequest,
    LogoSource,
    LogoSourceKind,
    MediaKind,
    PosterRenderRequest,
    SeasonPosterRenderRequest,
    ThumbnailRenderRequest,
)
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.value_objects.artwork import ArtworkCandidate, ImageDescriptor
from artforge.services.codec import RenderUrlBuilder
from artforge.utils.constants import (
    EPISODE_DEFAULT_PRESET,
    POSTER_DEFAULT_PRESET,
    SEASON_DEFAULT_PRESET,
    THUMBNAIL_DEFAULT_PRESET,
    TMDB_IMAGE_BASE_URL,
    ImageSize,
)

MAX_CANDIDATES = 10


class ArtworkType(str, Enum):
    """Type d'illustration demandée."""

    POSTER = "poster"
    THUMBNAIL = "thumbnail"
    LOGO = "logo"


def _has_language(image: ImageDescriptor) -> bool:
    return bool(image.language and image.language.strip())


def select_neutral_images(
    images: Iterable[ImageDescriptor], max_count: int = MAX_CANDIDATES
) -> list[ImageDescriptor]:
    """
    Sélectionne les images sans langue, de la plus grande à la plus petite.

    Args:
        images: Images candidates
        max_count: Nombre maximum d'images retournées

    Returns:
        Les images retenues, triées par surface décroissante
    """
    neutral = [image for image in images if not _has_language(image)]
    neutral.sort(key=lambda image: image.width * image.height, reverse=True)
    return neutral[:max_count]


def select_logos(
    logos: Iterable[ImageDescriptor],
    language: Optional[str] = None,
    max_count: int = MAX_CANDIDATES,
) -> list[ImageDescriptor]:
    """
    Sélectionne les logos dans la langue demandée.

    Les SVG sont exclus. Tri : logos en paysage d'abord, puis ratio
    largeur/hauteur décroissant, puis largeur décroissante.

    Args:
        logos: Logos candidats
        language: Code ISO 639-1 (casse ignorée), None pour les logos sans langue
        max_count: Nombre maximum de logos retournés
    """
    wanted = language.lower() if language else None
    matching = [
        logo
        for logo in logos
        if not logo.file_path.lower().endswith(".svg")
        and (logo.language.lower() if logo.language else None) == wanted
    ]
    matching.sort(
        key=lambda logo: (
            logo.width > logo.height,
            logo.width / max(1, logo.height),
            logo.width,
        ),
        reverse=True,
    )
    return matching[:max_count]


class ArtworkCandidateService:
    """
    Construit les illustrations candidates prêtes à l'emploi.

    Example:
        service = ArtworkCandidateService(tmdb_client, url_builder)
        candidates = await service.get_candidates(27205, MediaKind.MOVIE, ArtworkType.POSTER)
    """

    def __init__(self, image_provider: IImageProvider, url_builder: RenderUrlBuilder) -> None:
        self._image_provider = image_provider
        self._url_builder = url_builder

    async def get_candidates(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        artwork_type: ArtworkType = ArtworkType.POSTER,
        season_number: Optional[int] = None,
        episode_number: Optional[int] = None,
        episode_name: Optional[str] = None,
        language: Optional[str] = None,
        local_logo_path: Optional[str] = None,
    ) -> list[ArtworkCandidate]:
        """
        Retourne les candidats pour une combinaison média / type d'illustration.

        Combinaisons prises en charge :
        - film ou série : poster, vignette, logo
        - saison : poster (numéro de saison requis)
        - épisode : poster, soit la vignette d'épisode (saison et épisode requis)

        Une combinaison non prise en charge donne une liste vide.
        """
        if media_kind in (MediaKind.MOVIE, MediaKind.TV_SHOW):
            if artwork_type == ArtworkType.POSTER:
                return await self.get_poster_candidates(
                    tmdb_id, media_kind, language, local_logo_path
                )
            if artwork_type == ArtworkType.THUMBNAIL:
                return await self.get_thumbnail_candidates(
                    tmdb_id, media_kind, language, local_logo_path
                )
            if artwork_type == ArtworkType.LOGO:
                return await self.get_logo_candidates(tmdb_id, media_kind, language)

        if media_kind == MediaKind.TV_SEASON and artwork_type == ArtworkType.POSTER:
            if season_number is None:
                return []
            return await self.get_season_poster_candidates(tmdb_id, season_number)

        if media_kind == MediaKind.TV_EPISODE and artwork_type == ArtworkType.POSTER:
            if season_number is None or episode_number is None:
                return []
            return await self.get_episode_thumbnail_candidates(
                tmdb_id, season_number, episode_number, episode_name
            )

        logger.warning(
            f"Aucun generateur de candidats pour {media_kind.value}/{artwork_type.value} "
            f"(ID TMDB {tmdb_id})"
        )
        return []

    async def get_poster_candidates(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        language: Optional[str] = None,
        local_logo_path: Optional[str] = None,
    ) -> list[ArtworkCandidate]:
        """Posters d'un film ou d'une série, avec le logo incrusté."""
        images = await self._image_provider.fetch_candidates(tmdb_id, media_kind)
        selected = select_neutral_images(images.posters)

        logo = await self._resolve_logo(tmdb_id, media_kind, language, local_logo_path)
        if logo is None:
            return []

        candidates = []
        for poster in selected:
            request = PosterRenderRequest(
                media_kind=media_kind,
                tmdb_id=tmdb_id,
                poster_file_path=poster.file_path,
                logo_source=logo,
                preset=POSTER_DEFAULT_PRESET,
            )
            candidates.append(
                self._candidate(
                    f"{tmdb_id}:{media_kind.value}:poster:{poster.file_path}:{POSTER_DEFAULT_PRESET}",
                    self._url_builder.build_url(request),
                    poster,
                )
            )
        return candidates

    async def get_thumbnail_candidates(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        language: Optional[str] = None,
        local_logo_path: Optional[str] = None,
    ) -> list[ArtworkCandidate]:
        """Vignettes 16:9 d'un film ou d'une série (depuis les backdrops), avec le logo."""
        images = await self._image_provider.fetch_candidates(tmdb_id, media_kind)
        selected = select_neutral_images(images.backdrops)

        logo = await self._resolve_logo(tmdb_id, media_kind, language, local_logo_path)
        if logo is None:
            return []

        candidates = []
        for backdrop in selected:
            request = ThumbnailRenderRequest(
                media_kind=media_kind,
                tmdb_id=tmdb_id,
                thumbnail_file_path=backdrop.file_path,
                logo_source=logo,
                preset=THUMBNAIL_DEFAULT_PRESET,
            )
            candidates.append(
                self._candidate(
                    f"{tmdb_id}:{media_kind.value}:thumbnail:{backdrop.file_path}"
                    f":{THUMBNAIL_DEFAULT_PRESET}",
                    self._url_builder.build_url(request),
                    backdrop,
                )
            )
        return candidates

    async def get_season_poster_candidates(
        self, tmdb_id: int, season_number: int
    ) -> list[ArtworkCandidate]:
        """
        Posters d'une saison.

        Sans poster de saison exploitable, les posters de la série servent de
        repli ; leurs identifiants portent alors le suffixe ":parent".
        """
        images = await self._image_provider.fetch_candidates(
            tmdb_id, MediaKind.TV_SEASON, season_number=season_number
        )
        selected = select_neutral_images(images.posters)
        suffix = ""

        if not selected:
            show_images = await self._image_provider.fetch_candidates(tmdb_id, MediaKind.TV_SHOW)
            selected = select_neutral_images(show_images.posters)
            suffix = ":parent"

        candidates = []
        for poster in selected:
            request = SeasonPosterRenderRequest(
                tmdb_id=tmdb_id,
                season_number=season_number,
                season_poster_file_path=poster.file_path,
                preset=SEASON_DEFAULT_PRESET,
            )
            candidates.append(
                self._candidate(
                    f"{tmdb_id}:season:poster:{season_number}:{poster.file_path}"
                    f":{SEASON_DEFAULT_PRESET}{suffix}",
                    self._url_builder.build_url(request),
                    poster,
                )
            )
        return candidates

    async def get_episode_thumbnail_candidates(
        self,
        tmdb_id: int,
        season_number: int,
        episode_number: int,
        episode_name: Optional[str] = None,
    ) -> list[ArtworkCandidate]:
        """Vignettes d'un épisode (depuis les stills TMDB)."""
        images = await self._image_provider.fetch_candidates(
            tmdb_id,
            MediaKind.TV_EPISODE,
            season_number=season_number,
            episode_number=episode_number,
        )
        selected = select_neutral_images(images.backdrops)

        candidates = []
        for still in selected:
            request = EpisodeThumbnailRenderRequest(
                tmdb_id=tmdb_id,
                thumbnail_file_path=still.file_path,
                episode_number=episode_number,
                episode_name=episode_name,
                preset=EPISODE_DEFAULT_PRESET,
            )
            candidates.append(
                self._candidate(
                    f"{tmdb_id}:episode:{season_number}:{episode_number}"
                    f":{still.file_path}:{EPISODE_DEFAULT_PRESET}",
                    self._url_builder.build_url(request),
                    still,
                )
            )
        return candidates

    async def get_logo_candidates(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        language: Optional[str] = None,
    ) -> list[ArtworkCandidate]:
        """Logos TMDB dans la langue demandée, en URL directe (taille originale)."""
        images = await self._image_provider.fetch_candidates(tmdb_id, media_kind)
        return [
            self._candidate(
                f"{tmdb_id}:{media_kind.value}:logo:{logo.file_path}",
                f"{TMDB_IMAGE_BASE_URL}/{ImageSize.ORIGINAL}{logo.file_path}",
                logo,
            )
            for logo in select_logos(images.logos, language)
        ]

    async def _resolve_logo(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        language: Optional[str],
        local_logo_path: Optional[str],
    ) -> Optional[LogoSource]:
        # Un logo local prime sur les logos TMDB
        if local_logo_path:
            return LogoSource(kind=LogoSourceKind.LOCAL, file_path=local_logo_path)

        images = await self._image_provider.fetch_candidates(tmdb_id, media_kind)
        logos = select_logos(images.logos, language)
        if not logos:
            logger.debug(f"Aucun logo disponible pour {media_kind.value} {tmdb_id}")
            return None

        best = logos[0]
        return LogoSource(
            kind=LogoSourceKind.TMDB,
            file_path=best.file_path,
            width=best.width,
            height=best.height,
            language=best.language,
        )

    @staticmethod
    def _candidate(candidate_id: str, url: str, image: ImageDescriptor) -> ArtworkCandidate:
        return ArtworkCandidate(
            id=candidate_id,
            url=url,
            width=image.width,
            height=image.height,
            language=image.language,
        )
