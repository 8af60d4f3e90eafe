"""
Requêtes de rendu.

Union fermée de variantes étiquetées : chaque variante porte un champ `type`
qui sert de discriminant lors de la sérialisation dans un jeton. Le codec ne peut
reconstruire qu'une variante déclarée ici ; toute étiquette inconnue est rejetée.

Variantes :
- PosterRenderRequest ("poster") : poster film/série + logo
- SeasonPosterRenderRequest ("seasonPoster") : poster de saison + libellé "SEASON n"
- ThumbnailRenderRequest ("thumbnail") : vignette 16:9 film/série + logo
- EpisodeThumbnailRenderRequest ("episodeThumbnail") : vignette d'épisode + numéro/titre
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field


class MediaKind(str, Enum):
    """Type de média côté fournisseur.

    Valeurs:
        MOVIE: Film
        TV_SHOW: Série TV
        TV_SEASON: Saison d'une série
        TV_EPISODE: Épisode d'une série
    """

    MOVIE = "movie"
    TV_SHOW = "tv"
    TV_SEASON = "season"
    TV_EPISODE = "episode"


class LogoSourceKind(str, Enum):
    """Origine d'un logo : fichier local ou image TMDB."""

    LOCAL = "local"
    TMDB = "tmdb"


@dataclass(frozen=True)
class LogoSource:
    """
    Référence vers un logo, étiquetée par son origine.

    Attributs:
        kind: LOCAL (chemin sur le disque) ou TMDB (chemin chez le fournisseur)
        file_path: Chemin du fichier
        width: Largeur connue (0 si inconnue)
        height: Hauteur connue (0 si inconnue)
        language: Langue du logo
    """

    kind: LogoSourceKind
    file_path: str
    width: int = 0
    height: int = 0
    language: Optional[str] = None


@dataclass(frozen=True)
class PosterRenderRequest:
    """Poster 2:3 d'un film ou d'une série avec le logo incrusté en bas."""

    media_kind: MediaKind
    tmdb_id: int
    poster_file_path: str
    logo_source: LogoSource
    preset: Optional[str] = None
    type: Literal["poster"] = "poster"


@dataclass(frozen=True)
class SeasonPosterRenderRequest:
    """Poster 2:3 d'une saison avec le libellé "SEASON n"."""

    tmdb_id: int
    season_number: int
    season_poster_file_path: str
    preset: Optional[str] = None
    type: Literal["seasonPoster"] = "seasonPoster"


@dataclass(frozen=True)
class ThumbnailRenderRequest:
    """Vignette 16:9 d'un film ou d'une série avec le logo incrusté en bas."""

    media_kind: MediaKind
    tmdb_id: int
    thumbnail_file_path: str
    logo_source: LogoSource
    preset: Optional[str] = None
    type: Literal["thumbnail"] = "thumbnail"


@dataclass(frozen=True)
class EpisodeThumbnailRenderRequest:
    """Vignette 16:9 d'un épisode avec "EPISODE n" et le titre de l'épisode."""

    tmdb_id: int
    thumbnail_file_path: str
    episode_number: int
    episode_name: Optional[str] = None
    preset: Optional[str] = None
    type: Literal["episodeThumbnail"] = "episodeThumbnail"


RenderRequest = Annotated[
    Union[
        PosterRenderRequest,
        SeasonPosterRenderRequest,
        ThumbnailRenderRequest,
        EpisodeThumbnailRenderRequest,
    ],
    Field(discriminator="type"),
]

# Ensemble fermé des variantes, utilisé pour la vérification d'exhaustivité du dispatcher
RENDER_REQUEST_TYPES: tuple[type, ...] = (
    PosterRenderRequest,
    SeasonPosterRenderRequest,
    ThumbnailRenderRequest,
    EpisodeThumbnailRenderRequest,
)
