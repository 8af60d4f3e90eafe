"""
Objets valeur pour les images sources et les images rendues.

Objets valeur immutables representant les descripteurs d'images renvoyes par
le fournisseur (TMDB), le resultat d'un rendu et les candidats proposes a l'appelant.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImageDescriptor:
    """
    Descripteur d'une image disponible chez le fournisseur.

    Attributs:
        file_path: Chemin TMDB de l'image (ex: "/abc123.jpg")
        width: Largeur en pixels
        height: Hauteur en pixels
        language: Code ISO 639-1 de la langue, None pour une image sans texte
    """

    file_path: str
    width: int = 0
    height: int = 0
    language: Optional[str] = None


@dataclass(frozen=True)
class ArtworkImages:
    """
    Images candidates d'un media, regroupees par type.

    Les stills d'episode sont exposees comme backdrops, et les posters
    de saison comme posters.
    """

    posters: tuple[ImageDescriptor, ...] = ()
    backdrops: tuple[ImageDescriptor, ...] = ()
    logos: tuple[ImageDescriptor, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.posters or self.backdrops or self.logos)


@dataclass(frozen=True)
class RenderedImage:
    """Octets d'une image rendue et leur type MIME."""

    data: bytes
    mime_type: str


@dataclass(frozen=True)
class ArtworkCandidate:
    """
    Illustration proposee a l'appelant.

    Attributs:
        id: Identifiant stable du candidat (tmdb_id, type, chemin, preset)
        url: URL de rendu contenant le jeton, ou URL TMDB directe pour les logos
        width: Largeur de l'image source
        height: Hauteur de l'image source
        language: Langue de l'image source
    """

    id: str
    url: str
    width: int = 0
    height: int = 0
    language: Optional[str] = None
