"""
Interfaces ports pour le fournisseur d'images.

Le fournisseur (TMDB) sert deux usages :
- télécharger les octets d'une image à partir de son chemin et d'une taille
- lister les images candidates d'un média (posters, backdrops/stills, logos)
"""

from abc import ABC, abstractmethod
from typing import Optional

from artforge.core.entities.render_requests import MediaKind
from artforge.core.value_objects.artwork import ArtworkImages


class IImageProvider(ABC):
    """
    Interface du fournisseur de métadonnées et d'images.

    Les implémentations sont responsables de leur propre cache : les appelants
    ne doivent jamais contourner ce port pour parler directement au service distant.
    """

    @abstractmethod
    async def fetch_image(self, file_path: str, size: str = "original") -> bytes:
        """
        Télécharge une image encodée.

        Args :
            file_path : Chemin de l'image chez le fournisseur
            size : Taille demandée (ex: "original", "w500")

        Retourne :
            Les octets de l'image, vides si l'image n'existe pas

        Lève :
            ImageProviderError : si le fournisseur est injoignable ou répond en erreur
        """
        ...

    @abstractmethod
    async def fetch_candidates(
        self,
        tmdb_id: int,
        media_kind: MediaKind,
        season_number: Optional[int] = None,
        episode_number: Optional[int] = None,
    ) -> ArtworkImages:
        """
        Liste les images disponibles pour un média.

        Args :
            tmdb_id : ID TMDB du film ou de la série
            media_kind : Type de média
            season_number : Numéro de saison (saisons et épisodes)
            episode_number : Numéro d'épisode (épisodes)

        Retourne :
            ArtworkImages, vide si le média n'a aucune image
        """
        ...
