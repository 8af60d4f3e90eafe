"""
Interface port pour les services de rendu.

Un service de rendu prépare les données (téléchargement des images sources)
puis délègue la composition à son renderer.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from artforge.core.value_objects.artwork import RenderedImage

RequestT = TypeVar("RequestT")


class IRenderService(ABC, Generic[RequestT]):
    """Service de rendu pour une variante de requête."""

    @abstractmethod
    async def render(self, request: RequestT) -> Optional[RenderedImage]:
        """
        Produit l'image demandée.

        Retourne :
            RenderedImage, ou None si une image source est introuvable
            (résultat négatif légitime, pas une erreur)

        Lève :
            asyncio.CancelledError : si l'appel est annulé, sans octets partiels
        """
        ...
