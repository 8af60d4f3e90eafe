"""
Interface port pour l'accès aux polices chargées.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artforge.adapters.fonts import FontFamily


class FontNotLoadedError(LookupError):
    """Levée quand une police demandée n'a pas été chargée."""

    def __init__(self, font_name: str) -> None:
        self.font_name = font_name
        super().__init__(f"Font '{font_name}' is not loaded.")


class IFontProvider(ABC):
    """Fournit une famille de polices par son nom."""

    @abstractmethod
    def get_font(self, name: str) -> "FontFamily":
        """
        Retourne la famille de polices demandée.

        Args :
            name : Nom de la police, sans extension (ex: "ColusRegular")

        Lève :
            FontNotLoadedError : si la police n'est pas chargée
        """
        ...
