"""
Interface port pour la lecture de fichiers locaux (logos locaux).
"""

from abc import ABC, abstractmethod
from typing import Optional


class ILocalFileReader(ABC):
    """Lecture tolérante de fichiers locaux."""

    @abstractmethod
    async def try_read_all(self, path: str) -> Optional[bytes]:
        """
        Lit tout le contenu d'un fichier.

        Retourne :
            Les octets du fichier, ou None si le chemin est vide, absent
            ou illisible. Ne lève jamais d'exception pour un fichier manquant.
        """
        ...
