"""
Adaptateur pour la lecture des fichiers locaux.

Implementation concrete de ILocalFileReader, utilisee pour les logos
fournis par la mediatheque plutot que par TMDB.
"""

import asyncio
from pathlib import Path
from typing import Optional

from loguru import logger

from artforge.core.ports.file_system import ILocalFileReader


class LocalFileReader(ILocalFileReader):
    """
    Lecture tolerante de fichiers locaux.

    La lecture bloquante s'execute dans l'executor par defaut de la boucle
    asyncio. Un chemin vide, un fichier absent ou une erreur d'E/S donnent None.
    """

    async def try_read_all(self, path: str) -> Optional[bytes]:
        """
        Lit tout le contenu d'un fichier.

        Args:
            path: Chemin du fichier

        Returns:
            Les octets du fichier, ou None si illisible
        """
        if not path or not path.strip():
            return None

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, Path(path))

    @staticmethod
    def _read(path: Path) -> Optional[bytes]:
        if not path.is_file():
            logger.debug(f"Fichier local introuvable: {path}")
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning(f"Lecture impossible de {path}: {e}")
            return None
