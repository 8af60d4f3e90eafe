"""
Chargement des polices utilisees pour les textes superposes.

Les polices TrueType/OpenType sont lues depuis un repertoire configure
(ARTFORGE_FONTS_DIR) et indexees par le nom du fichier sans extension,
sans tenir compte de la casse : "ColusRegular.ttf" -> "ColusRegular".

La police "Default" est toujours disponible : c'est la police integree de Pillow.
"""

import io
import threading
from pathlib import Path
from typing import Optional

from loguru import logger
from PIL import ImageFont

from artforge.core.ports.fonts import FontNotLoadedError, IFontProvider

FONT_EXTENSIONS: frozenset[str] = frozenset({".ttf", ".otf"})

DEFAULT_FONT_NAME = "Default"


class FontFamily:
    """
    Famille de polices capable de produire une police a une taille donnee.

    Attributes:
        name: Nom de la famille
    """

    def __init__(self, name: str, data: Optional[bytes] = None) -> None:
        """
        Args:
            name: Nom de la famille
            data: Contenu du fichier de police, None pour la police integree
        """
        self.name = name
        self._data = data

    @property
    def is_builtin(self) -> bool:
        """Indique si la famille est la police integree de Pillow."""
        return self._data is None

    def create_font(self, size: float) -> ImageFont.FreeTypeFont:
        """Cree une police a la taille demandee (en points)."""
        if self._data is None:
            return ImageFont.load_default(size=size)
        return ImageFont.truetype(io.BytesIO(self._data), size=size)

    def __repr__(self) -> str:
        return f"FontFamily(name={self.name!r})"


class FontProvider(IFontProvider):
    """
    Fournisseur de polices charge depuis un repertoire.

    Le repertoire est lu au premier acces ; un repertoire absent
    laisse seulement la police integree disponible.
    """

    def __init__(self, fonts_dir: Optional[Path] = None) -> None:
        self._fonts_dir = fonts_dir
        self._families: Optional[dict[str, FontFamily]] = None
        self._lock = threading.Lock()

    def get_font(self, name: str) -> FontFamily:
        """
        Retourne la famille de polices demandee.

        Args:
            name: Nom de la police sans extension

        Returns:
            La famille correspondante

        Raises:
            FontNotLoadedError: si aucune police de ce nom n'est chargee
        """
        family = self._load().get(name.lower())
        if family is None:
            raise FontNotLoadedError(name)
        return family

    def loaded_names(self) -> list[str]:
        """Noms des polices disponibles, tries."""
        return sorted(family.name for family in self._load().values())

    def _load(self) -> dict[str, FontFamily]:
        with self._lock:
            if self._families is None:
                self._families = self._scan()
            return self._families

    def _scan(self) -> dict[str, FontFamily]:
        families = {DEFAULT_FONT_NAME.lower(): FontFamily(DEFAULT_FONT_NAME)}

        if self._fonts_dir is None or not self._fonts_dir.is_dir():
            logger.warning(f"Repertoire de polices introuvable: {self._fonts_dir}")
            return families

        for path in sorted(self._fonts_dir.iterdir()):
            if path.suffix.lower() not in FONT_EXTENSIONS or not path.is_file():
                continue
            try:
                data = path.read_bytes()
            except OSError as e:
                logger.warning(f"Police illisible {path.name}: {e}")
                continue
            families[path.stem.lower()] = FontFamily(path.stem, data)
            logger.debug(f"Police chargee: {path.stem}")

        logger.info(f"{len(families)} police(s) disponible(s)")
        return families
