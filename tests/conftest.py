"""
Fixtures pytest partagees pour les tests ArtForge.

Ce module contient les fixtures communes utilisees dans les tests:
- Mocks des ports (IImageProvider, ILocalFileReader)
- Fournisseur de polices base sur la police integree de Pillow
- Protecteur de jetons et codec avec un secret fixe
- Settings de test avec chemins temporaires
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from artforge.adapters.api.cache import FetchCache, MemoryCache
from artforge.adapters.api.single_flight import SingleFlight
from artforge.adapters.fonts import FontFamily
from artforge.config import Settings
from artforge.core.ports.api_clients import IImageProvider
from artforge.core.ports.file_system import ILocalFileReader
from artforge.core.ports.fonts import FontNotLoadedError, IFontProvider
from artforge.services.codec import RenderRequestCodec
from artforge.services.token_protection import TokenProtector

TEST_SECRET = "test-secret-for-render-tokens"


@pytest.fixture
def mock_image_provider() -> AsyncMock:
    """
    Mock de IImageProvider.

    fetch_image retourne des octets vides par defaut (image introuvable).
    Configurer le mock dans chaque test pour des comportements specifiques.
    """
    mock = AsyncMock(spec=IImageProvider)
    mock.fetch_image.return_value = b""
    return mock


@pytest.fixture
def mock_file_reader() -> AsyncMock:
    """Mock de ILocalFileReader (fichier absent par defaut)."""
    mock = AsyncMock(spec=ILocalFileReader)
    mock.try_read_all.return_value = None
    return mock


class BuiltinFontProvider(IFontProvider):
    """Fournisseur de polices de test : toute police connue est la police integree."""

    def __init__(self, names: tuple[str, ...] = ("ColusRegular",)) -> None:
        self._names = {name.lower() for name in names}
        self.requested: list[str] = []

    def get_font(self, name: str) -> FontFamily:
        self.requested.append(name)
        if name.lower() not in self._names:
            raise FontNotLoadedError(name)
        return FontFamily(name)


@pytest.fixture
def font_provider() -> BuiltinFontProvider:
    """Fournisseur de polices sans fichier de police."""
    return BuiltinFontProvider()


@pytest.fixture
def token_protector() -> TokenProtector:
    """TokenProtector avec un secret fixe."""
    return TokenProtector(secret=TEST_SECRET)


@pytest.fixture
def codec(token_protector: TokenProtector) -> RenderRequestCodec:
    """Codec des requetes avec un secret fixe."""
    return RenderRequestCodec(token_protector)


@pytest.fixture
def fetch_cache() -> FetchCache:
    """FetchCache isole par test."""
    return FetchCache(MemoryCache(), SingleFlight())


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Aucun fichier .env n'est lu : toutes les valeurs sont explicites.
    """
    fonts_dir = tmp_path / "fonts"
    fonts_dir.mkdir()
    return Settings(
        _env_file=None,
        tmdb_api_key="test_api_key",
        token_secret=TEST_SECRET,
        public_base_url="https://art.example.org",
        fonts_dir=fonts_dir,
        overlay_font="Default",
        log_file=tmp_path / "logs" / "artforge.log",
    )
