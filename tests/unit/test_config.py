"""
Tests unitaires pour Settings (pydantic-settings).
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from artforge.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ARTFORGE_TMDB_API_KEY", raising=False)

        settings = Settings(_env_file=None)

        assert settings.tmdb_api_key is None
        assert not settings.tmdb_enabled
        assert settings.overlay_font == "ColusRegular"
        assert settings.cache_found_ttl_seconds == 21600
        assert settings.cache_not_found_ttl_seconds == 600
        assert settings.jpeg_quality == 90

    def test_environment_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARTFORGE_TMDB_API_KEY", "abc123")
        monkeypatch.setenv("ARTFORGE_TOKEN_SECRET", "s3cret")
        monkeypatch.setenv("ARTFORGE_JPEG_QUALITY", "75")

        settings = Settings(_env_file=None)

        assert settings.tmdb_enabled
        assert settings.token_secret == "s3cret"
        assert settings.jpeg_quality == 75

    def test_paths_expand_home(self) -> None:
        settings = Settings(_env_file=None, fonts_dir="~/fonts")

        assert settings.fonts_dir == Path.home() / "fonts"

    @pytest.mark.parametrize("quality", [0, 101])
    def test_jpeg_quality_bounds(self, quality: int) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, jpeg_quality=quality)
