"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe ARTFORGE_,
et peut optionnellement être fournie via un fichier .env.

La clé API TMDB est optionnelle au démarrage : les appels au fournisseur échouent
explicitement tant qu'elle n'est pas définie. Le secret des jetons est optionnel :
sans lui, un secret aléatoire est généré à chaque démarrage du processus.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de artforge/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe ARTFORGE_.
    Exemple : ARTFORGE_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="ARTFORGE_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Fournisseur d'images (OPTIONNEL - les rendus échouent si non défini)
    tmdb_api_key: Optional[str] = Field(default=None)

    # Jetons de rendu
    token_secret: Optional[str] = Field(default=None)
    public_base_url: str = Field(default="")

    # Polices
    fonts_dir: Path = Field(default=Path("fonts"))
    overlay_font: str = Field(default="ColusRegular")

    # Cache mémoire des appels TMDB (en secondes)
    cache_found_ttl_seconds: int = Field(default=6 * 60 * 60, ge=1)
    cache_not_found_ttl_seconds: int = Field(default=10 * 60, ge=1)

    # Encodage
    jpeg_quality: int = Field(default=90, ge=1, le=100)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/artforge.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)
    log_cache_to_console: bool = Field(default=False)

    @field_validator("fonts_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return bool(self.tmdb_api_key)
