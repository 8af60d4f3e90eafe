"""
Configuration du logging d'ArtForge via loguru.

Deux sorties :
- console (stderr, colorée) au niveau ARTFORGE_LOG_LEVEL
- fichier JSON avec rotation, qui reçoit tout à partir de DEBUG

Les traces par clé du cache et du single-flight (HIT/MISS/SET/JOIN) sont
émises à chaque téléchargement : elles ne vont que dans le fichier, sauf si
ARTFORGE_LOG_CACHE_TO_CONSOLE est activé.
"""

import sys

from loguru import logger

from .config import Settings

# Modules dont les traces DEBUG sont réservées au fichier
CACHE_TRACE_MODULES = (
    "artforge.adapters.api.cache",
    "artforge.adapters.api.single_flight",
)

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def is_cache_trace(record: dict) -> bool:
    """Vrai pour une trace DEBUG émise par le cache ou le single-flight."""
    return record["level"].no <= logger.level("DEBUG").no and (
        record["name"] or ""
    ).startswith(CACHE_TRACE_MODULES)


def configure_logging(settings: Settings) -> None:
    """Configure les sorties console et fichier à partir des paramètres.

    Args :
        settings : Paramètres de l'application (niveau, fichier, rotation,
            rétention et visibilité des traces du cache en console)
    """
    logger.remove()

    if settings.log_cache_to_console:
        console_filter = None
    else:
        def console_filter(record: dict) -> bool:
            return not is_cache_trace(record)

    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=CONSOLE_FORMAT,
        filter=console_filter,
        colorize=True,
    )

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        settings.log_file,
        level="DEBUG",
        serialize=True,
        rotation=settings.log_rotation_size,
        retention=settings.log_retention_count,
        compression="zip",
        enqueue=True,  # les rendus journalisent depuis les threads de l'executor
    )

    logger.debug(
        f"Logging configuré : console {settings.log_level.upper()}, "
        f"fichier {settings.log_file}"
    )
