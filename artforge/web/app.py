"""
Application FastAPI d'ArtForge.

Initialise l'application web avec le Container DI et monte les routes.
La table de routage des rendus est vérifiée au démarrage : une variante
sans service de rendu empêche l'application de démarrer.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from loguru import logger

from ..adapters.api.tmdb_images_client import ImageProviderError
from ..container import Container
from ..core.ports.fonts import FontNotLoadedError
from .routes.candidates import router as candidates_router
from .routes.render import router as render_router


def _check_overlay_font(container: Container) -> bool:
    """
    Vérifie au démarrage que la police de superposition est chargée.

    Sans elle, les posters de saison et les vignettes d'épisode échouent :
    l'application démarre quand même, avec un avertissement.
    """
    settings = container.config()
    try:
        container.font_provider().get_font(settings.overlay_font)
    except FontNotLoadedError:
        logger.warning(
            f"Police '{settings.overlay_font}' introuvable dans {settings.fonts_dir} : "
            f"les rendus de saison et d'épisode échoueront "
            f"(ARTFORGE_OVERLAY_FONT=Default pour la police intégrée)"
        )
        return False
    return True


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container DI à utiliser (un nouveau container par défaut)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise le Container DI au démarrage et libère ses ressources à l'arrêt."""
        app_container = container or Container()
        app_container.render_dispatcher()
        _check_overlay_font(app_container)
        app.state.container = app_container
        yield
        cancelled = app_container.single_flight().cancel_all()
        if cancelled:
            logger.info(f"Arret : {cancelled} telechargement(s) en vol annule(s)")
        await app_container.tmdb_client().close()

    app = FastAPI(title="ArtForge", lifespan=lifespan)

    @app.exception_handler(ImageProviderError)
    async def image_provider_error_handler(
        request: Request, exc: ImageProviderError
    ) -> PlainTextResponse:
        return PlainTextResponse("Image provider unavailable.", status_code=502)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Sonde de disponibilité."""
        return {"status": "ok"}

    app.include_router(render_router)
    app.include_router(candidates_router)
    return app


# Cible d'import de uvicorn (artforge.web.app:app)
app = create_app()
