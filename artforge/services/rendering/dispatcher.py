"""
Dispatcher des jetons de rendu.

Chaîne linéaire : jeton reçu -> jeton non vide -> décodage -> routage par
variante -> rendu -> image ou introuvable.

Toute erreur de jeton avant le rendu devient une requête invalide ; un rendu
qui ne produit rien devient un introuvable (résultat négatif légitime).
La table de routage couvre toutes les variantes de RenderRequest : elle est
vérifiée à la construction, donc au démarrage de l'application.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union

from loguru import logger

from artforge.adapters.api.tmdb_images_client import ImageProviderError
from artforge.core.entities.render_requests import RENDER_REQUEST_TYPES
from artforge.core.ports.rendering import IRenderService
from artforge.core.value_objects.artwork import RenderedImage
from artforge.services.codec import RenderRequestCodec
from artforge.services.token_protection import TokenError

MISSING_TOKEN_MESSAGE = "Missing token."
INVALID_TOKEN_MESSAGE = "Invalid token."


class RendererRegistrationError(RuntimeError):
    """Table de routage incomplète ou variante non routée (faute interne)."""


@dataclass(frozen=True)
class NotFound:
    """Le jeton est valide mais aucune image n'a pu être produite."""


@dataclass(frozen=True)
class BadRequest:
    """Jeton absent ou invalide."""

    message: str


RenderOutcome = Union[RenderedImage, NotFound, BadRequest]


class RenderDispatcher:
    """
    Décode les jetons et route chaque requête vers son service de rendu.

    Example:
        dispatcher = RenderDispatcher(codec, {
            PosterRenderRequest: poster_service,
            SeasonPosterRenderRequest: season_poster_service,
            ThumbnailRenderRequest: thumbnail_service,
            EpisodeThumbnailRenderRequest: episode_thumbnail_service,
        })
        outcome = await dispatcher.handle(token)
    """

    def __init__(
        self,
        codec: RenderRequestCodec,
        services: Mapping[type, IRenderService],
    ) -> None:
        """
        Args:
            codec: Codec des requêtes
            services: Service de rendu par type de requête

        Raises:
            RendererRegistrationError: si une variante n'a pas de service
                ou si un type inconnu est enregistré
        """
        missing = [t.__name__ for t in RENDER_REQUEST_TYPES if t not in services]
        if missing:
            raise RendererRegistrationError(
                f"No render service registered for: {', '.join(missing)}"
            )
        unknown = [t.__name__ for t in services if t not in RENDER_REQUEST_TYPES]
        if unknown:
            raise RendererRegistrationError(
                f"Render services registered for unknown request types: {', '.join(unknown)}"
            )

        self._codec = codec
        self._services = dict(services)

    async def handle(self, token: str | None) -> RenderOutcome:
        """
        Traite un jeton de rendu.

        Args:
            token: Jeton reçu dans l'URL

        Returns:
            RenderedImage, NotFound ou BadRequest

        Raises:
            ImageProviderError: échec du fournisseur (erreur serveur)
            asyncio.CancelledError: si l'appel est annulé
        """
        if token is None or not token.strip():
            return BadRequest(MISSING_TOKEN_MESSAGE)

        try:
            request = self._codec.decode(token)
        except TokenError as e:
            logger.debug(f"Jeton invalide ({type(e).__name__}): {e}")
            return BadRequest(INVALID_TOKEN_MESSAGE)

        service = self._route(request)
        try:
            result = await service.render(request)
        except ImageProviderError as e:
            logger.error(f"Echec du fournisseur pour {type(request).__name__}: {e}")
            raise

        if result is None:
            logger.debug(f"Aucune image produite pour {type(request).__name__}")
            return NotFound()
        return result

    def _route(self, request: Any) -> IRenderService:
        service = self._services.get(type(request))
        if service is None:
            raise RendererRegistrationError(
                f"Render request type '{type(request).__name__}' is not supported."
            )
        return service
