"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Le cache memoire et la table des operations en vol sont des singletons du
container : ils vivent aussi longtemps que le processus, jamais en global de module.
"""

from dependency_injector import containers, providers

from .adapters.api.cache import FetchCache, MemoryCache
from .adapters.api.single_flight import SingleFlight
from .adapters.api.tmdb_images_client import TMDBImagesClient
from .adapters.file_system import LocalFileReader
from .adapters.fonts import FontProvider
from .config import Settings
from .core.entities.render_requests import (
    EpisodeThumbnailRenderRequest,
    PosterRenderRequest,
    SeasonPosterRenderRequest,
    ThumbnailRenderRequest,
)
from .services.artwork import ArtworkCandidateService
from .services.codec import RenderRequestCodec, RenderUrlBuilder
from .services.rendering.dispatcher import RenderDispatcher
from .services.rendering.episode_thumbnail import (
    EpisodeThumbnailRenderer,
    EpisodeThumbnailRenderService,
)
from .services.rendering.poster import PosterRenderer, PosterRenderService
from .services.rendering.season_poster import (
    SeasonPosterRenderer,
    SeasonPosterRenderService,
)
from .services.rendering.thumbnail import ThumbnailRenderer, ThumbnailRenderService
from .services.token_protection import TokenProtector


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        dispatcher = container.render_dispatcher()
        outcome = await dispatcher.handle(token)

    Pour les tests, surcharger la configuration :
        container.config.override(providers.Object(Settings(token_secret="test")))
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Cache memoire + single-flight - partages par tout le processus
    memory_cache = providers.Singleton(
        MemoryCache,
        found_ttl=config.provided.cache_found_ttl_seconds,
        not_found_ttl=config.provided.cache_not_found_ttl_seconds,
    )
    single_flight = providers.Singleton(SingleFlight)
    fetch_cache = providers.Singleton(
        FetchCache,
        cache=memory_cache,
        single_flight=single_flight,
    )

    # Adapters - implementations concretes des ports
    # Si api_key est None/vide, le client est cree mais leve
    # ProviderNotConfiguredError au premier listing d'images
    tmdb_client = providers.Singleton(
        TMDBImagesClient,
        api_key=config.provided.tmdb_api_key,
        fetch_cache=fetch_cache,
    )
    file_reader = providers.Singleton(LocalFileReader)
    font_provider = providers.Singleton(
        FontProvider,
        fonts_dir=config.provided.fonts_dir,
    )

    # Jetons
    token_protector = providers.Singleton(
        TokenProtector,
        secret=config.provided.token_secret,
    )
    codec = providers.Singleton(RenderRequestCodec, protector=token_protector)
    url_builder = providers.Singleton(
        RenderUrlBuilder,
        codec=codec,
        public_base_url=config.provided.public_base_url,
    )

    # Renderers (stateless - Singletons)
    poster_renderer = providers.Singleton(
        PosterRenderer,
        jpeg_quality=config.provided.jpeg_quality,
    )
    season_poster_renderer = providers.Singleton(
        SeasonPosterRenderer,
        font_provider=font_provider,
        font_name=config.provided.overlay_font,
        jpeg_quality=config.provided.jpeg_quality,
    )
    thumbnail_renderer = providers.Singleton(
        ThumbnailRenderer,
        jpeg_quality=config.provided.jpeg_quality,
    )
    episode_thumbnail_renderer = providers.Singleton(
        EpisodeThumbnailRenderer,
        font_provider=font_provider,
        font_name=config.provided.overlay_font,
        jpeg_quality=config.provided.jpeg_quality,
    )

    # Services de rendu - un par variante de requete
    poster_render_service = providers.Singleton(
        PosterRenderService,
        image_provider=tmdb_client,
        renderer=poster_renderer,
        file_reader=file_reader,
    )
    season_poster_render_service = providers.Singleton(
        SeasonPosterRenderService,
        image_provider=tmdb_client,
        renderer=season_poster_renderer,
    )
    thumbnail_render_service = providers.Singleton(
        ThumbnailRenderService,
        image_provider=tmdb_client,
        renderer=thumbnail_renderer,
        file_reader=file_reader,
    )
    episode_thumbnail_render_service = providers.Singleton(
        EpisodeThumbnailRenderService,
        image_provider=tmdb_client,
        renderer=episode_thumbnail_renderer,
    )

    # Dispatcher - la table de routage est verifiee a la construction
    render_dispatcher = providers.Singleton(
        RenderDispatcher,
        codec=codec,
        services=providers.Dict(
            {
                PosterRenderRequest: poster_render_service,
                SeasonPosterRenderRequest: season_poster_render_service,
                ThumbnailRenderRequest: thumbnail_render_service,
                EpisodeThumbnailRenderRequest: episode_thumbnail_render_service,
            }
        ),
    )

    # Candidats
    artwork_candidate_service = providers.Singleton(
        ArtworkCandidateService,
        image_provider=tmdb_client,
        url_builder=url_builder,
    )
