"""
Clients API externes pour la recuperation des images sources.

Ce module fournit l'adaptateur TMDB (The Movie Database) et son infrastructure:
- MemoryCache: Cache memoire avec TTL differencies (resultats 6h, vides 10 min)
- SingleFlight: Au plus une operation en vol par cle
- FetchCache: Combinaison des deux devant un producteur lent
- RateLimitError / with_retry: Backoff exponentiel sur les reponses 429

Le client implemente IImageProvider defini dans core/ports/api_clients.py.
"""

from artforge.adapters.api.cache import FetchCache, MemoryCache
from artforge.adapters.api.retry import RateLimitError, request_with_retry, with_retry
from artforge.adapters.api.single_flight import SingleFlight
from artforge.adapters.api.tmdb_images_client import (
    ImageProviderError,
    ProviderNotConfiguredError,
    TMDBImagesClient,
)

__all__ = [
    "FetchCache",
    "ImageProviderError",
    "MemoryCache",
    "ProviderNotConfiguredError",
    "RateLimitError",
    "SingleFlight",
    "TMDBImagesClient",
    "request_with_retry",
    "with_retry",
]
