"""
Cache memoire avec TTL differencies et deduplication des appels concurrents.

Le cache vit uniquement en memoire : il est perdu au redemarrage du processus
et n'est jamais evince par taille, seulement par expiration.

TTL par defaut:
- Resultats trouves (FOUND_TTL): 6 heures - les images d'un media changent rarement
- Resultats vides (NOT_FOUND_TTL): 10 minutes - borne la duree d'un "introuvable"
  sans solliciter le fournisseur a chaque requete
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from artforge.adapters.api.single_flight import SingleFlight


@dataclass(frozen=True)
class CacheEntry:
    """Valeur cachee et son instant d'expiration (horloge monotone)."""

    value: Any
    expires_at: float


class MemoryCache:
    """
    Cache cle/valeur en memoire avec expiration par entree.

    Toutes les operations sont protegees par un verrou : le cache peut etre
    lu depuis la boucle asyncio comme depuis les threads de l'executor.
    Une entree expiree est supprimee a sa lecture ; les entrees expirees jamais
    relues sont purgees lors d'une ecriture, au plus une fois par not_found_ttl.

    Attributes:
        FOUND_TTL: Duree de vie des resultats non vides (6h)
        NOT_FOUND_TTL: Duree de vie des resultats vides (10 min)

    Example:
        cache = MemoryCache()
        cache.set_found("tmdb:images:0:0:movie:27205", images)
        data = cache.get("tmdb:images:0:0:movie:27205")
    """

    FOUND_TTL = 6 * 60 * 60  # 6 heures en secondes (21600)
    NOT_FOUND_TTL = 10 * 60  # 10 minutes en secondes (600)

    def __init__(
        self,
        found_ttl: int = FOUND_TTL,
        not_found_ttl: int = NOT_FOUND_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialise un cache vide.

        Args:
            found_ttl: TTL en secondes des resultats non vides
            not_found_ttl: TTL en secondes des resultats vides
            clock: Horloge monotone (injectable pour les tests)
        """
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.found_ttl = found_ttl
        self.not_found_ttl = not_found_ttl
        self._next_sweep_at = clock() + not_found_ttl

    def get(self, key: str) -> Optional[Any]:
        """
        Recupere une valeur du cache.

        Args:
            key: Cle unique identifiant la donnee

        Returns:
            La valeur stockee ou None si absente ou expiree
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug(f"Cache MISS for key {key}")
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                logger.debug(f"Cache EXPIRED for key {key}")
                return None
        logger.debug(f"Cache HIT for key {key} => {type(entry.value).__name__}")
        return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        """
        Stocke une valeur dans le cache avec un TTL.

        Args:
            key: Cle unique identifiant la donnee
            value: Valeur a stocker
            ttl: Duree de vie en secondes
        """
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep_at:
                self._sweep_expired(now)
            self._entries[key] = CacheEntry(value=value, expires_at=now + ttl)
        logger.debug(f"Cache SET for key {key} (ttl={ttl}s)")

    def _sweep_expired(self, now: float) -> None:
        # Appele sous verrou
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._next_sweep_at = now + self.not_found_ttl
        if expired:
            logger.debug(f"Cache SWEEP: {len(expired)} entree(s) expiree(s) supprimee(s)")

    def set_found(self, key: str, value: Any) -> None:
        """Stocke un resultat non vide (TTL long)."""
        self.set(key, value, self.found_ttl)

    def set_not_found(self, key: str, value: Any) -> None:
        """Stocke un resultat vide (TTL court)."""
        self.set(key, value, self.not_found_ttl)

    def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class FetchCache:
    """
    Cache TTL + single-flight devant un producteur lent.

    Sur un HIT, la valeur est renvoyee immediatement. Sur un MISS, au plus un
    producteur s'execute par cle ; tous les appelants concurrents partagent son
    resultat. Le resultat est stocke avec le TTL long s'il est non vide, avec le
    TTL court s'il est vide. Une exception du producteur remonte a tous les
    appelants en attente et n'est pas cachee : l'appel suivant relance le producteur.

    L'annulation d'un appelant n'annule que son attente. L'operation partagee
    n'est annulee que par SingleFlight.cancel_all() a l'arret du processus.

    Example:
        fetch_cache = FetchCache(MemoryCache(), SingleFlight())
        images = await fetch_cache.run(
            "tmdb:images:0:0:movie:27205",
            lambda: client.download_images(27205),
        )
    """

    def __init__(self, cache: MemoryCache, single_flight: SingleFlight) -> None:
        self._cache = cache
        self._single_flight = single_flight

    @property
    def cache(self) -> MemoryCache:
        """Cache TTL sous-jacent."""
        return self._cache

    @property
    def single_flight(self) -> SingleFlight:
        """Table des operations en vol."""
        return self._single_flight

    async def run(self, key: str, producer: Callable[[], Awaitable[Any]]) -> Any:
        """
        Renvoie la valeur cachee ou execute (ou rejoint) le producteur.

        Args:
            key: Cle deterministe construite a partir de tous les parametres
                 qui influencent le resultat
            producer: Fonction async sans argument produisant la valeur

        Returns:
            La valeur cachee ou produite
        """
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        return await self._single_flight.run(
            key, lambda: self._produce_and_store(key, producer)
        )

    async def _produce_and_store(
        self, key: str, producer: Callable[[], Awaitable[Any]]
    ) -> Any:
        # Une operation precedente a pu remplir le cache entre le MISS et l'enregistrement
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        value = await producer()
        if value is None:
            return None

        if value:
            self._cache.set_found(key, value)
        else:
            self._cache.set_not_found(key, value)
        return value
