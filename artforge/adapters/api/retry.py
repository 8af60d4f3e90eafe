"""
Mecanisme de retry avec backoff exponentiel pour le fournisseur d'images.

Relance automatiquement les requetes limitees (429) et les erreurs de transport
passageres (connexion refusee, timeout) avec un delai croissant et du jitter.
Les autres erreurs HTTP remontent immediatement : la politique de retry
appartient au client du fournisseur, jamais au moteur de composition.

Usage:
    # Avec le decorateur
    @with_retry(max_attempts=5, max_wait=60)
    async def my_api_call():
        ...

    # Avec la fonction helper
    response = await request_with_retry(client, "GET", url)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

RETRYABLE_EXCEPTIONS = (httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError)


class RateLimitError(Exception):
    """
    Exception levee quand le fournisseur retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si absent ou illisible.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RateLimitError":
        """Construit l'erreur a partir du header Retry-After d'une reponse 429."""
        header = response.headers.get("Retry-After")
        try:
            retry_after = int(header) if header else None
        except ValueError:
            # Retry-After peut etre une date HTTP
            retry_after = None
        return cls(retry_after)


def with_retry(max_attempts: int = 5, max_wait: int = 60):
    """
    Decorateur pour relancer sur RateLimitError ou erreur de transport.

    Utilise wait_random_exponential pour ajouter du jitter et eviter que des
    rendus concurrents ne relancent tous au meme instant.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 60)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type((RateLimitError, *RETRYABLE_EXCEPTIONS)),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    max_wait: int = 60,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique.

    Convertit les reponses 429 en RateLimitError et relance avec backoff
    exponentiel. Les reponses 4xx/5xx autres que 429 ne sont PAS levees ici :
    l'appelant decide si un 404 est un "introuvable" legitime.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 60)
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response (statut different de 429)

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        httpx.TransportError: Si le fournisseur reste injoignable
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError.from_response(response)
        return response

    return await _do_request()
