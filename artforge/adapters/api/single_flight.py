"""
Deduplication par cle des operations asynchrones (single-flight).

Les appelants concurrents pour une meme cle attendent la meme tache sous-jacente.
L'annulation d'un appelant n'affecte que son attente (asyncio.shield) et jamais
l'operation partagee.

Usage:
    single_flight = SingleFlight()
    value = await single_flight.run("tmdb:images:0:0:movie:27205", fetch_images)

    # A l'arret du processus
    single_flight.cancel_all()
"""

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger


class SingleFlight:
    """
    Table des operations en vol, indexee par cle.

    Au plus une tache existe par cle a un instant donne ; elle est retiree
    de la table des qu'elle se termine (succes, echec ou annulation), de sorte
    que l'appelant suivant lit le cache ou demarre une nouvelle operation.

    La table est liee a la boucle asyncio qui l'utilise : l'enregistrement
    d'une cle se fait sans point de suspension, donc sans course possible
    entre deux appelants de la meme boucle.
    """

    def __init__(self) -> None:
        self._in_flight: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._in_flight)

    def __contains__(self, key: str) -> bool:
        return key in self._in_flight

    async def run(self, key: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        """
        Execute (ou rejoint) l'operation en vol pour une cle.

        Args:
            key: Cle de deduplication
            operation: Fonction async sans argument, appelee seulement
                       si aucune operation n'est en vol pour la cle

        Returns:
            Le resultat de l'operation partagee

        Raises:
            L'exception de l'operation partagee, pour tous les appelants
            asyncio.CancelledError: si cet appelant est annule
        """
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(operation())
            self._in_flight[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
            logger.debug(f"Single-flight START for key {key}")
        else:
            logger.debug(f"Single-flight JOIN for key {key}")

        return await asyncio.shield(task)

    def cancel_all(self) -> int:
        """
        Annule toutes les operations en vol (signal d'arret du processus).

        Returns:
            Nombre d'operations annulees
        """
        tasks = list(self._in_flight.values())
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info(f"{len(tasks)} operation(s) en vol annulee(s)")
        return len(tasks)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Marque l'exception comme consommee si tous les appelants ont abandonne
        if not task.cancelled():
            task.exception()
