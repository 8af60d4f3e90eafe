"""
Tests unitaires pour SingleFlight.

Ces tests verifient:
- Au plus une operation par cle, partagee par tous les appelants concurrents
- Un echec est observe par tous les appelants puis oublie
- L'annulation d'un appelant n'annule pas l'operation partagee
- cancel_all() annule les operations en vol
"""

import asyncio

import pytest

from artforge.adapters.api.single_flight import SingleFlight


@pytest.fixture
def single_flight() -> SingleFlight:
    return SingleFlight()


class TestSingleFlight:
    """Tests pour SingleFlight.run()."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_operation(
        self, single_flight: SingleFlight
    ) -> None:
        """N appelants concurrents : une seule execution, un seul resultat."""
        calls = 0
        release = asyncio.Event()

        async def operation() -> int:
            nonlocal calls
            calls += 1
            await release.wait()
            return 42

        tasks = [asyncio.create_task(single_flight.run("key", operation)) for _ in range(25)]
        await asyncio.sleep(0)
        assert "key" in single_flight

        release.set()
        results = await asyncio.gather(*tasks)

        assert calls == 1
        assert results == [42] * 25

    @pytest.mark.asyncio
    async def test_entry_removed_after_completion(self, single_flight: SingleFlight) -> None:
        """L'entree est retiree des que l'operation se termine."""

        async def operation() -> str:
            return "done"

        assert await single_flight.run("key", operation) == "done"
        assert len(single_flight) == 0

    @pytest.mark.asyncio
    async def test_failure_shared_then_retried(self, single_flight: SingleFlight) -> None:
        """Tous les appelants observent l'echec ; l'appel suivant relance l'operation."""
        calls = 0
        release = asyncio.Event()

        async def failing() -> str:
            nonlocal calls
            calls += 1
            await release.wait()
            raise RuntimeError("boom")

        tasks = [asyncio.create_task(single_flight.run("key", failing)) for _ in range(5)]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert calls == 1
        assert all(isinstance(r, RuntimeError) for r in results)
        assert "key" not in single_flight

        async def succeeding() -> str:
            return "ok"

        assert await single_flight.run("key", succeeding) == "ok"

    @pytest.mark.asyncio
    async def test_cancelling_one_caller_keeps_operation_alive(
        self, single_flight: SingleFlight
    ) -> None:
        """L'annulation d'un appelant n'annule que son attente."""
        release = asyncio.Event()
        finished = False

        async def operation() -> str:
            nonlocal finished
            await release.wait()
            finished = True
            return "shared"

        first = asyncio.create_task(single_flight.run("key", operation))
        second = asyncio.create_task(single_flight.run("key", operation))
        await asyncio.sleep(0)

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first

        release.set()
        assert await second == "shared"
        assert finished

    @pytest.mark.asyncio
    async def test_operation_survives_when_all_callers_cancel(
        self, single_flight: SingleFlight
    ) -> None:
        """L'operation partagee se termine meme si tous les appelants abandonnent."""
        release = asyncio.Event()
        finished = asyncio.Event()

        async def operation() -> str:
            await release.wait()
            finished.set()
            return "late"

        caller = asyncio.create_task(single_flight.run("key", operation))
        await asyncio.sleep(0)
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        release.set()
        await asyncio.wait_for(finished.wait(), timeout=1)
        await asyncio.sleep(0)
        assert "key" not in single_flight

    @pytest.mark.asyncio
    async def test_cancel_all_cancels_in_flight_operations(
        self, single_flight: SingleFlight
    ) -> None:
        """cancel_all() annule les operations et leurs appelants."""

        async def never_ends() -> None:
            await asyncio.Event().wait()

        callers = [
            asyncio.create_task(single_flight.run(key, never_ends)) for key in ("a", "b")
        ]
        await asyncio.sleep(0)

        assert single_flight.cancel_all() == 2
        results = await asyncio.gather(*callers, return_exceptions=True)

        assert all(isinstance(r, asyncio.CancelledError) for r in results)
        assert len(single_flight) == 0
