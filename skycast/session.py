from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass

from weather.engines.types import WeatherSnapshot

from .errors import ClientError
from .resolution import LocationResolutionChain
from .state import (
    DisplayState,
    Unit,
    city_input_changed,
    fetch_failed,
    fetch_started,
    fetch_succeeded,
    theme_toggled,
    unit_changed,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Outcome:
    snapshot: WeatherSnapshot | None = None
    error: str = ""
    city_input: str | None = None
    notice: str = ""


class WeatherSession:
    """One user's display slot, fed by searches and location lookups.

    Starting a fetch cancels the one in flight and bumps the state's
    generation, so a slow older response can never overwrite a newer one.
    """

    def __init__(
        self,
        chain: LocationResolutionChain,
        *,
        state: DisplayState | None = None,
    ) -> None:
        self.chain = chain
        self.state = state or DisplayState()
        self._inflight: asyncio.Task[_Outcome] | None = None

    def set_unit(self, unit: Unit) -> DisplayState:
        self.state = unit_changed(self.state, unit)
        return self.state

    def toggle_theme(self) -> DisplayState:
        self.state = theme_toggled(self.state)
        return self.state

    def type_city(self, text: str) -> DisplayState:
        self.state = city_input_changed(self.state, text)
        return self.state

    async def search(self, city: str | None = None) -> DisplayState:
        """Fetch weather for the typed city; blank input is ignored."""

        if city is not None:
            self.type_city(city)
        text = self.state.city_input
        if not text.strip():
            return self.state
        return await self._run(self._search(text))

    async def locate(self) -> DisplayState:
        """Fetch weather for the device position via the resolution chain."""

        return await self._run(self._locate())

    async def _search(self, city: str) -> _Outcome:
        try:
            result = await self.chain.search(city)
        except ClientError as exc:
            return _Outcome(error=exc.message)
        return _Outcome(snapshot=result.snapshot)

    async def _locate(self) -> _Outcome:
        try:
            location = await self.chain.resolve()
        except ClientError as exc:
            return _Outcome(error=exc.message)
        try:
            result = await self.chain.fetch(location)
        except ClientError as exc:
            return _Outcome(error=exc.message, city_input=location.label)
        return _Outcome(
            snapshot=result.snapshot,
            city_input=location.label,
            notice=location.notice,
        )

    async def _run(self, work: Awaitable[_Outcome]) -> DisplayState:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self.state = fetch_started(self.state)
        generation = self.state.generation

        task = asyncio.ensure_future(work)
        self._inflight = task
        try:
            outcome = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info(
                "skycast.session.superseded generation=%s", generation
            )
            return self.state

        if generation != self.state.generation:
            logger.info(
                "skycast.session.stale_result generation=%s latest=%s",
                generation,
                self.state.generation,
            )
            return self.state

        if outcome.snapshot is not None:
            self.state = fetch_succeeded(
                self.state,
                generation,
                outcome.snapshot,
                city_input=outcome.city_input,
                notice=outcome.notice,
            )
        else:
            self.state = fetch_failed(
                self.state,
                generation,
                outcome.error,
                city_input=outcome.city_input,
            )
        return self.state
