"""Load the apartment being edited and seed the draft from it."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .draft import DraftStore
from .models import Apartment

logger = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
READY = "ready"
FAILED = "failed"

Fetcher = Callable[[str], Any]


@dataclass
class BaselineLoader:
    """Fetches the baseline for the requested apartment id.

    Every call to :meth:`load` supersedes the previous one: the store is
    cleared immediately and a fetch that finishes after a newer request
    is dropped, so two apartments are never merged into one draft.
    """

    fetcher: Fetcher
    store: DraftStore = field(default_factory=DraftStore)
    state: str = IDLE
    error: str | None = None
    apartment: Apartment | None = None
    apartment_id: str | None = None
    _token: int = field(default=0, repr=False)

    async def load(self, apartment_id: str | None) -> bool:
        """Switch to ``apartment_id`` (``None`` for create mode).

        Returns True when the store ends up seeded from this request.
        """
        self._token += 1
        token = self._token
        self.apartment_id = apartment_id
        self.apartment = None
        self.error = None
        self.store.reset()

        if apartment_id is None:
            self.state = IDLE
            return False

        self.state = LOADING
        logger.info("Loading apartment %s", apartment_id)
        try:
            apartment = await self._fetch(apartment_id)
            if token != self._token:
                logger.debug("Discarding stale result for apartment %s", apartment_id)
                return False
            self.store.seed(apartment)
        except Exception as exc:
            if token != self._token:
                logger.debug("Ignoring failure for superseded apartment %s", apartment_id)
                return False
            logger.exception("Failed to load apartment %s", apartment_id)
            self.store.reset()
            self.state = FAILED
            self.error = str(exc) or type(exc).__name__
            return False

        self.apartment = apartment
        self.state = READY
        return True

    async def _fetch(self, apartment_id: str) -> Apartment:
        fetcher = self.fetcher
        if (inspect.iscoroutinefunction(fetcher)
                or inspect.iscoroutinefunction(getattr(fetcher, "__call__", None))):
            return await fetcher(apartment_id)
        result = await asyncio.to_thread(fetcher, apartment_id)
        if inspect.isawaitable(result):
            return await result
        return result
