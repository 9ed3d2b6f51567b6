"""Process-level holder for the current station index."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable

from .base import ClusterOptions
from .builder import build_station_index
from .index import StationIndex

logger = logging.getLogger(__name__)


class StationIndexStore:
    """Owns the index a web process serves and replaces it wholesale.

    Readers take ``store.current`` once per request and keep using that
    handle; ``replace`` is a single reference assignment, so in-flight
    queries finish against the index they started with. Builds are
    serialised, so concurrent first requests share a single build.
    """

    def __init__(
        self,
        index: StationIndex | None = None,
        *,
        loader: Callable[[], Iterable[Any]] | None = None,
        options: ClusterOptions | None = None,
    ) -> None:
        self._index = index
        self._loader = loader
        self._options = options
        self._lock = threading.RLock()

    @property
    def current(self) -> StationIndex:
        index = self._index
        if index is not None:
            return index
        with self._lock:
            if self._index is None:
                try:
                    self.rebuild()
                except (OSError, ValueError) as exc:
                    logger.warning(f"Serving an empty station index: {exc}")
                    self.replace(build_station_index((), self._options))
            return self._index

    def replace(self, index: StationIndex) -> StationIndex:
        previous = self._index
        self._index = index
        if previous is not None:
            logger.info(f"Swapped station index: {previous.station_count} -> {index.station_count} stations")
        return index

    def rebuild(self, records: Iterable[Any] | None = None) -> StationIndex:
        """Build a fresh index from ``records`` (or the loader) and swap it in.

        Loader errors propagate and leave the current index in place.
        """

        with self._lock:
            if records is None:
                records = self._loader() if self._loader else ()
            return self.replace(build_station_index(records, self._options))
