"""
ReloadCoordinator - owns the live KnowledgeSnapshot and swaps it atomically.

Readers take `coordinator.current` once per query and keep using that object.
A reload loads a complete candidate off the event loop and publishes it with a
single attribute assignment; if loading fails the old snapshot stays live.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..errors import ConfigurationError, ReloadError
from ..knowledge.snapshot import KnowledgeSnapshot

logger = logging.getLogger(__name__)

# Called with the version number the new snapshot should carry. Blocking.
SnapshotLoader = Callable[[int], KnowledgeSnapshot]


@dataclass(frozen=True)
class ReloadResult:
    """Outcome of one reload attempt."""

    ok: bool
    version: int
    error: ReloadError | None = None


class ReloadCoordinator:
    """
    Versioned reference cell for the knowledge snapshot.

    Usage:
        coordinator = ReloadCoordinator.start(loader)   # raises on bad data
        snapshot = coordinator.current
        result = await coordinator.reload()             # never raises
    """

    def __init__(self, loader: SnapshotLoader, snapshot: KnowledgeSnapshot) -> None:
        self._loader = loader
        self._snapshot = snapshot
        # Serializes reloads only; readers never wait on it
        self._lock = asyncio.Lock()

    @classmethod
    def start(cls, loader: SnapshotLoader) -> "ReloadCoordinator":
        """
        Load the first snapshot synchronously.

        Raises:
            ConfigurationError: If the initial data cannot be loaded (fatal)
        """
        snapshot = loader(1)
        if snapshot.version != 1:
            snapshot = snapshot.with_version(1)
        return cls(loader, snapshot)

    @property
    def current(self) -> KnowledgeSnapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._snapshot.version

    async def reload(self) -> ReloadResult:
        """
        Rebuild every store and index from the data source.

        Returns:
            ReloadResult; on failure `error` is set and the previous snapshot
            is still current
        """
        async with self._lock:
            live = self._snapshot
            next_version = live.version + 1
            try:
                candidate = await asyncio.to_thread(self._loader, next_version)
            except ConfigurationError as e:
                error = ReloadError(f"reload failed, keeping knowledge v{live.version}: {e}", e)
                logger.error("%s", error)
                return ReloadResult(ok=False, version=live.version, error=error)
            except Exception as e:
                error = ReloadError(f"reload crashed, keeping knowledge v{live.version}: {e!r}", e)
                logger.exception("%s", error)
                return ReloadResult(ok=False, version=live.version, error=error)

            if candidate.version != next_version:
                candidate = candidate.with_version(next_version)
            self._snapshot = candidate

        logger.info("Knowledge reloaded: v%d -> v%d", live.version, candidate.version)
        return ReloadResult(ok=True, version=candidate.version)
