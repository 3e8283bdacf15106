"""Priority-ordered refresh of content managers."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from time import perf_counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metadeploy.domain.ports.persistence import SessionSync

log = logging.getLogger(__name__)

# at most one refresh in flight per process
_REFRESH_LOCK = threading.Lock()


class ContentManager(ABC):
    """Unit of content refreshed on every startup; lower priority runs first."""

    priority: int = 0

    @abstractmethod
    def refresh(self) -> None: ...

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(slots=True)
class RefreshResult:
    """Outcome of a completed refresh of all matching content managers."""

    refreshed: tuple[str, ...]
    elapsed_ms: float

    @property
    def count(self) -> int:
        return len(self.refreshed)


def order_by_priority[T: ContentManager](managers: Iterable[T]) -> list[T]:
    """Sort ascending by priority; ties keep encounter order."""

    return sorted(managers, key=lambda manager: manager.priority)


@dataclass(slots=True)
class ContentRefresher:
    session: SessionSync

    def refresh_manager(self, manager: ContentManager) -> None:
        """Refresh one manager, then flush and clear the session."""

        log.info("Refreshing %s...", manager.name)
        start = perf_counter()
        manager.refresh()

        # a content manager may load a large working set into the session
        self.session.flush()
        self.session.clear()

        log.info("Refreshed %s in %.0fms", manager.name, (perf_counter() - start) * 1000)

    def refresh_content_managers[T: ContentManager](
        self,
        candidates: Iterable[ContentManager],
        manager_type: type[T] | type[ContentManager] = ContentManager,
    ) -> RefreshResult:
        """Refresh every candidate of ``manager_type`` in priority order."""

        with _REFRESH_LOCK:
            start = perf_counter()
            log.info("Refreshing all content managers of type: %s", manager_type.__name__)
            managers = order_by_priority(
                candidate for candidate in candidates if isinstance(candidate, manager_type)
            )
            log.info("Found %s content managers to refresh", len(managers))

            refreshed: list[str] = []
            for manager in managers:
                log.info("Refreshing: %s with priority: %s", manager.name, manager.priority)
                self.refresh_manager(manager)
                refreshed.append(manager.name)

            elapsed_ms = (perf_counter() - start) * 1000
            log.info(
                "Refreshed content managers of type %s in %.0fms",
                manager_type.__name__,
                elapsed_ms,
            )
            return RefreshResult(refreshed=tuple(refreshed), elapsed_ms=elapsed_ms)
